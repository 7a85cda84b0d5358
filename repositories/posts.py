import sqlite3
from typing import Iterable, List, Optional, Protocol, Set

from database import get_db
from exceptions import ConflictError, NotFoundError
from utils.time_utils import now_iso

POST_COLUMNS = ("id", "user_id", "content", "image_url", "created_at", "updated_at", "likes_count", "comments_count")


class PostRepository(Protocol):
    def list_by_author(self, user_id: int) -> List[dict]: ...
    def get(self, post_id: int) -> Optional[dict]: ...
    def create(self, user_id: int, content: str, image_url: Optional[str] = None) -> dict: ...
    def update_content(self, post_id: int, content: str) -> dict: ...
    def delete(self, post_id: int) -> bool: ...
    def liked_post_ids(self, user_id: int, post_ids: Optional[Iterable[int]] = None) -> Set[int]: ...
    def add_like(self, post_id: int, user_id: int) -> int: ...
    def remove_like(self, post_id: int, user_id: int) -> int: ...


def _row_to_post(row) -> dict:
    post = dict(zip(POST_COLUMNS, row))
    post["likes_count"] = post["likes_count"] or 0
    post["comments_count"] = post["comments_count"] or 0
    return post


def _likes_count(cursor, post_id: int) -> int:
    cursor.execute("SELECT likes_count FROM posts WHERE id = ?", (post_id,))
    row = cursor.fetchone()
    if not row:
        raise NotFoundError("Post not found")
    return row[0] or 0


class SqlitePostRepository:
    """Posts and post likes. Like rows and likes_count change in the same transaction."""

    def list_by_author(self, user_id: int) -> List[dict]:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {', '.join(POST_COLUMNS)} FROM posts WHERE user_id = ? ORDER BY created_at DESC, id DESC",
                (user_id,)
            )
            return [_row_to_post(row) for row in cursor.fetchall()]

    def get(self, post_id: int) -> Optional[dict]:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {', '.join(POST_COLUMNS)} FROM posts WHERE id = ?", (post_id,))
            row = cursor.fetchone()
            return _row_to_post(row) if row else None

    def create(self, user_id: int, content: str, image_url: Optional[str] = None) -> dict:
        now = now_iso()
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO posts (user_id, content, image_url, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                (user_id, content, image_url, now, now)
            )
            post_id = cursor.lastrowid
            conn.commit()
        return self.get(post_id)

    def update_content(self, post_id: int, content: str) -> dict:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("UPDATE posts SET content = ?, updated_at = ? WHERE id = ?", (content, now_iso(), post_id))
            if cursor.rowcount == 0:
                raise NotFoundError("Post not found")
            conn.commit()
        return self.get(post_id)

    def delete(self, post_id: int) -> bool:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM posts WHERE id = ?", (post_id,))
            deleted = cursor.rowcount > 0
            conn.commit()
        return deleted

    def liked_post_ids(self, user_id: int, post_ids: Optional[Iterable[int]] = None) -> Set[int]:
        with get_db() as conn:
            cursor = conn.cursor()
            if post_ids is None:
                cursor.execute("SELECT post_id FROM posts_likes WHERE user_id = ?", (user_id,))
            else:
                ids = list(post_ids)
                if not ids:
                    return set()
                placeholders = ", ".join("?" for _ in ids)
                cursor.execute(
                    f"SELECT post_id FROM posts_likes WHERE user_id = ? AND post_id IN ({placeholders})",
                    [user_id] + ids
                )
            return {row[0] for row in cursor.fetchall()}

    def add_like(self, post_id: int, user_id: int) -> int:
        """Insert the (post, user) like row and return the confirmed likes_count"""
        with get_db() as conn:
            cursor = conn.cursor()
            _likes_count(cursor, post_id)
            try:
                cursor.execute("INSERT INTO posts_likes (post_id, user_id) VALUES (?, ?)", (post_id, user_id))
            except sqlite3.IntegrityError as e:
                raise ConflictError("Post already liked") from e
            cursor.execute("UPDATE posts SET likes_count = likes_count + 1 WHERE id = ?", (post_id,))
            likes_count = _likes_count(cursor, post_id)
            conn.commit()
        return likes_count

    def remove_like(self, post_id: int, user_id: int) -> int:
        with get_db() as conn:
            cursor = conn.cursor()
            _likes_count(cursor, post_id)
            cursor.execute("DELETE FROM posts_likes WHERE post_id = ? AND user_id = ?", (post_id, user_id))
            if cursor.rowcount:
                cursor.execute("UPDATE posts SET likes_count = MAX(likes_count - 1, 0) WHERE id = ?", (post_id,))
            likes_count = _likes_count(cursor, post_id)
            conn.commit()
        return likes_count
