import sqlite3
from typing import Iterable, List, Optional, Protocol, Set

from database import get_db
from exceptions import ConflictError, InvalidInputError, NotFoundError
from utils.time_utils import now_iso

COMMENT_COLUMNS = ("id", "post_id", "user_id", "content", "parent_comment_id", "created_at", "likes_count")


class CommentRepository(Protocol):
    def list_top_level(self, post_id: int) -> List[dict]: ...
    def list_replies(self, parent_comment_id: int) -> List[dict]: ...
    def get(self, comment_id: int) -> Optional[dict]: ...
    def create(self, post_id: int, user_id: int, content: str, parent_comment_id: Optional[int] = None) -> dict: ...
    def delete(self, comment_id: int) -> int: ...
    def liked_comment_ids(self, user_id: int, comment_ids: Iterable[int]) -> Set[int]: ...
    def add_like(self, comment_id: int, user_id: int) -> int: ...
    def remove_like(self, comment_id: int, user_id: int) -> int: ...


def _row_to_comment(row) -> dict:
    comment = dict(zip(COMMENT_COLUMNS, row))
    comment["likes_count"] = comment["likes_count"] or 0
    return comment


def _likes_count(cursor, comment_id: int) -> int:
    cursor.execute("SELECT likes_count FROM comments WHERE id = ?", (comment_id,))
    row = cursor.fetchone()
    if not row:
        raise NotFoundError("Comment not found")
    return row[0] or 0


class SqliteCommentRepository:
    """Comments are two levels deep: a reply's parent is always a top-level comment.

    Creating or deleting comments keeps posts.comments_count in step; deleting a
    top-level comment cascades to its replies and each removed row is counted.
    """

    def _select(self, where: str, params) -> List[dict]:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {', '.join(COMMENT_COLUMNS)} FROM comments WHERE {where} ORDER BY created_at ASC, id ASC",
                params
            )
            return [_row_to_comment(row) for row in cursor.fetchall()]

    def list_top_level(self, post_id: int) -> List[dict]:
        return self._select("post_id = ? AND parent_comment_id IS NULL", (post_id,))

    def list_replies(self, parent_comment_id: int) -> List[dict]:
        return self._select("parent_comment_id = ?", (parent_comment_id,))

    def get(self, comment_id: int) -> Optional[dict]:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {', '.join(COMMENT_COLUMNS)} FROM comments WHERE id = ?", (comment_id,))
            row = cursor.fetchone()
            return _row_to_comment(row) if row else None

    def create(self, post_id: int, user_id: int, content: str, parent_comment_id: Optional[int] = None) -> dict:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM posts WHERE id = ?", (post_id,))
            if not cursor.fetchone():
                raise NotFoundError("Post not found")
            if parent_comment_id is not None:
                cursor.execute("SELECT post_id, parent_comment_id FROM comments WHERE id = ?", (parent_comment_id,))
                parent = cursor.fetchone()
                if not parent:
                    raise NotFoundError("Parent comment not found")
                if parent[0] != post_id:
                    raise InvalidInputError("Parent comment belongs to a different post")
                if parent[1] is not None:
                    raise InvalidInputError("Replies cannot be nested more than one level deep")
            cursor.execute(
                "INSERT INTO comments (post_id, user_id, content, parent_comment_id, created_at) VALUES (?, ?, ?, ?, ?)",
                (post_id, user_id, content, parent_comment_id, now_iso())
            )
            comment_id = cursor.lastrowid
            cursor.execute("UPDATE posts SET comments_count = comments_count + 1 WHERE id = ?", (post_id,))
            conn.commit()
        return self.get(comment_id)

    def delete(self, comment_id: int) -> int:
        """Delete a comment (and its replies); returns the number of comment rows removed"""
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT post_id FROM comments WHERE id = ?", (comment_id,))
            row = cursor.fetchone()
            if not row:
                return 0
            post_id = row[0]
            cursor.execute("SELECT COUNT(*) FROM comments WHERE parent_comment_id = ?", (comment_id,))
            removed = 1 + cursor.fetchone()[0]
            cursor.execute("DELETE FROM comments WHERE id = ?", (comment_id,))
            cursor.execute(
                "UPDATE posts SET comments_count = MAX(comments_count - ?, 0) WHERE id = ?",
                (removed, post_id)
            )
            conn.commit()
        return removed

    def liked_comment_ids(self, user_id: int, comment_ids: Iterable[int]) -> Set[int]:
        ids = list(comment_ids)
        if not ids:
            return set()
        placeholders = ", ".join("?" for _ in ids)
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT comment_id FROM comment_likes WHERE user_id = ? AND comment_id IN ({placeholders})",
                [user_id] + ids
            )
            return {row[0] for row in cursor.fetchall()}

    def add_like(self, comment_id: int, user_id: int) -> int:
        with get_db() as conn:
            cursor = conn.cursor()
            _likes_count(cursor, comment_id)
            try:
                cursor.execute("INSERT INTO comment_likes (comment_id, user_id) VALUES (?, ?)", (comment_id, user_id))
            except sqlite3.IntegrityError as e:
                raise ConflictError("Comment already liked") from e
            cursor.execute("UPDATE comments SET likes_count = likes_count + 1 WHERE id = ?", (comment_id,))
            likes_count = _likes_count(cursor, comment_id)
            conn.commit()
        return likes_count

    def remove_like(self, comment_id: int, user_id: int) -> int:
        with get_db() as conn:
            cursor = conn.cursor()
            _likes_count(cursor, comment_id)
            cursor.execute("DELETE FROM comment_likes WHERE comment_id = ? AND user_id = ?", (comment_id, user_id))
            if cursor.rowcount:
                cursor.execute("UPDATE comments SET likes_count = MAX(likes_count - 1, 0) WHERE id = ?", (comment_id,))
            likes_count = _likes_count(cursor, comment_id)
            conn.commit()
        return likes_count
