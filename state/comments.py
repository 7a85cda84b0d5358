import asyncio
import logging
import sqlite3
from typing import Dict, Iterable, List, Optional, Set

from exceptions import AppError, ConflictError, InvalidInputError, NotFoundError, PermissionDeniedError
from state.banner import Banner
from state.client import AppClient
from state.feed import FeedStore
from state.models import AuthorSummary, CommentNode

logger = logging.getLogger(__name__)


class CommentTreeCache:
    """Per-post comment threads, loaded lazily.

    Top-level comments are fetched when a post's thread is opened, replies when
    a comment's reply composer is opened. The set of comments the viewer has
    liked grows for the life of the session and is dropped by ``reset``.
    """

    def __init__(self, client: AppClient, feed: Optional[FeedStore] = None, banner: Optional[Banner] = None):
        self.client = client
        self.feed = feed
        self.banner = banner or Banner()
        self.threads: Dict[int, List[CommentNode]] = {}
        self.liked_comment_ids: Set[int] = set()
        self._likes_in_flight: Set[int] = set()

    def get_thread(self, post_id: int) -> Optional[List[CommentNode]]:
        return self.threads.get(post_id)

    def is_liked(self, comment_id: int) -> bool:
        return comment_id in self.liked_comment_ids

    def find(self, post_id: int, comment_id: int) -> Optional[CommentNode]:
        for node in self.threads.get(post_id, []):
            found = node.find(comment_id)
            if found is not None:
                return found
        return None

    async def _viewer_id(self) -> Optional[int]:
        user = await self.client.auth.get_user()
        return user["id"] if user else None

    async def _remember_likes(self, viewer_id: Optional[int], rows: List[dict]):
        if viewer_id is None or not rows:
            return
        liked = await asyncio.to_thread(
            self.client.comments.liked_comment_ids, viewer_id, [row["id"] for row in rows]
        )
        self.liked_comment_ids |= liked

    async def _to_nodes(self, rows: Iterable[dict]) -> List[CommentNode]:
        rows = list(rows)
        summaries = await asyncio.to_thread(
            self.client.profiles.get_summaries, {row["user_id"] for row in rows}
        ) if rows else {}
        nodes = []
        for row in rows:
            summary = summaries.get(row["user_id"])
            author = AuthorSummary(username=summary["username"], avatar_url=summary.get("avatar_url")) if summary else None
            nodes.append(CommentNode(**row, author=author))
        return nodes

    async def load_top_level(self, post_id: int) -> List[CommentNode]:
        try:
            viewer_id = await self._viewer_id()
            rows = await asyncio.to_thread(self.client.comments.list_top_level, post_id)
            await self._remember_likes(viewer_id, rows)
            nodes = await self._to_nodes(rows)
        except (AppError, sqlite3.Error) as e:
            logger.error("Error fetching comments for post %s: %s", post_id, e)
            self.banner.show_error(getattr(e, "message", "Failed to load comments"))
            nodes = []
        self.threads[post_id] = nodes
        return nodes

    async def ensure_loaded(self, post_id: int) -> List[CommentNode]:
        if post_id not in self.threads:
            return await self.load_top_level(post_id)
        return self.threads[post_id]

    async def load_replies(self, post_id: int, parent_comment_id: int) -> List[CommentNode]:
        try:
            viewer_id = await self._viewer_id()
            rows = await asyncio.to_thread(self.client.comments.list_replies, parent_comment_id)
            await self._remember_likes(viewer_id, rows)
            replies = await self._to_nodes(rows)
        except (AppError, sqlite3.Error) as e:
            logger.error("Error fetching replies for comment %s: %s", parent_comment_id, e)
            return []

        parent = self.find(post_id, parent_comment_id)
        if parent is not None:
            parent.attach_replies(replies)
        return replies

    async def ensure_replies_loaded(self, post_id: int, parent_comment_id: int) -> List[CommentNode]:
        parent = self.find(post_id, parent_comment_id)
        if parent is not None and parent.replies_loaded:
            return parent.replies
        return await self.load_replies(post_id, parent_comment_id)

    async def add_comment(self, post_id: int, content: str,
                          parent_comment_id: Optional[int] = None) -> Optional[CommentNode]:
        if not content.strip():
            return None
        try:
            user = await self.client.auth.require_user()
            parent = None
            if parent_comment_id is not None:
                parent = self.find(post_id, parent_comment_id)
                if parent is not None and parent.is_reply:
                    raise InvalidInputError("Replies cannot be nested more than one level deep")

            row = await asyncio.to_thread(
                self.client.comments.create, post_id, user["id"], content, parent_comment_id
            )
            node = (await self._to_nodes([row]))[0]
        except AppError as e:
            logger.error("Error adding comment to post %s: %s", post_id, e)
            self.banner.show_error(e.message)
            return None

        if parent is not None:
            parent.add_reply(node)
        elif parent_comment_id is None:
            self.threads.setdefault(post_id, []).append(node)
        if self.feed is not None:
            self.feed.adjust_comment_count(post_id, 1)
        return node

    async def delete_comment(self, post_id: int, comment_id: int,
                             parent_comment_id: Optional[int] = None) -> bool:
        try:
            user = await self.client.auth.require_user()
            node = self.find(post_id, comment_id)
            if node is not None:
                author_id = node.user_id
            else:
                row = await asyncio.to_thread(self.client.comments.get, comment_id)
                if row is None:
                    raise NotFoundError("Comment not found")
                author_id = row["user_id"]
            if author_id != user["id"]:
                raise PermissionDeniedError("You can only delete your own comments")
            removed = await asyncio.to_thread(self.client.comments.delete, comment_id)
        except AppError as e:
            logger.error("Error deleting comment %s: %s", comment_id, e)
            self.banner.show_error(e.message)
            return False

        if parent_comment_id is not None:
            parent = self.find(post_id, parent_comment_id)
            if parent is not None:
                parent.remove_reply(comment_id)
        elif post_id in self.threads:
            self.threads[post_id] = [c for c in self.threads[post_id] if c.id != comment_id]
        if self.feed is not None and removed:
            self.feed.adjust_comment_count(post_id, -removed)
        return True

    async def toggle_comment_like(self, post_id: int, comment_id: int) -> bool:
        if comment_id in self._likes_in_flight:
            return False
        self._likes_in_flight.add(comment_id)
        try:
            user = await self.client.auth.require_user()
            if comment_id in self.liked_comment_ids:
                count = await asyncio.to_thread(self.client.comments.remove_like, comment_id, user["id"])
                self.liked_comment_ids.discard(comment_id)
            else:
                count = await asyncio.to_thread(self.client.comments.add_like, comment_id, user["id"])
                self.liked_comment_ids.add(comment_id)
        except ConflictError:
            # Liked elsewhere since this thread was loaded
            self.liked_comment_ids.add(comment_id)
            await self._resync_comment(post_id, comment_id)
            return False
        except AppError as e:
            logger.error("Error toggling like on comment %s: %s", comment_id, e)
            self.banner.show_error(e.message)
            return False
        finally:
            self._likes_in_flight.discard(comment_id)

        node = self.find(post_id, comment_id)
        if node is not None:
            node.likes_count = count
        return True

    async def _resync_comment(self, post_id: int, comment_id: int):
        row = await asyncio.to_thread(self.client.comments.get, comment_id)
        node = self.find(post_id, comment_id)
        if node is not None and row is not None:
            node.likes_count = row["likes_count"]

    def clear_threads(self):
        """Forget loaded threads but keep the session's liked comment ids."""
        self.threads = {}
        self._likes_in_flight = set()

    def reset(self):
        self.threads = {}
        self.liked_comment_ids = set()
        self._likes_in_flight = set()
