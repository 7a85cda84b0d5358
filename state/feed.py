import asyncio
import logging
import sqlite3
from typing import Callable, List, Optional, Set

from exceptions import AppError, ConflictError, NotFoundError, PermissionDeniedError
from file_utils import POSTS_BUCKET, generate_post_media_path, path_from_public_url
from state.banner import Banner
from state.client import AppClient
from state.models import FeedPost, MediaFile

logger = logging.getLogger(__name__)

DELETE_POST_PROMPT = "Are you sure you want to delete this post?"


class FeedStore:
    """The posts of one profile, newest first, with the viewer's like flags.

    ``confirm`` is asked before a delete; without one, deletes go ahead.
    """

    def __init__(self, client: AppClient, banner: Optional[Banner] = None,
                 confirm: Optional[Callable[[str], bool]] = None):
        self.client = client
        self.banner = banner or Banner()
        self.confirm = confirm
        self.posts: List[FeedPost] = []
        self.target_user_id: Optional[int] = None
        self.viewer_id: Optional[int] = None
        self.loading = False
        self.uploading = False
        self._likes_in_flight: Set[int] = set()

    def get(self, post_id: int) -> Optional[FeedPost]:
        for post in self.posts:
            if post.id == post_id:
                return post
        return None

    async def load(self, target_user_id: int, viewer_id: Optional[int]) -> bool:
        self.loading = True
        try:
            rows = await asyncio.to_thread(self.client.posts.list_by_author, target_user_id)
            liked = set()
            if viewer_id is not None and rows:
                liked = await asyncio.to_thread(
                    self.client.posts.liked_post_ids, viewer_id, [row["id"] for row in rows]
                )
            self.posts = [FeedPost(**{**row, "user_liked": row["id"] in liked}) for row in rows]
            self.target_user_id = target_user_id
            self.viewer_id = viewer_id
            return True
        except (AppError, sqlite3.Error) as e:
            logger.error("Error fetching posts for user %s: %s", target_user_id, e)
            self.banner.show_error(getattr(e, "message", "Failed to load posts"))
            return False
        finally:
            self.loading = False

    async def create(self, content: str, media: Optional[MediaFile] = None) -> Optional[FeedPost]:
        if not content.strip() and media is None:
            return None

        self.uploading = True
        try:
            user = await self.client.auth.require_user()
            image_url = None
            if media is not None:
                path = generate_post_media_path(user["id"], media.filename)
                await asyncio.to_thread(self.client.storage.upload, POSTS_BUCKET, path, media.content)
                image_url = self.client.storage.get_public_url(POSTS_BUCKET, path)

            row = await asyncio.to_thread(self.client.posts.create, user["id"], content, image_url)
            post = FeedPost(**{**row, "likes_count": 0, "comments_count": 0, "user_liked": False})
            self.posts.insert(0, post)
            return post
        except AppError as e:
            logger.error("Error creating post: %s", e)
            self.banner.show_error(e.message)
            return None
        finally:
            self.uploading = False

    async def _require_author(self, post_id: int, action: str) -> dict:
        user = await self.client.auth.require_user()
        cached = self.get(post_id)
        if cached is not None:
            author_id = cached.user_id
        else:
            row = await asyncio.to_thread(self.client.posts.get, post_id)
            if row is None:
                raise NotFoundError("Post not found")
            author_id = row["user_id"]
        if author_id != user["id"]:
            raise PermissionDeniedError(f"You can only {action} your own posts")
        return user

    async def update(self, post_id: int, new_content: str) -> bool:
        if not new_content.strip():
            return False
        try:
            await self._require_author(post_id, "edit")
            row = await asyncio.to_thread(self.client.posts.update_content, post_id, new_content)
        except AppError as e:
            logger.error("Error updating post %s: %s", post_id, e)
            self.banner.show_error(e.message)
            return False

        post = self.get(post_id)
        if post is not None:
            post.content = row["content"]
            post.updated_at = row["updated_at"]
        self.banner.show_success("Post updated successfully!")
        return True

    async def delete(self, post_id: int, image_url: Optional[str] = None) -> bool:
        if self.confirm is not None and not self.confirm(DELETE_POST_PROMPT):
            return False
        try:
            await self._require_author(post_id, "delete")
            if image_url:
                await self._remove_media(image_url)
            await asyncio.to_thread(self.client.posts.delete, post_id)
        except AppError as e:
            logger.error("Error deleting post %s: %s", post_id, e)
            self.banner.show_error(e.message)
            return False

        self.posts = [p for p in self.posts if p.id != post_id]
        self.banner.show_success("Post deleted successfully!")
        return True

    async def _remove_media(self, image_url: str):
        path = path_from_public_url(image_url, POSTS_BUCKET)
        if not path:
            return
        try:
            await asyncio.to_thread(self.client.storage.remove, POSTS_BUCKET, [path])
        except (AppError, OSError) as e:
            logger.warning("Could not remove post media %s: %s", path, e)

    async def toggle_like(self, post_id: int, viewer_id: int) -> bool:
        """Flip the viewer's like on a post. Returns False when nothing changed.

        A second toggle for the same post while one is outstanding is ignored,
        and the displayed count is the one the store reports after the write.
        """
        post = self.get(post_id)
        if post is None or post_id in self._likes_in_flight:
            return False

        self._likes_in_flight.add(post_id)
        try:
            if post.user_liked:
                count = await asyncio.to_thread(self.client.posts.remove_like, post_id, viewer_id)
                liked = False
            else:
                count = await asyncio.to_thread(self.client.posts.add_like, post_id, viewer_id)
                liked = True
        except ConflictError:
            await self._resync_like(post_id, viewer_id)
            return False
        except AppError as e:
            logger.error("Error toggling like on post %s: %s", post_id, e)
            self.banner.show_error(e.message)
            return False
        finally:
            self._likes_in_flight.discard(post_id)

        post = self.get(post_id)
        if post is not None:
            post.likes_count = count
            post.user_liked = liked
        return True

    async def _resync_like(self, post_id: int, viewer_id: int):
        row = await asyncio.to_thread(self.client.posts.get, post_id)
        liked = await asyncio.to_thread(self.client.posts.liked_post_ids, viewer_id, [post_id])
        post = self.get(post_id)
        if post is not None and row is not None:
            post.likes_count = row["likes_count"]
            post.user_liked = post_id in liked

    def adjust_comment_count(self, post_id: int, delta: int):
        post = self.get(post_id)
        if post is not None:
            post.comments_count = max(0, post.comments_count + delta)

    def reset(self):
        self.posts = []
        self.target_user_id = None
        self.viewer_id = None
