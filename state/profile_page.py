import asyncio
import logging
from typing import Callable, Optional

from exceptions import AppError, NotFoundError
from state.banner import Banner
from state.client import AppClient
from state.comments import CommentTreeCache
from state.feed import FeedStore
from state.identity import IdentityCache

logger = logging.getLogger(__name__)


class ProfilePage:
    """A member's profile header plus their feed and its comment threads.

    Viewing requires an authenticated identity; anonymous viewers get
    ``access_denied`` and nothing is fetched.
    """

    def __init__(self, client: AppClient, identity: IdentityCache,
                 confirm: Optional[Callable[[str], bool]] = None):
        self.client = client
        self.identity = identity
        self.banner = Banner()
        self.feed = FeedStore(client, self.banner, confirm)
        self.comments = CommentTreeCache(client, feed=self.feed, banner=self.banner)
        self.profile: Optional[dict] = None
        self.is_own_profile = False
        self.access_denied = False
        self.loading = False
        self.expanded_post_ids = set()
        self.replying_to: Optional[int] = None
        identity.on_logout(self.reset)

    async def open(self, viewing_username: Optional[str] = None) -> bool:
        self.banner.clear()
        if not self.identity.is_authenticated:
            self.access_denied = True
            self.profile = None
            return False

        self.access_denied = False
        self.loading = True
        try:
            if viewing_username:
                target = await asyncio.to_thread(self.client.profiles.get_by_username, viewing_username)
                if not target:
                    raise NotFoundError("User not found")
            else:
                target = await asyncio.to_thread(self.client.profiles.get_by_id, self.identity.user_id)
                if not target:
                    raise NotFoundError("Profile not found")
        except AppError as e:
            logger.warning("Could not open profile %s: %s", viewing_username or "(own)", e)
            self.profile = None
            self.banner.show_error(e.message)
            return False
        finally:
            self.loading = False

        self.profile = target
        self.is_own_profile = target["id"] == self.identity.user_id
        self.expanded_post_ids = set()
        self.replying_to = None
        self.comments.clear_threads()
        return await self.feed.load(target["id"], self.identity.user_id)

    async def toggle_comments(self, post_id: int) -> bool:
        """Expand or collapse a post's thread. Returns whether it is now expanded."""
        if post_id in self.expanded_post_ids:
            self.expanded_post_ids.discard(post_id)
            return False
        self.expanded_post_ids.add(post_id)
        await self.comments.ensure_loaded(post_id)
        return True

    async def start_reply(self, post_id: int, comment_id: int):
        self.replying_to = comment_id
        await self.comments.ensure_replies_loaded(post_id, comment_id)

    def cancel_reply(self):
        self.replying_to = None

    async def toggle_like(self, post_id: int) -> bool:
        if not self.identity.is_authenticated:
            return False
        return await self.feed.toggle_like(post_id, self.identity.user_id)

    def reset(self):
        self.profile = None
        self.is_own_profile = False
        self.expanded_post_ids = set()
        self.replying_to = None
        self.feed.reset()
        self.comments.reset()
