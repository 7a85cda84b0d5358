"""Who is looking at the app right now.

The cache starts in UNKNOWN, moves to CHECKING while it reads the persisted
session and the matching profile, and settles on AUTHENTICATED or ANONYMOUS.
Anything unexpected during the check (timeout, store error, missing profile
or username) settles on ANONYMOUS.
"""
import asyncio
import logging
import sqlite3
from enum import Enum
from typing import Callable, List, Optional, Set

import config
from exceptions import AppError
from state.client import SIGNED_OUT, AppClient

logger = logging.getLogger(__name__)


class IdentityState(str, Enum):
    UNKNOWN = "unknown"
    CHECKING = "checking"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class IdentityCache:
    def __init__(self, client: AppClient, timeout: float = config.AUTH_CHECK_TIMEOUT_SECONDS):
        self.client = client
        self.timeout = timeout
        self.state = IdentityState.UNKNOWN
        self.profile: Optional[dict] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._pending: Set[asyncio.Task] = set()
        self._logout_listeners: List[Callable[[], None]] = []
        # Bumped on every fall back to ANONYMOUS; stale profile fetches compare against it
        self._generation = 0

    @property
    def is_authenticated(self) -> bool:
        return self.state == IdentityState.AUTHENTICATED

    @property
    def user_id(self) -> Optional[int]:
        return self.profile["id"] if self.is_authenticated else None

    @property
    def username(self) -> Optional[str]:
        return self.profile["username"] if self.is_authenticated else None

    def on_logout(self, listener: Callable[[], None]):
        """Register a callback run whenever the cache falls back to ANONYMOUS."""
        self._logout_listeners.append(listener)

    def _set_authenticated(self, profile: dict):
        self.profile = profile
        self.state = IdentityState.AUTHENTICATED

    def _set_anonymous(self):
        self._generation += 1
        was_authenticated = self.is_authenticated
        self.profile = None
        self.state = IdentityState.ANONYMOUS
        if was_authenticated:
            for listener in list(self._logout_listeners):
                listener()

    async def start(self):
        """Subscribe to auth events and resolve the current session, bounded by ``timeout``."""
        if self._unsubscribe is None:
            self._unsubscribe = self.client.auth.on_auth_state_change(self._on_auth_event)
        self.state = IdentityState.CHECKING
        try:
            await asyncio.wait_for(self._check(), self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Auth check timed out after %.1fs", self.timeout)
            self._set_anonymous()

    async def _check(self):
        try:
            session = await self.client.auth.get_session()
        except (AppError, sqlite3.Error) as e:
            logger.error("Session lookup failed: %s", e)
            session = None
        await self._apply_session(session)

    async def _apply_session(self, session: Optional[dict]):
        user = (session or {}).get("user")
        if not user:
            self._set_anonymous()
            return
        generation = self._generation
        try:
            profile = await asyncio.to_thread(self.client.profiles.get_by_id, user["id"])
        except (AppError, sqlite3.Error) as e:
            logger.error("Profile fetch failed for user %s: %s", user["id"], e)
            profile = None
        if generation != self._generation:
            logger.debug("Dropping profile for user %s fetched across a sign-out", user["id"])
            return
        if not profile or not profile.get("username"):
            self._set_anonymous()
        else:
            self._set_authenticated(profile)

    def _on_auth_event(self, event: str, session: Optional[dict]):
        logger.debug("Auth event %s", event)
        if event == SIGNED_OUT:
            for task in list(self._pending):
                task.cancel()
            self._set_anonymous()
            return
        task = asyncio.ensure_future(self._apply_session(session))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def settle(self):
        """Wait for profile refreshes triggered by auth events."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def refresh(self):
        await self._apply_session(await self.client.auth.get_session())

    async def logout(self):
        await self.client.auth.sign_out()
        self._set_anonymous()

    def close(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
