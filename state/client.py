"""The client object every state component receives.

``AppClient`` bundles the identity client, the typed repositories and object
storage. Components get it passed in explicitly; nothing in ``state`` reaches
for a module-level client.
"""
import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import auth
import file_utils
from exceptions import AuthError
from repositories import (
    CommentRepository,
    PostRepository,
    ProfileRepository,
    SqliteCommentRepository,
    SqlitePostRepository,
    SqliteProfileRepository,
)
from state.storage import KeyValueStore, MemoryKeyValueStore

logger = logging.getLogger(__name__)

SESSION_KEY = "auth.session"

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
USER_UPDATED = "USER_UPDATED"

AuthListener = Callable[[str, Optional[dict]], None]


class AuthEventBus:
    """Fan-out of auth-state changes. Clients sharing a bus behave like tabs of one browser."""

    def __init__(self):
        self._listeners: List[AuthListener] = []

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: str, session: Optional[dict]):
        for listener in list(self._listeners):
            listener(event, session)


class AuthClient:
    """Identity calls plus a persisted session (access token and user)."""

    def __init__(self, storage: KeyValueStore, events: Optional[AuthEventBus] = None):
        self.storage = storage
        self.events = events or AuthEventBus()

    def _read_session(self) -> Optional[dict]:
        raw = self.storage.get(SESSION_KEY)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            self.storage.delete(SESSION_KEY)
            return None

    def _persist(self, session: Optional[dict]):
        if session is None:
            self.storage.delete(SESSION_KEY)
        else:
            self.storage.set(SESSION_KEY, json.dumps(session))

    @property
    def access_token(self) -> Optional[str]:
        session = self._read_session()
        return session.get("access_token") if session else None

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        return self.events.subscribe(listener)

    async def sign_up(self, username: str, email: str, password: str) -> dict:
        await asyncio.to_thread(auth.sign_up, username, email, password)
        return await self.sign_in(email, password)

    async def sign_in(self, identifier: str, password: str) -> dict:
        session = await asyncio.to_thread(auth.sign_in, identifier, password)
        self._persist(session)
        logger.info("Signed in user %s", session["user"]["id"])
        self.events.publish(SIGNED_IN, session)
        return session

    async def sign_out(self):
        token = self.access_token
        self._persist(None)
        if token:
            await asyncio.to_thread(auth.sign_out, token)
        self.events.publish(SIGNED_OUT, None)

    async def get_session(self) -> Optional[dict]:
        """The persisted session, or None once its token has expired or been revoked"""
        session = self._read_session()
        if not session:
            return None
        payload = await asyncio.to_thread(auth.verify_token, session.get("access_token", ""))
        if not payload:
            self._persist(None)
            return None
        return session

    async def get_user(self) -> Optional[dict]:
        token = self.access_token
        if not token:
            return None
        try:
            return await asyncio.to_thread(auth.get_user, token)
        except AuthError:
            return None

    async def require_user(self) -> dict:
        user = await self.get_user()
        if not user:
            raise AuthError("Not authenticated")
        return user

    def notify_user_updated(self):
        self.events.publish(USER_UPDATED, self._read_session())


class LocalObjectStorage:
    def upload(self, bucket: str, path: str, content: bytes, upsert: bool = False) -> str:
        return file_utils.upload(bucket, path, content, upsert=upsert)

    def get_public_url(self, bucket: str, path: str) -> str:
        return file_utils.get_public_url(bucket, path)

    def remove(self, bucket: str, paths: List[str]) -> List[str]:
        return file_utils.remove(bucket, paths)


@dataclass
class AppClient:
    auth: AuthClient
    profiles: ProfileRepository = field(default_factory=SqliteProfileRepository)
    posts: PostRepository = field(default_factory=SqlitePostRepository)
    comments: CommentRepository = field(default_factory=SqliteCommentRepository)
    storage: LocalObjectStorage = field(default_factory=LocalObjectStorage)


def create_client(storage: Optional[KeyValueStore] = None, events: Optional[AuthEventBus] = None) -> AppClient:
    return AppClient(auth=AuthClient(storage if storage is not None else MemoryKeyValueStore(), events))
