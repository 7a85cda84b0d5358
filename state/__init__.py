# Client-side state: identity, feed, comment threads and the screens built on them
from .client import AppClient, AuthClient, AuthEventBus, create_client
from .identity import IdentityCache, IdentityState
from .feed import FeedStore
from .comments import CommentTreeCache
from .storage import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore
