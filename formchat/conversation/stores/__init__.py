"""Session stores for conversation management."""

from formchat.conversation.store import SessionStore
from formchat.conversation.stores.inmemory import InMemorySessionStore
from formchat.conversation.stores.redis import RedisSessionStore

__all__ = [
    "SessionStore",
    "InMemorySessionStore",
    "RedisSessionStore",
]
