"""Conversation state: sessions, their stores and per-session locking."""

from formchat.conversation.models import Message, MessageRole, Session
from formchat.conversation.mutex import (
    InProcessSessionMutex,
    RedisSessionMutex,
    SessionMutex,
)
from formchat.conversation.store import SessionStore
from formchat.conversation.stores import InMemorySessionStore, RedisSessionStore

__all__ = [
    "Message",
    "MessageRole",
    "Session",
    "SessionStore",
    "InMemorySessionStore",
    "RedisSessionStore",
    "SessionMutex",
    "InProcessSessionMutex",
    "RedisSessionMutex",
]
