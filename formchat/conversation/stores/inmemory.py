"""In-memory implementation of SessionStore."""

import time
from collections import OrderedDict
from collections.abc import Callable
from datetime import UTC, datetime

from formchat.conversation.models import Session
from formchat.conversation.store import SessionStore
from formchat.observability.logging import get_logger
from formchat.observability.metrics import ACTIVE_SESSIONS, SESSIONS_EVICTED

logger = get_logger(__name__)


class InMemorySessionStore(SessionStore):
    """In-memory implementation of SessionStore for single-process deployments.

    Sessions expire `ttl_seconds` after their last save and the store
    holds at most `max_sessions`, evicting the least recently used
    session first. Nothing survives a restart.
    """

    def __init__(
        self,
        ttl_seconds: float = 1800,
        max_sessions: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize empty storage.

        Args:
            ttl_seconds: Idle time after which a session expires
            max_sessions: LRU bound on stored sessions
            clock: Monotonic time source, injectable for tests
        """
        self._ttl_seconds = ttl_seconds
        self._max_sessions = max_sessions
        self._clock = clock
        # session_id -> (session, saved_at), least recently used first
        self._sessions: OrderedDict[str, tuple[Session, float]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    async def get(self, session_id: str) -> Session | None:
        """Get a session by ID, dropping it if it has expired."""
        entry = self._sessions.get(session_id)
        if entry is None:
            return None

        session, saved_at = entry
        if self._clock() - saved_at >= self._ttl_seconds:
            self._evict(session_id, cause="ttl")
            return None

        self._sessions.move_to_end(session_id)
        return session

    async def save(self, session: Session) -> str:
        """Save a session, returning its ID."""
        session.last_activity_at = datetime.now(UTC)
        self._sessions[session.session_id] = (session, self._clock())
        self._sessions.move_to_end(session.session_id)

        while len(self._sessions) > self._max_sessions:
            oldest_id = next(iter(self._sessions))
            self._evict(oldest_id, cause="lru")

        ACTIVE_SESSIONS.set(len(self._sessions))
        return session.session_id

    async def delete(self, session_id: str) -> bool:
        """Delete a session."""
        if session_id in self._sessions:
            del self._sessions[session_id]
            ACTIVE_SESSIONS.set(len(self._sessions))
            return True
        return False

    def purge_expired(self) -> int:
        """Drop every expired session, returning how many were dropped."""
        now = self._clock()
        expired = [
            session_id
            for session_id, (_, saved_at) in self._sessions.items()
            if now - saved_at >= self._ttl_seconds
        ]
        for session_id in expired:
            self._evict(session_id, cause="ttl")
        return len(expired)

    def _evict(self, session_id: str, cause: str) -> None:
        del self._sessions[session_id]
        SESSIONS_EVICTED.labels(cause=cause).inc()
        ACTIVE_SESSIONS.set(len(self._sessions))
        logger.debug("session_evicted", session_id=session_id, cause=cause)
