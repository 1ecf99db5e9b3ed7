"""Session mutex implementations.

Guarantees at most one turn in flight per session. The in-process
variant covers a single event loop; the Redis variant covers several
worker processes sharing one session store.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from dataclasses import dataclass, field

from redis.asyncio import Redis
from redis.exceptions import LockError

from formchat.observability.logging import get_logger

logger = get_logger(__name__)


class SessionMutex(ABC):
    """Per-session lock acquired around each turn.

    Usage:
        async with session_mutex.acquire(session_id) as acquired:
            if acquired:
                # Safe to process
            else:
                # Another turn holds the session
    """

    @abstractmethod
    def acquire(
        self,
        session_id: str,
        blocking_timeout: float | None = None,
    ) -> AbstractAsyncContextManager[bool]:
        """Acquire the lock for a session, yielding whether it was acquired."""
        pass

    @abstractmethod
    async def is_locked(self, session_id: str) -> bool:
        """Check if a session is currently locked."""
        pass


@dataclass
class _LockEntry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class InProcessSessionMutex(SessionMutex):
    """asyncio.Lock registry keyed by session id.

    Locks are created on demand and dropped once no turn holds or waits
    for them.
    """

    def __init__(self, blocking_timeout: float = 5.0) -> None:
        self._blocking_timeout = blocking_timeout
        self._locks: dict[str, _LockEntry] = {}

    @asynccontextmanager
    async def acquire(
        self,
        session_id: str,
        blocking_timeout: float | None = None,
    ) -> AsyncIterator[bool]:
        timeout = self._blocking_timeout if blocking_timeout is None else blocking_timeout

        entry = self._locks.get(session_id)
        if entry is None:
            entry = self._locks[session_id] = _LockEntry()
        entry.users += 1

        acquired = False
        try:
            try:
                await asyncio.wait_for(entry.lock.acquire(), timeout=timeout)
                acquired = True
            except TimeoutError:
                logger.warning("session_lock_timeout", session_id=session_id)
            yield acquired
        finally:
            if acquired:
                entry.lock.release()
            entry.users -= 1
            if entry.users == 0:
                self._locks.pop(session_id, None)

    async def is_locked(self, session_id: str) -> bool:
        entry = self._locks.get(session_id)
        return entry is not None and entry.lock.locked()


class RedisSessionMutex(SessionMutex):
    """Redis-backed distributed lock for session-level mutual exclusion.

    Lock key format: sesslock:{session_id}
    """

    def __init__(
        self,
        redis: Redis,
        lock_timeout: int = 30,
        blocking_timeout: float = 5.0,
    ) -> None:
        """Initialize session mutex.

        Args:
            redis: Redis client instance
            lock_timeout: How long lock is held before auto-release (seconds)
            blocking_timeout: How long to wait when trying to acquire (seconds)
        """
        self._redis = redis
        self._lock_timeout = lock_timeout
        self._blocking_timeout = blocking_timeout

    def _key(self, session_id: str) -> str:
        """Build Redis lock key."""
        return f"sesslock:{session_id}"

    @asynccontextmanager
    async def acquire(
        self,
        session_id: str,
        blocking_timeout: float | None = None,
    ) -> AsyncIterator[bool]:
        timeout = self._blocking_timeout if blocking_timeout is None else blocking_timeout

        lock = self._redis.lock(
            self._key(session_id),
            timeout=self._lock_timeout,
            blocking_timeout=timeout,
        )

        acquired = await lock.acquire()
        if not acquired:
            logger.warning("session_lock_timeout", session_id=session_id)
        try:
            yield acquired
        finally:
            if acquired:
                try:
                    await lock.release()
                except LockError:
                    # Lock expired while the turn was running
                    logger.warning("session_lock_expired", session_id=session_id)

    async def is_locked(self, session_id: str) -> bool:
        return await self._redis.exists(self._key(session_id)) > 0
