"""Redis implementation of SessionStore.

Sessions are stored as JSON under `{key_prefix}:{session_id}` with a key
TTL that is refreshed on every save.
"""

import redis.asyncio as redis

from formchat.conversation.models import Session
from formchat.conversation.store import SessionStore
from formchat.errors import StoreError
from formchat.observability.logging import get_logger

logger = get_logger(__name__)


class RedisSessionStore(SessionStore):
    """Redis implementation of SessionStore for multi-process deployments."""

    def __init__(
        self,
        client: redis.Redis,
        ttl_seconds: int = 1800,
        key_prefix: str = "formchat:session",
    ) -> None:
        """Initialize Redis session store.

        Args:
            client: Redis client instance
            ttl_seconds: Key TTL applied on every save
            key_prefix: Prefix for session keys
        """
        self._client = client
        self._ttl_seconds = ttl_seconds
        self._prefix = key_prefix

    def _key(self, session_id: str) -> str:
        """Get storage key for session."""
        return f"{self._prefix}:{session_id}"

    async def get(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        try:
            data = await self._client.get(self._key(session_id))
        except redis.RedisError as e:
            logger.error("redis_get_error", session_id=session_id, error=str(e))
            raise StoreError(f"Failed to get session: {e}", cause=e) from e

        if not data:
            logger.debug("session_not_found", session_id=session_id)
            return None
        return Session.model_validate_json(data)

    async def save(self, session: Session) -> str:
        """Save a session and refresh its TTL."""
        try:
            await self._client.set(
                self._key(session.session_id),
                session.model_dump_json(),
                ex=self._ttl_seconds,
            )
        except redis.RedisError as e:
            logger.error(
                "session_save_error",
                session_id=session.session_id,
                error=str(e),
            )
            raise StoreError(f"Failed to save session: {e}", cause=e) from e

        logger.debug("session_saved", session_id=session.session_id)
        return session.session_id

    async def delete(self, session_id: str) -> bool:
        """Delete a session."""
        try:
            deleted = await self._client.delete(self._key(session_id))
        except redis.RedisError as e:
            logger.error("session_delete_error", session_id=session_id, error=str(e))
            raise StoreError(f"Failed to delete session: {e}", cause=e) from e
        return deleted > 0
