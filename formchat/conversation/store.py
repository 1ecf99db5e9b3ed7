"""SessionStore abstract interface."""

from abc import ABC, abstractmethod

from formchat.conversation.models import Session


class SessionStore(ABC):
    """Abstract interface for session storage.

    Stores own eviction; the dialogue engine never deletes sessions.
    """

    @abstractmethod
    async def get(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        pass

    @abstractmethod
    async def save(self, session: Session) -> str:
        """Save a session, returning its ID."""
        pass

    @abstractmethod
    async def delete(self, session_id: str) -> bool:
        """Delete a session."""
        pass
