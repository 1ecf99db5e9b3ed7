"""Conversation domain models.

Contains the Pydantic models for conversation state:
- Sessions for runtime slot-filling state
- Messages for the append-only transcript
"""

from formchat.conversation.models.enums import MessageRole
from formchat.conversation.models.session import Message, Session, new_session_id

__all__ = [
    # Enums
    "MessageRole",
    # Session models
    "Message",
    "Session",
    "new_session_id",
]
