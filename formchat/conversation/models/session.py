"""Session models for conversation domain."""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from formchat.conversation.models.enums import MessageRole
from formchat.forms.identifiers import FormIdentifier


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


def new_session_id() -> str:
    """Generate a session identifier."""
    return str(uuid4())


class Message(BaseModel):
    """One transcript entry. Transcripts are append-only."""

    model_config = ConfigDict(frozen=True)

    role: MessageRole = Field(..., description="Who wrote the message")
    content: str = Field(..., description="Message text")
    timestamp: datetime = Field(default_factory=utc_now, description="When it was written")


class Session(BaseModel):
    """Runtime slot-filling state for one conversation.

    `fields` only ever grows: a value is written to a slot that is unset
    or blank, and a filled slot is never cleared by a later turn.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    session_id: str = Field(default_factory=new_session_id, description="Unique identifier")
    form_identifier: FormIdentifier = Field(..., description="Form being filled")
    fields: dict[str, Any] = Field(default_factory=dict, description="Collected values")
    history: list[Message] = Field(default_factory=list, description="Transcript")
    is_complete: bool = Field(default=False, description="All required fields filled")
    turn_count: int = Field(default=0, description="Total turns")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")
    last_activity_at: datetime = Field(default_factory=utc_now, description="Last activity")
