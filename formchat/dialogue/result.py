"""Turn and session-start result models."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from formchat.forms.identifiers import FormIdentifier


class TurnPhase(str, Enum):
    """Phases of one turn, always run in this order."""

    REASON = "reason"
    PLAN = "plan"
    ACT = "act"
    REFLECT = "reflect"


class PhaseTiming(BaseModel):
    """Timing for a single turn phase."""

    phase: TurnPhase = Field(..., description="Phase name")
    started_at: datetime = Field(..., description="When the phase started")
    duration_ms: float = Field(default=0.0, description="Elapsed milliseconds")


class TurnResult(BaseModel):
    """Outcome of one processed turn.

    `analysis` and `phase_timings` are for logging and debugging; the HTTP
    layer does not return them.
    """

    session_id: str = Field(..., description="Session the turn belongs to")
    message: str = Field(..., description="Agent reply")
    fields: dict[str, Any] = Field(default_factory=dict, description="All collected values")
    is_complete: bool = Field(default=False, description="Every required field is filled")
    form_identifier: FormIdentifier | None = Field(
        default=None, description="Form the session is filling"
    )
    deadline: datetime | None = Field(default=None, description="Form deadline, if set")
    deadline_warning: bool = Field(
        default=False, description="Deadline falls within the warning window"
    )
    missing_fields: list[str] = Field(
        default_factory=list, description="Required fields still blank"
    )
    analysis: str | None = Field(default=None, description="Reason phase output")
    phase_timings: list[PhaseTiming] = Field(
        default_factory=list, description="Per-phase timing"
    )


class StartResult(BaseModel):
    """Outcome of starting a session."""

    session_id: str = Field(..., description="New session ID")
    welcome_text: str = Field(..., description="Opening agent message")
    form_identifier: FormIdentifier = Field(..., description="Requested form")
    form_found: bool = Field(
        default=True, description="The form resolved and a session was saved"
    )
