"""Request and response models for chat, session and form endpoints.

Wire names are camelCase (sessionId, formData, formType, ...); snake_case
names are accepted on input too.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from formchat.conversation.models import MessageRole, Session
from formchat.dialogue.result import StartResult, TurnResult
from formchat.forms.models import FieldDef, FormSchema, FormType


class APIModel(BaseModel):
    """Base for API models with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StartChatRequest(APIModel):
    """Request to start a chat session."""

    form_type: str | None = Field(
        default=None, description="Form type value or template id"
    )
    session_id: str | None = Field(
        default=None, description="Client-chosen session id"
    )


class StartChatResponse(APIModel):
    """Response for a started session."""

    session_id: str = Field(..., description="Session id to use for turns")
    message: str = Field(..., description="Welcome message")
    form_type: str = Field(..., description="Requested form")
    form_found: bool = Field(default=True, description="False when the form does not exist")

    @classmethod
    def from_result(cls, result: StartResult) -> "StartChatResponse":
        return cls(
            session_id=result.session_id,
            message=result.welcome_text,
            form_type=result.form_identifier.value,
            form_found=result.form_found,
        )


class ChatRequest(APIModel):
    """One user message."""

    session_id: str = Field(default="", description="Session id")
    message: str = Field(default="", description="User message")
    form_data: dict[str, Any] = Field(
        default_factory=dict, description="Field values held by the client"
    )
    form_type: str | None = Field(
        default=None, description="Form type value or template id"
    )
    use_auto_fill: bool = Field(
        default=False, description="Consent to fill blanks from stored student data"
    )


class ChatResponse(APIModel):
    """Agent reply for one turn."""

    session_id: str
    message: str
    form_data: dict[str, Any] = Field(default_factory=dict)
    form_type: str | None = None
    is_complete: bool = False
    missing_fields: list[str] = Field(default_factory=list)
    deadline: datetime | None = None
    deadline_warning: bool = False

    @classmethod
    def from_result(cls, result: TurnResult) -> "ChatResponse":
        return cls(
            session_id=result.session_id,
            message=result.message,
            form_data=result.fields,
            form_type=result.form_identifier.value if result.form_identifier else None,
            is_complete=result.is_complete,
            missing_fields=result.missing_fields,
            deadline=result.deadline,
            deadline_warning=result.deadline_warning,
        )


class MessageResponse(APIModel):
    """One transcript entry."""

    role: MessageRole
    content: str
    timestamp: datetime


class SessionResponse(APIModel):
    """Session state and transcript."""

    session_id: str
    form_type: str
    form_data: dict[str, Any]
    is_complete: bool
    turn_count: int
    history: list[MessageResponse]
    created_at: datetime
    last_activity_at: datetime

    @classmethod
    def from_session(cls, session: Session) -> "SessionResponse":
        return cls(
            session_id=session.session_id,
            form_type=session.form_identifier.value,
            form_data=session.fields,
            is_complete=session.is_complete,
            turn_count=session.turn_count,
            history=[
                MessageResponse(role=m.role, content=m.content, timestamp=m.timestamp)
                for m in session.history
            ],
            created_at=session.created_at,
            last_activity_at=session.last_activity_at,
        )


class FormSummary(APIModel):
    """A form a session can be started with."""

    id: str
    kind: Literal["hardcoded", "template"]
    name: str
    description: str
    required_fields: list[str]
    optional_fields: list[str]
    fields: list[FieldDef]

    @classmethod
    def from_schema(cls, schema: FormSchema) -> "FormSummary":
        hardcoded = schema.id in {form_type.value for form_type in FormType}
        return cls(
            id=schema.id,
            kind="hardcoded" if hardcoded else "template",
            name=schema.name,
            description=schema.description,
            required_fields=schema.required_fields,
            optional_fields=schema.optional_fields,
            fields=schema.fields,
        )


class FormListResponse(APIModel):
    """Available forms."""

    forms: list[FormSummary]


class HealthResponse(APIModel):
    """Service health."""

    status: Literal["healthy", "unhealthy"]
    version: str
    timestamp: datetime
    session_backend: str
