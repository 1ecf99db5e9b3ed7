"""Chat endpoints: start a session and process user messages."""

from fastapi import APIRouter

from formchat.api.dependencies import DialogueEngineDep
from formchat.api.models.chat import (
    ChatRequest,
    ChatResponse,
    StartChatRequest,
    StartChatResponse,
)
from formchat.forms.identifiers import (
    HardcodedForm,
    TemplateForm,
    parse_form_identifier,
)
from formchat.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _parse_form(raw: str | None) -> HardcodedForm | TemplateForm | None:
    """Parse an optional wire form value; blank means not given."""
    if raw is None or not raw.strip():
        return None
    return parse_form_identifier(raw)


@router.post("/chat/start", response_model=StartChatResponse)
async def start_chat(
    engine: DialogueEngineDep,
    request: StartChatRequest | None = None,
) -> StartChatResponse:
    """Start a chat session and return its welcome message."""
    request = request or StartChatRequest()
    result = await engine.start_session(
        form_identifier=_parse_form(request.form_type),
        session_id=request.session_id or None,
    )
    return StartChatResponse.from_result(result)


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, engine: DialogueEngineDep) -> ChatResponse:
    """Process one user message and return the agent's reply.

    Unknown forms produce an apology reply rather than an error.
    """
    result = await engine.process_turn(
        session_id=request.session_id,
        utterance=request.message,
        client_fields=request.form_data,
        form_identifier=_parse_form(request.form_type),
        use_auto_fill=request.use_auto_fill,
    )
    return ChatResponse.from_result(result)
