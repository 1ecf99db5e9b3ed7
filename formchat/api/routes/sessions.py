"""Session transcript endpoint."""

from fastapi import APIRouter

from formchat.api.dependencies import DialogueEngineDep
from formchat.api.exceptions import SessionNotFoundError
from formchat.api.models.chat import SessionResponse

router = APIRouter()


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, engine: DialogueEngineDep) -> SessionResponse:
    """Get a session's collected fields and transcript."""
    session = await engine.get_session(session_id)
    if session is None:
        raise SessionNotFoundError(f"Session {session_id} not found")
    return SessionResponse.from_session(session)
