"""API request, response and error models."""

from formchat.api.models.chat import (
    ChatRequest,
    ChatResponse,
    FormListResponse,
    FormSummary,
    HealthResponse,
    SessionResponse,
    StartChatRequest,
    StartChatResponse,
)
from formchat.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "FormListResponse",
    "FormSummary",
    "HealthResponse",
    "SessionResponse",
    "StartChatRequest",
    "StartChatResponse",
    "ErrorBody",
    "ErrorCode",
    "ErrorDetail",
    "ErrorResponse",
]
