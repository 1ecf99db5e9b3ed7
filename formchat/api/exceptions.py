"""API exception hierarchy for consistent error handling.

All API exceptions inherit from FormChatAPIError, which provides
status_code and error_code attributes used by the global exception
handler to generate consistent error responses. Domain errors are
translated with `from_domain_error`.
"""

from typing import Any

from formchat.api.models.errors import ErrorCode
from formchat.errors import (
    FormChatError,
    InvalidTurnError,
    SessionBusyError,
    StoreError,
)


class FormChatAPIError(Exception):
    """Base exception for all API errors.

    Subclasses set status_code and error_code to define the HTTP response.
    """

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None) -> None:
        self.message = message
        self.details = details or []
        super().__init__(message)


class InvalidRequestError(FormChatAPIError):
    """Raised when request validation fails."""

    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST


class SessionNotFoundError(FormChatAPIError):
    """Raised when session_id doesn't exist."""

    status_code = 404
    error_code = ErrorCode.SESSION_NOT_FOUND


class SessionBusyAPIError(FormChatAPIError):
    """Raised when a session is locked by another turn."""

    status_code = 409
    error_code = ErrorCode.SESSION_BUSY


class StoreUnavailableError(FormChatAPIError):
    """Raised when a storage backend fails."""

    status_code = 503
    error_code = ErrorCode.STORE_UNAVAILABLE


_DOMAIN_ERRORS: tuple[tuple[type[FormChatError], type[FormChatAPIError]], ...] = (
    (InvalidTurnError, InvalidRequestError),
    (SessionBusyError, SessionBusyAPIError),
    (StoreError, StoreUnavailableError),
)


def from_domain_error(exc: FormChatError) -> FormChatAPIError:
    """Translate a domain error into its API error."""
    for domain_type, api_type in _DOMAIN_ERRORS:
        if isinstance(exc, domain_type):
            return api_type(exc.message, details=exc.details)
    return FormChatAPIError(exc.message, details=exc.details)
