"""Domain error hierarchy.

Core components raise these errors; the HTTP layer maps them onto
FormChatAPIError responses.
"""

from typing import Any


class FormChatError(Exception):
    """Base exception for all formchat domain errors."""

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []


class InvalidTurnError(FormChatError):
    """Raised when a turn request is rejected before any phase runs.

    Examples:
        - Blank session id
        - Blank utterance
        - Client-supplied field values that cannot be coerced
    """

    pass


class SchemaNotFoundError(FormChatError):
    """Raised when a form identifier does not resolve to a schema.

    Unknown template ids and inactive templates both raise this.
    """

    def __init__(self, form_identifier: str) -> None:
        super().__init__(f"No form found for identifier '{form_identifier}'")
        self.form_identifier = form_identifier


class StoreError(FormChatError):
    """Raised when a storage backend fails.

    Store implementations wrap backend-specific errors in this type.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class SessionBusyError(FormChatError):
    """Raised when a turn cannot acquire its session lock in time."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session '{session_id}' is processing another turn")
        self.session_id = session_id
