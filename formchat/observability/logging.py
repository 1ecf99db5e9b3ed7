"""structlog setup for formchat.

Events are rendered as JSON lines in deployed environments and as colored
console output in development. Everything a student types or that
identifies them (messages, names, ids, contact details) is PII: values
under those keys are replaced wholesale, and emails, phone numbers or
Z-numbers appearing inside other strings are masked.
"""

import logging
import re
import sys
from typing import Any, cast

import structlog
from structlog.types import EventDict, WrappedLogger

REDACTED = "[REDACTED]"

# Keys whose values are never logged, compared lower-cased
CREDENTIAL_KEYS: frozenset[str] = frozenset({
    "api_key", "apikey", "authorization", "password", "secret", "token",
})
STUDENT_KEYS: frozenset[str] = frozenset({
    "advisorname", "email", "phone", "student_id", "student_name",
    "studentid", "studentname", "subject_id", "utterance",
})

# (pattern, mask) applied in order to every other string value
PII_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}"), "[EMAIL]"),
    (re.compile(r"(?<!\d)(?:\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)"), "[PHONE]"),
    (re.compile(r"\b[Zz]\d{7,8}\b"), "[STUDENT_ID]"),
)


class PIIRedactor:
    """structlog processor that masks student PII in event values."""

    def __init__(self, sensitive_keys: frozenset[str] = CREDENTIAL_KEYS | STUDENT_KEYS) -> None:
        self._sensitive_keys = sensitive_keys

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        return cast(EventDict, self._redact(event_dict))

    def _redact(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                key: REDACTED if str(key).lower() in self._sensitive_keys else self._redact(item)
                for key, item in value.items()
            }
        if isinstance(value, list | tuple):
            return [self._redact(item) for item in value]
        if isinstance(value, str):
            for pattern, mask in PII_PATTERNS:
                value = pattern.sub(mask, value)
        return value


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: "json" or "console"
        redact_pii: Install the PIIRedactor processor
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if redact_pii:
        processors.append(PIIRedactor())

    if format == "json":
        processors.extend([
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ])
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    level_num = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger for a module, usually called with __name__."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
