"""Form deadline tracking."""

from formchat.deadlines.models import DeadlineReminder
from formchat.deadlines.service import DeadlineProvider, DeadlineService

__all__ = [
    "DeadlineReminder",
    "DeadlineProvider",
    "DeadlineService",
]
