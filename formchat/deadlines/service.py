"""Form deadlines.

Deadline information is attached to turn results for display only; it
never affects extraction or completion.
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime

from formchat.deadlines.models import DeadlineReminder
from formchat.forms.identifiers import FormIdentifier
from formchat.observability.logging import get_logger

logger = get_logger(__name__)

SECONDS_PER_DAY = 86_400


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class DeadlineProvider(ABC):
    """Source of form deadlines."""

    @abstractmethod
    def deadline(self, form_identifier: FormIdentifier) -> datetime | None:
        """Deadline for a form, if one is set."""
        pass

    @abstractmethod
    def warning(self, form_identifier: FormIdentifier, days_ahead: int) -> bool:
        """Whether the deadline is today or within `days_ahead` days."""
        pass

    @abstractmethod
    def status_message(
        self, form_identifier: FormIdentifier, warning_days: int = 7
    ) -> str | None:
        """Human-readable deadline status, or None without a deadline."""
        pass


class DeadlineService(DeadlineProvider):
    """In-memory deadline registry."""

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        """Initialize with no deadlines.

        Args:
            clock: Returns the current timezone-aware time, injectable for tests
        """
        self._clock = clock
        self._deadlines: dict[FormIdentifier, datetime] = {}
        self._reminders: dict[tuple[FormIdentifier, str], DeadlineReminder] = {}

    def set_deadline(self, form_identifier: FormIdentifier, deadline: datetime) -> None:
        """Set or replace the deadline for a form."""
        if deadline.tzinfo is None:
            deadline = deadline.replace(tzinfo=UTC)
        self._deadlines[form_identifier] = deadline

    def deadline(self, form_identifier: FormIdentifier) -> datetime | None:
        return self._deadlines.get(form_identifier)

    def days_until(self, form_identifier: FormIdentifier) -> int | None:
        """Whole days until the deadline, rounded up; negative once passed."""
        deadline = self._deadlines.get(form_identifier)
        if deadline is None:
            return None
        remaining = (deadline - self._clock()).total_seconds()
        return math.ceil(remaining / SECONDS_PER_DAY)

    def warning(self, form_identifier: FormIdentifier, days_ahead: int) -> bool:
        days = self.days_until(form_identifier)
        if days is None:
            return False
        return 0 <= days <= days_ahead

    def is_passed(self, form_identifier: FormIdentifier) -> bool:
        """Whether the deadline is in the past."""
        deadline = self._deadlines.get(form_identifier)
        if deadline is None:
            return False
        return self._clock() > deadline

    def add_reminder(self, reminder: DeadlineReminder) -> None:
        """Register a reminder, replacing any for the same student and form."""
        if reminder.deadline.tzinfo is None:
            reminder.deadline = reminder.deadline.replace(tzinfo=UTC)
        self._reminders[(reminder.form_identifier, reminder.student_id)] = reminder

    def reminder(
        self, form_identifier: FormIdentifier, student_id: str
    ) -> DeadlineReminder | None:
        return self._reminders.get((form_identifier, student_id))

    def mark_reminder_sent(self, form_identifier: FormIdentifier, student_id: str) -> bool:
        """Record that a reminder went out. Returns False if none is registered."""
        reminder = self._reminders.get((form_identifier, student_id))
        if reminder is None:
            return False
        reminder.reminder_sent = True
        reminder.reminder_date = self._clock()
        logger.info(
            "deadline_reminder_sent",
            form=form_identifier.value,
            student_id=student_id,
        )
        return True

    def due_reminders(self, days_ahead: int) -> list[DeadlineReminder]:
        """Unsent reminders whose deadline is within `days_ahead` days, soonest first.

        Days are counted as `warning` counts them, so a deadline earlier
        today is still due and one from yesterday is not.
        """
        now = self._clock()
        due: list[DeadlineReminder] = []
        for reminder in self._reminders.values():
            if reminder.reminder_sent:
                continue
            remaining = (reminder.deadline - now).total_seconds()
            if 0 <= math.ceil(remaining / SECONDS_PER_DAY) <= days_ahead:
                due.append(reminder)
        return sorted(due, key=lambda r: r.deadline)

    def status_message(
        self, form_identifier: FormIdentifier, warning_days: int = 7
    ) -> str | None:
        deadline = self._deadlines.get(form_identifier)
        days = self.days_until(form_identifier)
        if deadline is None or days is None:
            return None

        date_text = f"{deadline:%B} {deadline.day}, {deadline.year}"
        if days < 0:
            return f"⚠️ Deadline passed ({abs(days)} days ago)"
        if days == 0:
            return "🔴 Deadline is TODAY!"
        if days <= warning_days:
            return f"⏰ Deadline in {days} days ({date_text})"
        return f"📅 Deadline: {date_text} ({days} days remaining)"
