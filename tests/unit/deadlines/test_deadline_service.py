"""Unit tests for DeadlineService."""

from datetime import UTC, datetime, timedelta

import pytest

from formchat.deadlines.models import DeadlineReminder
from formchat.deadlines.service import DeadlineService
from formchat.forms.identifiers import HardcodedForm, TemplateForm
from formchat.forms.models import FormType

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)
GRADUATION = HardcodedForm(form_type=FormType.GRADUATION_APPLICATION)


@pytest.fixture
def service() -> DeadlineService:
    return DeadlineService(clock=lambda: NOW)


class TestDeadlineService:
    """Tests for deadline lookup and warnings."""

    def test_no_deadline(self, service) -> None:
        assert service.deadline(GRADUATION) is None
        assert service.days_until(GRADUATION) is None
        assert not service.warning(GRADUATION, 7)
        assert not service.is_passed(GRADUATION)
        assert service.status_message(GRADUATION) is None

    def test_naive_deadline_is_utc(self, service) -> None:
        service.set_deadline(GRADUATION, datetime(2025, 4, 1))
        assert service.deadline(GRADUATION) == datetime(2025, 4, 1, tzinfo=UTC)

    def test_days_round_up(self, service) -> None:
        service.set_deadline(GRADUATION, NOW + timedelta(days=2, hours=1))
        assert service.days_until(GRADUATION) == 3

    @pytest.mark.parametrize(
        ("offset", "expected"),
        [
            (timedelta(days=3), True),
            (timedelta(days=7), True),
            (timedelta(days=8), False),
            (timedelta(hours=-30), False),
        ],
    )
    def test_warning_window(self, service, offset, expected) -> None:
        service.set_deadline(GRADUATION, NOW + offset)
        assert service.warning(GRADUATION, 7) is expected

    def test_deadlines_are_per_form(self, service) -> None:
        service.set_deadline(TemplateForm(template_id="tpl-1"), NOW + timedelta(days=1))
        assert service.deadline(GRADUATION) is None

    def test_is_passed(self, service) -> None:
        service.set_deadline(GRADUATION, NOW - timedelta(minutes=1))
        assert service.is_passed(GRADUATION)


class TestStatusMessage:
    """Tests for deadline status messages."""

    def test_passed(self, service) -> None:
        service.set_deadline(GRADUATION, NOW - timedelta(days=2))
        assert service.status_message(GRADUATION) == "⚠️ Deadline passed (2 days ago)"

    def test_today(self, service) -> None:
        service.set_deadline(GRADUATION, NOW)
        assert service.status_message(GRADUATION) == "🔴 Deadline is TODAY!"

    def test_within_warning(self, service) -> None:
        service.set_deadline(GRADUATION, NOW + timedelta(days=5))
        assert service.status_message(GRADUATION) == "⏰ Deadline in 5 days (March 15, 2025)"

    def test_far_away(self, service) -> None:
        service.set_deadline(GRADUATION, NOW + timedelta(days=30))
        assert service.status_message(GRADUATION) == (
            "📅 Deadline: April 9, 2025 (30 days remaining)"
        )


class TestReminders:
    """Tests for per-student deadline reminders."""

    def make_reminder(self, student_id: str = "12345", offset=timedelta(days=3), form=GRADUATION):
        return DeadlineReminder(
            form_identifier=form, student_id=student_id, deadline=NOW + offset
        )

    def test_unknown_reminder(self, service) -> None:
        assert service.reminder(GRADUATION, "12345") is None
        assert not service.mark_reminder_sent(GRADUATION, "12345")

    def test_add_and_get(self, service) -> None:
        reminder = self.make_reminder()
        service.add_reminder(reminder)

        assert service.reminder(GRADUATION, "12345") is reminder
        assert service.reminder(GRADUATION, "99999") is None
        assert service.reminder(TemplateForm(template_id="tpl-1"), "12345") is None

    def test_add_replaces_same_student_and_form(self, service) -> None:
        service.add_reminder(self.make_reminder(offset=timedelta(days=3)))
        service.add_reminder(self.make_reminder(offset=timedelta(days=5)))

        assert service.reminder(GRADUATION, "12345").deadline == NOW + timedelta(days=5)

    def test_naive_deadline_is_utc(self, service) -> None:
        service.add_reminder(
            DeadlineReminder(
                form_identifier=GRADUATION, student_id="12345", deadline=datetime(2025, 4, 1)
            )
        )
        assert service.reminder(GRADUATION, "12345").deadline == datetime(2025, 4, 1, tzinfo=UTC)

    def test_mark_sent(self, service) -> None:
        service.add_reminder(self.make_reminder())

        assert service.mark_reminder_sent(GRADUATION, "12345")

        reminder = service.reminder(GRADUATION, "12345")
        assert reminder.reminder_sent
        assert reminder.reminder_date == NOW

    def test_due_reminders(self, service) -> None:
        service.add_reminder(self.make_reminder("later", offset=timedelta(days=6)))
        service.add_reminder(self.make_reminder("soon", offset=timedelta(days=1)))
        service.add_reminder(self.make_reminder("far", offset=timedelta(days=20)))
        service.add_reminder(self.make_reminder("passed", offset=timedelta(days=-2)))
        service.add_reminder(self.make_reminder("sent", offset=timedelta(days=2)))
        service.mark_reminder_sent(GRADUATION, "sent")

        due = service.due_reminders(7)

        assert [r.student_id for r in due] == ["soon", "later"]
