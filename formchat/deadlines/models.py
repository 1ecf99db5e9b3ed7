"""Deadline domain models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from formchat.forms.identifiers import FormIdentifier


class DeadlineReminder(BaseModel):
    """A pending or sent deadline reminder for one student and form."""

    model_config = ConfigDict(validate_assignment=True)

    form_identifier: FormIdentifier = Field(..., description="Form the deadline belongs to")
    student_id: str = Field(..., min_length=1, description="Student to remind")
    deadline: datetime = Field(..., description="Deadline the reminder is about")
    reminder_sent: bool = Field(default=False, description="Whether it has been sent")
    reminder_date: datetime | None = Field(default=None, description="When it was sent")
