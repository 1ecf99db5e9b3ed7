"""Student record model used for auto-fill."""

from datetime import datetime

from pydantic import BaseModel, Field


class StudentRecord(BaseModel):
    """Stored student details. Only kept when the student consented."""

    student_id: str = Field(..., min_length=1, description="Student ID")
    student_name: str = Field(..., description="Full name")
    email: str = Field(..., description="Contact email")
    phone: str | None = Field(default=None, description="Contact phone")
    current_major: str | None = Field(default=None, description="Current major")
    advisor_name: str | None = Field(default=None, description="Academic advisor")
    department: str | None = Field(default=None, description="Department")
    enrollment_status: str | None = Field(default=None, description="Enrollment status")
    gpa: float | None = Field(default=None, ge=0.0, description="Grade point average")
    consent_given: bool = Field(default=False, description="Consent to store and reuse")
    consent_date: datetime | None = Field(default=None, description="When consent was given")
