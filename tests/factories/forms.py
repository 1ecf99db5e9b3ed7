"""Test factories for form and student domain models."""

from datetime import UTC, datetime
from typing import Any

from formchat.forms.models import FieldDef, FieldType, FormSchema, FormTemplate
from formchat.student_data.models import StudentRecord


class FieldDefFactory:
    """Factory for creating FieldDef instances for testing."""

    @staticmethod
    def create(
        name: str,
        *,
        label: str | None = None,
        type: FieldType = FieldType.TEXT,
        required: bool = False,
        question: str | None = None,
    ) -> FieldDef:
        """Create a FieldDef, labelled after its name by default."""
        return FieldDef(
            name=name,
            label=label or name,
            type=type,
            required=required,
            question=question,
        )


class FormSchemaFactory:
    """Factory for creating FormSchema instances for testing."""

    @staticmethod
    def create(
        *,
        id: str = "test-form",
        name: str = "Test Form",
        description: str = "",
        required: list[str] | None = None,
        optional: list[str] | None = None,
        fields: list[FieldDef] | None = None,
        types: dict[str, FieldType] | None = None,
    ) -> FormSchema:
        """Create a FormSchema.

        Args:
            id: Schema id
            name: Form name
            description: Short description
            required: Required field names in question order
            optional: Optional field names
            fields: Explicit field definitions; derived from the names if omitted
            types: Field types used when deriving definitions

        Returns:
            Configured FormSchema instance
        """
        required = required if required is not None else ["studentName", "studentId"]
        optional = optional or []
        types = types or {}
        if fields is None:
            fields = [
                FieldDefFactory.create(
                    name,
                    type=types.get(name, FieldType.TEXT),
                    required=name in required,
                )
                for name in required + optional
            ]
        return FormSchema(
            id=id,
            name=name,
            description=description,
            fields=fields,
            required_fields=required,
            optional_fields=optional,
        )


class FormTemplateFactory:
    """Factory for creating FormTemplate instances for testing."""

    @staticmethod
    def create(
        *,
        id: str = "tpl-test",
        name: str = "Test Template",
        description: str | None = None,
        required: list[str] | None = None,
        optional: list[str] | None = None,
        fields: list[FieldDef] | None = None,
        is_active: bool = True,
        uploaded_at: datetime | None = None,
    ) -> FormTemplate:
        """Create a FormTemplate with sensible defaults."""
        required = required if required is not None else ["studentName", "studentId"]
        optional = optional or []
        if fields is None:
            fields = [
                FieldDefFactory.create(name, required=name in required)
                for name in required + optional
            ]
        return FormTemplate(
            id=id,
            name=name,
            description=description,
            fields=fields,
            required_fields=required,
            optional_fields=optional,
            is_active=is_active,
            uploaded_at=uploaded_at or datetime.now(UTC),
        )

    @staticmethod
    def major_request(**overrides: Any) -> FormTemplate:
        """Template with required [studentName, studentId, desiredMajor]."""
        defaults: dict[str, Any] = {
            "id": "tpl-major-request",
            "name": "Major Request",
            "required": ["studentName", "studentId", "desiredMajor"],
            "optional": ["email", "phone"],
            "fields": [
                FieldDefFactory.create(
                    "studentName",
                    label="Student Name",
                    required=True,
                    question="What is your full name?",
                ),
                FieldDefFactory.create(
                    "studentId",
                    label="Student ID",
                    required=True,
                    question="What is your student ID number?",
                ),
                FieldDefFactory.create(
                    "desiredMajor",
                    label="Desired Major",
                    required=True,
                    question="Which major would you like to switch to?",
                ),
                FieldDefFactory.create("email", label="Email", type=FieldType.EMAIL),
                FieldDefFactory.create("phone", label="Phone", type=FieldType.PHONE),
            ],
        }
        defaults.update(overrides)
        return FormTemplateFactory.create(**defaults)


class StudentRecordFactory:
    """Factory for creating StudentRecord instances for testing."""

    @staticmethod
    def create(
        *,
        student_id: str = "12345",
        student_name: str = "Jane Doe",
        email: str = "jane@example.edu",
        phone: str | None = "555-123-4567",
        current_major: str | None = "Biology",
        advisor_name: str | None = "Dr. Smith",
        department: str | None = "Life Sciences",
        consent_given: bool = True,
    ) -> StudentRecord:
        """Create a consented StudentRecord by default."""
        return StudentRecord(
            student_id=student_id,
            student_name=student_name,
            email=email,
            phone=phone,
            current_major=current_major,
            advisor_name=advisor_name,
            department=department,
            consent_given=consent_given,
            consent_date=datetime.now(UTC) if consent_given else None,
        )
