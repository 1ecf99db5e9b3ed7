"""Auto-fill of form fields from stored student records."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from formchat.forms.fields import is_blank
from formchat.forms.identifiers import FormIdentifier, HardcodedForm
from formchat.forms.models import FormType
from formchat.observability.logging import get_logger
from formchat.student_data.models import StudentRecord
from formchat.student_data.store import StudentDataStore

logger = get_logger(__name__)

# form field -> StudentRecord attribute
COMMON_FIELDS: dict[str, str] = {
    "studentName": "student_name",
    "studentId": "student_id",
    "email": "email",
    "phone": "phone",
}

FORM_FIELDS: dict[FormType, dict[str, str]] = {
    FormType.CHANGE_OF_MAJOR: {
        "currentMajor": "current_major",
        "advisorName": "advisor_name",
        "department": "department",
    },
}


class AutoFillProvider(ABC):
    """Supplies known values for a student's blank form fields."""

    @abstractmethod
    async def auto_fill(
        self,
        form_identifier: FormIdentifier,
        subject_id: str,
        consent_given: bool,
        existing_fields: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Values for blank fields only; empty without consent."""
        pass


class StudentDataAutoFill(AutoFillProvider):
    """Auto-fills from consented records in a StudentDataStore."""

    def __init__(self, store: StudentDataStore) -> None:
        self._store = store

    async def auto_fill(
        self,
        form_identifier: FormIdentifier,
        subject_id: str,
        consent_given: bool,
        existing_fields: Mapping[str, Any],
    ) -> dict[str, Any]:
        if not consent_given:
            return {}

        record = await self._store.get(subject_id)
        if record is None or not record.consent_given:
            logger.debug("auto_fill_no_record", form=form_identifier.value)
            return {}

        mapping = dict(COMMON_FIELDS)
        if isinstance(form_identifier, HardcodedForm):
            mapping.update(FORM_FIELDS.get(form_identifier.form_type, {}))

        return self._fill_blanks(record, mapping, existing_fields)

    def _fill_blanks(
        self,
        record: StudentRecord,
        mapping: Mapping[str, str],
        existing_fields: Mapping[str, Any],
    ) -> dict[str, Any]:
        filled: dict[str, Any] = {}
        for field_name, attribute in mapping.items():
            if not is_blank(existing_fields.get(field_name)):
                continue
            value = getattr(record, attribute)
            if not is_blank(value):
                filled[field_name] = value
        return filled
