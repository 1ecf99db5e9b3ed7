"""In-memory implementation of StudentDataStore."""

from formchat.observability.logging import get_logger
from formchat.student_data.models import StudentRecord
from formchat.student_data.store import StudentDataStore

logger = get_logger(__name__)


class InMemoryStudentDataStore(StudentDataStore):
    """In-memory implementation of StudentDataStore for testing and development."""

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._records: dict[str, StudentRecord] = {}

    async def get(self, student_id: str) -> StudentRecord | None:
        """Get a record by student ID."""
        return self._records.get(student_id)

    async def save(self, record: StudentRecord) -> bool:
        """Save a record if the student consented."""
        if not record.consent_given:
            logger.info("student_record_rejected_without_consent")
            return False
        self._records[record.student_id] = record
        return True

    async def delete(self, student_id: str) -> bool:
        """Delete a record."""
        if student_id in self._records:
            del self._records[student_id]
            return True
        return False
