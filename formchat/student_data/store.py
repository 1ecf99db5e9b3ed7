"""StudentDataStore abstract interface."""

from abc import ABC, abstractmethod

from formchat.student_data.models import StudentRecord


class StudentDataStore(ABC):
    """Abstract interface for consented student records."""

    @abstractmethod
    async def get(self, student_id: str) -> StudentRecord | None:
        """Get a record by student ID."""
        pass

    @abstractmethod
    async def save(self, record: StudentRecord) -> bool:
        """Save a record. Records without consent are not stored.

        Returns:
            True if the record was stored
        """
        pass

    @abstractmethod
    async def delete(self, student_id: str) -> bool:
        """Delete a record."""
        pass
