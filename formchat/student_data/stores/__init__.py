"""Student data stores."""

from formchat.student_data.store import StudentDataStore
from formchat.student_data.stores.inmemory import InMemoryStudentDataStore

__all__ = [
    "StudentDataStore",
    "InMemoryStudentDataStore",
]
