"""Consented student records and form auto-fill."""

from formchat.student_data.autofill import AutoFillProvider, StudentDataAutoFill
from formchat.student_data.models import StudentRecord
from formchat.student_data.stores import InMemoryStudentDataStore, StudentDataStore

__all__ = [
    "AutoFillProvider",
    "StudentDataAutoFill",
    "StudentRecord",
    "StudentDataStore",
    "InMemoryStudentDataStore",
]
