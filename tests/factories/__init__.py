"""Test factories for creating test data."""

from tests.factories.forms import (
    FieldDefFactory,
    FormSchemaFactory,
    FormTemplateFactory,
    StudentRecordFactory,
)

__all__ = [
    "FieldDefFactory",
    "FormSchemaFactory",
    "FormTemplateFactory",
    "StudentRecordFactory",
]
