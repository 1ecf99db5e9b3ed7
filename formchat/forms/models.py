"""Form schema models.

A FormSchema describes one form: its field definitions, the ordered
required fields that drive the question sequence, and optional fields.
Hardcoded forms and uploaded templates both resolve to this model.
"""

import re
from datetime import UTC, datetime
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    create_model,
)


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


_CAMEL_BOUNDARY = re.compile(r"([A-Z])")


def humanize_field_name(name: str) -> str:
    """Turn a camelCase field name into lower-case words.

    Example:
        humanize_field_name("expectedGraduationDate") -> "expected graduation date"
    """
    return _CAMEL_BOUNDARY.sub(r" \1", name).lower().strip()


def generic_question(name: str) -> str:
    """Question asked for a field that has no authored question."""
    return f"Could you please provide {humanize_field_name(name)}?"


class FormType(str, Enum):
    """Hardcoded form types."""

    CHANGE_OF_MAJOR = "change-of-major"
    GRADUATION_APPLICATION = "graduation-application"
    ADD_DROP_COURSE = "add-drop-course"


class FieldType(str, Enum):
    """Input type of a form field."""

    TEXT = "text"
    EMAIL = "email"
    PHONE = "phone"
    DATE = "date"
    NUMBER = "number"
    TEXTAREA = "textarea"
    CHECKBOX = "checkbox"
    SELECT = "select"
    LIST = "list"


class FieldDef(BaseModel):
    """Definition of a single form field."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Field key, e.g. studentName")
    label: str = Field(..., description="Display label, e.g. Student Name")
    type: FieldType = Field(default=FieldType.TEXT, description="Input type")
    required: bool = Field(default=False, description="Whether the form needs it")
    question: str | None = Field(
        default=None, description="Question asked to collect this field"
    )


def _to_text(value: Any) -> Any:
    """Accept numbers where text is expected."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return str(value)
    return value


def _to_flag(value: Any) -> Any:
    """Treat blank strings as unset checkboxes."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


_TextValue = Annotated[str | None, BeforeValidator(_to_text)]
_FlagValue = Annotated[bool | None, BeforeValidator(_to_flag)]
_ListValue = list[dict[str, Any]] | None


def _annotation_for(field_type: FieldType) -> Any:
    if field_type == FieldType.CHECKBOX:
        return _FlagValue
    if field_type == FieldType.LIST:
        return _ListValue
    return _TextValue


@lru_cache(maxsize=256)
def _record_model(form_id: str, signature: tuple[tuple[str, FieldType], ...]) -> type[BaseModel]:
    definitions: dict[str, Any] = {}
    for index, (name, field_type) in enumerate(signature):
        definitions[f"field_{index}"] = (
            _annotation_for(field_type),
            Field(default=None, alias=name),
        )

    model_name = "".join(part.title() for part in re.split(r"[^A-Za-z0-9]+", form_id))
    return create_model(
        f"{model_name or 'Form'}Record",
        __config__=ConfigDict(extra="ignore"),
        **definitions,
    )


class FormSchema(BaseModel):
    """Resolved schema for one form.

    `required_fields` order defines the question sequence: the first
    required field without a value is always asked next.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Form type value or template id")
    name: str = Field(..., description="Human-readable form name")
    description: str = Field(default="", description="Short description")
    fields: list[FieldDef] = Field(default_factory=list, description="Field definitions")
    required_fields: list[str] = Field(
        default_factory=list, description="Required field names in question order"
    )
    optional_fields: list[str] = Field(
        default_factory=list, description="Optional field names"
    )

    @property
    def field_names(self) -> list[str]:
        """All field names known to this schema, in definition order."""
        names: list[str] = []
        for name in [f.name for f in self.fields] + self.required_fields + self.optional_fields:
            if name not in names:
                names.append(name)
        return names

    def field_def(self, name: str) -> FieldDef | None:
        """Get the definition of a field, if the schema defines one."""
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def question(self, name: str) -> str | None:
        """Get the authored question for a field, if any."""
        field = self.field_def(name)
        if field is None:
            return None
        return field.question

    def label(self, name: str) -> str:
        """Display label for a field, derived from its name when undefined."""
        field = self.field_def(name)
        if field is not None:
            return field.label
        return humanize_field_name(name).title()

    def record_model(self) -> type[BaseModel]:
        """Pydantic model for this schema's field values, shared by schemas with the same fields.

        Every field is optional. Unknown keys are ignored, checkbox values
        are coerced to bool, list fields hold course-like records and all
        other fields are text. Field names are used as aliases so that
        arbitrary template field names stay valid.
        """
        signature: list[tuple[str, FieldType]] = []
        for name in self.field_names:
            field = self.field_def(name)
            signature.append((name, field.type if field is not None else FieldType.TEXT))
        return _record_model(self.id, tuple(signature))

    def coerce_fields(self, raw: dict[str, Any]) -> dict[str, Any]:
        """Validate a client-supplied field map against this schema.

        Returns only the schema's fields that carry a value.

        Raises:
            pydantic.ValidationError: If a value cannot be coerced
        """
        record = self.record_model().model_validate(raw)
        return record.model_dump(by_alias=True, exclude_none=True)


class FormTemplate(BaseModel):
    """A form derived from an uploaded document."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., min_length=1, description="Template id")
    name: str = Field(..., description="Form name")
    description: str | None = Field(default=None, description="Short description")
    file_name: str | None = Field(default=None, description="Source document name")
    fields: list[FieldDef] = Field(default_factory=list, description="Field definitions")
    required_fields: list[str] = Field(
        default_factory=list, description="Required field names in question order"
    )
    optional_fields: list[str] = Field(
        default_factory=list, description="Optional field names"
    )
    is_active: bool = Field(default=True, description="Whether the template resolves")
    uploaded_at: datetime = Field(default_factory=utc_now, description="Upload time")

    def to_schema(self) -> FormSchema:
        """Convert to the schema shape used by the dialogue engine."""
        return FormSchema(
            id=self.id,
            name=self.name,
            description=self.description or "",
            fields=self.fields,
            required_fields=self.required_fields,
            optional_fields=self.optional_fields,
        )
