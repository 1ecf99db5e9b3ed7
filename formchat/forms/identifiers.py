"""Typed form identifiers.

A form is either one of the hardcoded form types or an uploaded template.
Raw strings are parsed once, at the boundary, and the typed value is
passed downward from there.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from formchat.forms.models import FormType


class HardcodedForm(BaseModel):
    """Identifies a statically defined form."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["hardcoded"] = "hardcoded"
    form_type: FormType

    @property
    def value(self) -> str:
        """Wire value of this identifier."""
        return self.form_type.value


class TemplateForm(BaseModel):
    """Identifies a form backed by an uploaded template."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["template"] = "template"
    template_id: str = Field(..., min_length=1)

    @property
    def value(self) -> str:
        """Wire value of this identifier."""
        return self.template_id


FormIdentifier = Annotated[HardcodedForm | TemplateForm, Field(discriminator="kind")]

_FORM_TYPES = {form_type.value: form_type for form_type in FormType}


def parse_form_identifier(raw: str) -> HardcodedForm | TemplateForm:
    """Parse a wire value into a typed identifier.

    Known form type values become HardcodedForm, anything else is treated
    as a template id.

    Raises:
        ValueError: If the value is blank
    """
    value = raw.strip()
    if not value:
        raise ValueError("Form identifier must not be blank")

    form_type = _FORM_TYPES.get(value)
    if form_type is not None:
        return HardcodedForm(form_type=form_type)
    return TemplateForm(template_id=value)
