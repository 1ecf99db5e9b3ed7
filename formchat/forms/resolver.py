"""Form schema resolution.

The dialogue engine never looks at form definitions directly: it asks a
FormSchemaResolver for the schema behind a FormIdentifier.
"""

from abc import ABC, abstractmethod

from formchat.errors import SchemaNotFoundError
from formchat.forms.catalog import HARDCODED_SCHEMAS
from formchat.forms.identifiers import FormIdentifier, HardcodedForm
from formchat.forms.models import FieldDef, FormSchema, generic_question
from formchat.forms.store import FormTemplateStore
from formchat.observability.logging import get_logger

logger = get_logger(__name__)


class FormSchemaResolver(ABC):
    """Resolves form identifiers to schemas.

    Implementations must be deterministic and free of side effects as
    seen by the dialogue engine.
    """

    @abstractmethod
    async def resolve(self, form_identifier: FormIdentifier) -> FormSchema:
        """Get the schema for a form.

        Raises:
            SchemaNotFoundError: If the form is unknown or inactive
        """
        pass

    @abstractmethod
    async def list_forms(self) -> list[FormSchema]:
        """List every form a session can be started with."""
        pass

    async def required_fields(self, form_identifier: FormIdentifier) -> list[str]:
        """Required field names in question order."""
        schema = await self.resolve(form_identifier)
        return list(schema.required_fields)

    async def optional_fields(self, form_identifier: FormIdentifier) -> list[str]:
        """Optional field names."""
        schema = await self.resolve(form_identifier)
        return list(schema.optional_fields)

    async def field_def(self, form_identifier: FormIdentifier, name: str) -> FieldDef | None:
        """Definition of one field, if the form defines it."""
        schema = await self.resolve(form_identifier)
        return schema.field_def(name)

    async def question(self, form_identifier: FormIdentifier, name: str) -> str:
        """Question for a field; always returns text."""
        schema = await self.resolve(form_identifier)
        return schema.question(name) or generic_question(name)


class CatalogSchemaResolver(FormSchemaResolver):
    """Resolves hardcoded forms from the catalog and templates from a store."""

    def __init__(self, template_store: FormTemplateStore) -> None:
        self._template_store = template_store

    async def resolve(self, form_identifier: FormIdentifier) -> FormSchema:
        if isinstance(form_identifier, HardcodedForm):
            return HARDCODED_SCHEMAS[form_identifier.form_type]

        template = await self._template_store.get(form_identifier.template_id)
        if template is None or not template.is_active:
            logger.info(
                "form_template_not_resolved",
                template_id=form_identifier.template_id,
                found=template is not None,
            )
            raise SchemaNotFoundError(form_identifier.value)
        return template.to_schema()

    async def list_forms(self) -> list[FormSchema]:
        templates = await self._template_store.list_templates(active_only=True)
        return list(HARDCODED_SCHEMAS.values()) + [t.to_schema() for t in templates]
