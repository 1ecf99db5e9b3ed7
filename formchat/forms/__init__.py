"""Form schemas, identifiers and resolution.

Contains:
- FormSchema / FieldDef / FormTemplate models
- FormIdentifier variants (hardcoded form type or template id)
- The hardcoded form catalog and its question table
- FormSchemaResolver and the template store it reads
"""

from formchat.forms.catalog import HARDCODED_SCHEMAS, hardcoded_question
from formchat.forms.identifiers import (
    FormIdentifier,
    HardcodedForm,
    TemplateForm,
    parse_form_identifier,
)
from formchat.forms.models import (
    FieldDef,
    FieldType,
    FormSchema,
    FormTemplate,
    FormType,
    generic_question,
    humanize_field_name,
)
from formchat.forms.resolver import CatalogSchemaResolver, FormSchemaResolver
from formchat.forms.stores import FormTemplateStore, InMemoryFormTemplateStore

__all__ = [
    # Models
    "FieldDef",
    "FieldType",
    "FormSchema",
    "FormTemplate",
    "FormType",
    # Identifiers
    "FormIdentifier",
    "HardcodedForm",
    "TemplateForm",
    "parse_form_identifier",
    # Catalog
    "HARDCODED_SCHEMAS",
    "hardcoded_question",
    "generic_question",
    "humanize_field_name",
    # Resolution
    "FormSchemaResolver",
    "CatalogSchemaResolver",
    "FormTemplateStore",
    "InMemoryFormTemplateStore",
]
