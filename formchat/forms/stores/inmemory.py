"""In-memory implementation of FormTemplateStore."""

from formchat.forms.models import FormTemplate
from formchat.forms.store import FormTemplateStore


class InMemoryFormTemplateStore(FormTemplateStore):
    """In-memory implementation of FormTemplateStore for testing and development.

    Uses simple dict storage. Not suitable for production use.
    """

    def __init__(self, templates: list[FormTemplate] | None = None) -> None:
        """Initialize storage, optionally seeded with templates."""
        self._templates: dict[str, FormTemplate] = {}
        for template in templates or []:
            self._templates[template.id] = template

    async def get(self, template_id: str) -> FormTemplate | None:
        """Get a template by ID."""
        return self._templates.get(template_id)

    async def save(self, template: FormTemplate) -> str:
        """Save a template, returning its ID."""
        self._templates[template.id] = template
        return template.id

    async def delete(self, template_id: str) -> bool:
        """Delete a template."""
        if template_id in self._templates:
            del self._templates[template_id]
            return True
        return False

    async def list_templates(self, *, active_only: bool = False) -> list[FormTemplate]:
        """List templates, newest upload first."""
        results = [
            t for t in self._templates.values() if t.is_active or not active_only
        ]
        results.sort(key=lambda t: t.uploaded_at, reverse=True)
        return results

    async def set_active(self, template_id: str, is_active: bool) -> FormTemplate | None:
        """Activate or deactivate a template."""
        template = self._templates.get(template_id)
        if template is None:
            return None
        template.is_active = is_active
        return template
