"""FormTemplateStore abstract interface."""

from abc import ABC, abstractmethod

from formchat.forms.models import FormTemplate


class FormTemplateStore(ABC):
    """Abstract interface for uploaded form templates.

    Template administration (upload, document analysis) happens outside
    formchat; the dialogue engine only reads active templates.
    """

    @abstractmethod
    async def get(self, template_id: str) -> FormTemplate | None:
        """Get a template by ID."""
        pass

    @abstractmethod
    async def save(self, template: FormTemplate) -> str:
        """Save a template, returning its ID."""
        pass

    @abstractmethod
    async def delete(self, template_id: str) -> bool:
        """Delete a template."""
        pass

    @abstractmethod
    async def list_templates(self, *, active_only: bool = False) -> list[FormTemplate]:
        """List templates, optionally only the active ones."""
        pass

    @abstractmethod
    async def set_active(self, template_id: str, is_active: bool) -> FormTemplate | None:
        """Activate or deactivate a template."""
        pass
