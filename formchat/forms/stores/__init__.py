"""Form template stores."""

from formchat.forms.store import FormTemplateStore
from formchat.forms.stores.inmemory import InMemoryFormTemplateStore

__all__ = [
    "FormTemplateStore",
    "InMemoryFormTemplateStore",
]
