"""Jinja2 template loader for LLM prompts."""

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

PROMPTS_DIR = Path(__file__).parent / "prompts"


class TemplateLoader:
    """Loads and renders Jinja2 prompt templates."""

    def __init__(self, templates_dir: Path = PROMPTS_DIR):
        """Initialize template loader.

        Args:
            templates_dir: Directory containing .jinja2 template files
        """
        self.templates_dir = templates_dir
        # Prompts are plain text; HTML escaping would mangle user replies
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_name: str, **context: Any) -> str:
        """Render a template with context variables.

        Args:
            template_name: Template filename (e.g., "reason.jinja2")
            **context: Variables to pass to template

        Returns:
            Rendered template string

        Raises:
            jinja2.TemplateNotFound: If template doesn't exist
        """
        template = self.env.get_template(template_name)
        return template.render(**context)
