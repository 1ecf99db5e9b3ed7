"""Response composition.

Every agent message is an acknowledgment of what the user just said
followed by the next question, or the completion summary once every
required field is filled.
"""

import re
from collections.abc import Mapping
from typing import Any

from formchat.forms.fields import is_blank
from formchat.forms.models import FormSchema, generic_question

# (pattern, phrase) pairs tried in order when nothing was extracted
SMALL_TALK_REPLIES: tuple[tuple[re.Pattern[str], str], ...] = (
    (
        re.compile(r"^(hi|hello|hey|greetings|good morning|good afternoon|good evening)"),
        "Hello! Nice to meet you. ",
    ),
    (
        re.compile(r"^(thanks|thank you|ty|thx|appreciate)"),
        "You're welcome! Happy to help. ",
    ),
    (
        re.compile(r"(how are you|what's up|whats up|wassup)"),
        "I'm doing great, thanks for asking! ",
    ),
    (
        re.compile(r"(joke|funny|laugh|lol|haha|hehe)"),
        "Haha, I appreciate your energy! ",
    ),
    (
        re.compile(r"(confused|don't understand|what|huh|help)"),
        "No worries at all! I'm here to help make this easy for you. ",
    ),
)

SHORT_REPLY_LENGTH = 10
SHORT_REPLY_ACK = "Got it! "
GENERIC_ACK = "I hear you! "
GENERIC_CAPTURE_ACK = "Perfect, got that information! "

# Checked in order; the first extracted field found picks the phrase
CAPTURE_ACKS: tuple[tuple[str, str], ...] = (
    ("desiredMajor", "Great choice! {value} sounds like an excellent program. "),
    ("studentName", "Nice to meet you, {value}! "),
    ("studentId", "Perfect, got your ID! "),
    ("currentMajor", "Got it, so you're currently in {value}. "),
    ("email", "Awesome, I'll use that email to contact you. "),
    ("advisorName", "Great, {value} is your advisor. "),
)


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, list):
        items = []
        for item in value:
            if isinstance(item, dict):
                items.append(" ".join(str(v) for v in item.values() if not is_blank(v)))
            else:
                items.append(str(item))
        return ", ".join(items)
    return str(value)


class ResponseComposer:
    """Builds agent messages. Pure: no I/O, never raises on string input."""

    def acknowledge(self, utterance: str, extracted: Mapping[str, Any]) -> str:
        """Pick the acknowledgment phrase for a reply."""
        if not extracted:
            lowered = utterance.strip().lower()
            for pattern, phrase in SMALL_TALK_REPLIES:
                if pattern.search(lowered):
                    return phrase
            if len(lowered) < SHORT_REPLY_LENGTH:
                return SHORT_REPLY_ACK
            return GENERIC_ACK

        for name, template in CAPTURE_ACKS:
            if name in extracted:
                return template.format(value=_format_value(extracted[name]))
        return GENERIC_CAPTURE_ACK

    def next_question(self, next_field: str, schema: FormSchema) -> str:
        """Question for the next missing field."""
        return schema.question(next_field) or generic_question(next_field)

    def compose(
        self,
        utterance: str,
        extracted: Mapping[str, Any],
        next_field: str,
        schema: FormSchema,
    ) -> str:
        """Acknowledgment followed by the next question."""
        return self.acknowledge(utterance, extracted) + self.next_question(next_field, schema)

    def compose_completion(self, fields: Mapping[str, Any], schema: FormSchema) -> str:
        """Summary of every collected value plus the follow-up actions."""
        lines = [f"Perfect! I have all the information I need for your {schema.name}.", ""]
        for name in schema.field_names:
            value = fields.get(name)
            if is_blank(value):
                continue
            lines.append(f"✓ {schema.label(name)}: {_format_value(value)}")

        lines.extend([
            "",
            "You can now:",
            '• Click "Download PDF" to get your filled form',
            '• Click "Generate Email" to create a submission email',
        ])
        return "\n".join(lines)

    def compose_welcome(
        self,
        schema: FormSchema,
        deadline_status: str | None = None,
        first_field: str | None = None,
    ) -> str:
        """Opening message for a new session."""
        parts = [
            f"Hello! I'm here to help you fill out the {schema.name} form. "
            "I'll ask you a few questions, one at a time."
        ]
        if schema.description:
            parts.append(f"About this form: {schema.description.rstrip('.')}.")
        if deadline_status:
            parts.append(deadline_status)
        if first_field:
            parts.append(self.next_question(first_field, schema))
        return "\n\n".join(parts)

    def compose_schema_not_found(self, form_value: str) -> str:
        """Apology for a form that could not be found."""
        return (
            f"Sorry, I couldn't find the form '{form_value}'. "
            "Please choose one of the available forms and try again."
        )
