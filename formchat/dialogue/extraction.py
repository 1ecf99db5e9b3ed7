"""Field extraction from free-text replies.

Extraction is a pure function of (utterance, current fields, focus field,
schema). Rules run in strict precedence:

1. Filler detection: canned small talk ("hi", "thanks", "ok", ...) and
   very short replies are never captured as the focus field.
2. Focus capture: the reply to the question just asked fills that field
   when it passes the field's validator; nothing else runs that turn.
3. Fallback rules: every blank field with a dedicated rule (name, student
   id, email, phone, advisor, free text) is tried independently, so one
   reply may fill several fields.

Only blank fields known to the schema are ever returned.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from formchat.forms.fields import is_blank
from formchat.forms.models import FieldType, FormSchema

# ============================================================================
# Patterns
# ============================================================================

FILLER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"^(hi|hello|hey|greetings|good morning|good afternoon|good evening"
        r"|sup|yo|wassup|what's up|whats up)[.!?]*$",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(thanks|thank you|ty|thx|appreciate it|cool|ok|okay|alright|nice|great)[.!?]*$",
        re.IGNORECASE,
    ),
    re.compile(r"^(yes|no|yeah|nah|yep|nope|sure|fine)[.!?]*$", re.IGNORECASE),
    re.compile(r"^(lol|haha|hehe|lmao|xd)[.!?]*$", re.IGNORECASE),
    re.compile(r"^(how are you|what's up|whats up)[.!?]*$", re.IGNORECASE),
)

NAME_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bmy name is\s+([A-Za-z][A-Za-z\s'-]*)", re.IGNORECASE),
    re.compile(r"\bi'm\s+([A-Za-z][A-Za-z\s'-]*)", re.IGNORECASE),
    re.compile(r"\bi am\s+([A-Za-z][A-Za-z\s'-]*)", re.IGNORECASE),
    re.compile(r"\bthis is\s+([A-Za-z][A-Za-z\s'-]*)", re.IGNORECASE),
    re.compile(r"\bname is\s+([A-Za-z][A-Za-z\s'-]*)", re.IGNORECASE),
)

CAPITALIZED_NAME = re.compile(r"^[A-Z][a-z]+(\s[A-Z][a-z]+){0,3}$")

ID_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bz[\s-]?(\d+)", re.IGNORECASE),
    re.compile(r"\bstudent id[\s:#]*(?:is\s+)?(\d+)", re.IGNORECASE),
    re.compile(r"\bid[\s:#]*(?:is\s+)?(\d+)", re.IGNORECASE),
    re.compile(r"^(\d{1,10})$"),
)

EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")

PHONE_PATTERN = re.compile(r"(?<!\d)\d{3}[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)")

ADVISOR_KEYWORDS: tuple[str, ...] = ("advisor", "professor", "dr.", "dr ")

ADVISOR_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\badvisor(?:'s name)?\s*(?:is|:)\s*([A-Za-z][A-Za-z.\s'-]*)", re.IGNORECASE),
    re.compile(r"\b((?:professor|dr\.?)\s+[A-Za-z][A-Za-z\s'-]*)", re.IGNORECASE),
)

AFFIRMATIVE = re.compile(r"^(yes|yeah|yep|yup|sure|y|true)[.!]?$", re.IGNORECASE)
NEGATIVE = re.compile(r"^(no|nope|nah|n|false)[.!]?$", re.IGNORECASE)

# A captured name ends at the first of these words
NAME_STOPWORDS: frozenset[str] = frozenset({
    "a", "about", "an", "and", "at", "but", "calling", "confused", "currently",
    "doing", "email", "fine", "for", "from", "going", "good", "great", "here",
    "id", "in", "interested", "is", "just", "looking", "majoring", "my", "not",
    "number", "phone", "ready", "really", "so", "student", "studying", "the",
    "to", "too", "trying", "very", "want", "with", "writing",
})

MAX_NAME_WORDS = 4
FREE_TEXT_MIN_LENGTH = 20

# ============================================================================
# Field validators for focus capture
# ============================================================================


def _valid_name(text: str) -> bool:
    return len(text) >= 2 and any(c.isalpha() for c in text)


def _valid_email(text: str) -> bool:
    return EMAIL_PATTERN.fullmatch(text) is not None


def _valid_phone(text: str) -> bool:
    return PHONE_PATTERN.fullmatch(text) is not None


FOCUS_VALIDATORS: dict[str, Callable[[str], bool]] = {
    "studentName": _valid_name,
    "email": _valid_email,
    "phone": _valid_phone,
}

# Always normalized by their fallback rule, never captured verbatim
FALLBACK_ONLY_FIELDS: frozenset[str] = frozenset({"studentId"})


def is_filler(text: str) -> bool:
    """Whether a reply is canned small talk with nothing to capture."""
    trimmed = text.strip()
    if any(pattern.match(trimmed) for pattern in FILLER_PATTERNS):
        return True
    return len(trimmed) <= 3 and not any(c.isdigit() for c in trimmed)


def _clean_name(raw: str) -> str:
    """Cut a captured name at the first connector word."""
    words: list[str] = []
    for word in raw.split():
        if word.strip(".,!?;:").lower() in NAME_STOPWORDS:
            break
        words.append(word)
        if len(words) == MAX_NAME_WORDS:
            break
    return " ".join(words).strip(" ,!?;:")


# ============================================================================
# Extractor
# ============================================================================


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of extracting one reply.

    Ephemeral: consumed by the merge step of the same turn.
    """

    values: dict[str, Any] = field(default_factory=dict)
    via_focus: bool = False
    filler: bool = False

    @property
    def source(self) -> str:
        """Capture path, as reported in metrics."""
        return "focus" if self.via_focus else "fallback"


class FieldExtractor:
    """Extracts field values from a user reply using ordered heuristic rules.

    Stateless: the same inputs always produce the same output.
    """

    def __init__(self, free_text_field: str | None = "reason") -> None:
        """Initialize the extractor.

        Args:
            free_text_field: Field that receives long replies no other rule
                matched, or None to disable the rule
        """
        self._free_text_field = free_text_field

    def extract(
        self,
        utterance: str,
        current: Mapping[str, Any],
        focus_field: str | None,
        schema: FormSchema,
    ) -> dict[str, Any]:
        """Extract newly discovered field values from a reply."""
        return self.analyze(utterance, current, focus_field, schema).values

    def analyze(
        self,
        utterance: str,
        current: Mapping[str, Any],
        focus_field: str | None,
        schema: FormSchema,
    ) -> ExtractionResult:
        """Extract field values and report which path captured them."""
        text = utterance.strip()
        filler = is_filler(text)
        known = set(schema.field_names)

        def open_slot(name: str) -> bool:
            return name in known and is_blank(current.get(name))

        if (
            focus_field
            and open_slot(focus_field)
            and text
            and not text.isdigit()
            and not filler
            and self._accepts_direct(focus_field, text, schema)
        ):
            return ExtractionResult(values={focus_field: text}, via_focus=True)

        values: dict[str, Any] = {}

        id_candidate = self._match_student_id(text) if open_slot("studentId") else None

        name_from_whole_reply = False
        if open_slot("studentName"):
            name = self._match_name(text)
            if name is None and id_candidate is None and not filler:
                if CAPITALIZED_NAME.match(text):
                    name = text
                    name_from_whole_reply = True
            if name is not None:
                values["studentName"] = name

        if id_candidate is not None and not name_from_whole_reply:
            values["studentId"] = id_candidate

        if open_slot("email"):
            email = EMAIL_PATTERN.search(text)
            if email:
                values["email"] = email.group(0)

        if open_slot("phone"):
            phone = PHONE_PATTERN.search(text)
            if phone:
                values["phone"] = phone.group(0)

        if open_slot("advisorName"):
            advisor = self._match_advisor(text)
            if advisor is not None:
                values["advisorName"] = advisor

        if focus_field and open_slot(focus_field) and focus_field not in values:
            field_def = schema.field_def(focus_field)
            if field_def is not None and field_def.type == FieldType.CHECKBOX:
                if AFFIRMATIVE.match(text):
                    values[focus_field] = True
                elif NEGATIVE.match(text):
                    values[focus_field] = False

        free_text = self._free_text_field
        if (
            free_text
            and not values
            and open_slot(free_text)
            and len(text) > FREE_TEXT_MIN_LENGTH
        ):
            values[free_text] = text

        return ExtractionResult(values=values, filler=filler)

    # ========================================================================
    # Rules
    # ========================================================================

    def _accepts_direct(self, focus_field: str, text: str, schema: FormSchema) -> bool:
        if focus_field in FALLBACK_ONLY_FIELDS:
            return False
        field_def = schema.field_def(focus_field)
        if field_def is not None and field_def.type == FieldType.CHECKBOX:
            return False
        validator = FOCUS_VALIDATORS.get(focus_field)
        return validator is None or validator(text)

    def _match_name(self, text: str) -> str | None:
        for pattern in NAME_PATTERNS:
            match = pattern.search(text)
            if match:
                name = _clean_name(match.group(1))
                if _valid_name(name):
                    return name
        return None

    def _match_student_id(self, text: str) -> str | None:
        for pattern in ID_PATTERNS:
            match = pattern.search(text)
            if match:
                return match.group(1)
        return None

    def _match_advisor(self, text: str) -> str | None:
        lowered = text.lower()
        if not any(keyword in lowered for keyword in ADVISOR_KEYWORDS):
            return None

        for pattern in ADVISOR_PATTERNS:
            match = pattern.search(text)
            if match:
                name = _clean_name(match.group(1)).rstrip(".")
                if _valid_name(name):
                    return name
        return text
