"""Field map helpers shared by the dialogue phases."""

from collections.abc import Iterable, Mapping
from typing import Any


def is_blank(value: Any) -> bool:
    """Whether a slot counts as unfilled.

    None, whitespace-only strings and empty collections are blank.
    False is a value (an unchecked checkbox was answered).
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list | tuple | dict | set):
        return len(value) == 0
    return False


def missing_fields(required: Iterable[str], fields: Mapping[str, Any]) -> list[str]:
    """Required field names whose slot is blank, in required order."""
    return [name for name in required if is_blank(fields.get(name))]


def merge_into_blanks(
    fields: Mapping[str, Any],
    updates: Mapping[str, Any],
    allowed: Iterable[str] | None = None,
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Merge updates into the field map without overwriting filled slots.

    Args:
        fields: Current field values
        updates: Candidate values
        allowed: If given, only these names may be written

    Returns:
        (merged field map, the updates that were applied)
    """
    allowed_names = set(allowed) if allowed is not None else None
    merged = dict(fields)
    applied: dict[str, Any] = {}
    for name, value in updates.items():
        if allowed_names is not None and name not in allowed_names:
            continue
        if is_blank(value) or not is_blank(merged.get(name)):
            continue
        merged[name] = value
        applied[name] = value
    return merged, applied
