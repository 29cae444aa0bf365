"""Sanitizers for registration form input."""

from __future__ import annotations

import re
from typing import Mapping

_PHONE_DISALLOWED = re.compile(r"[^0-9+]")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def clean_text(value: str | None) -> str:
    """Trim surrounding whitespace; None becomes an empty string."""
    return (value or "").strip()


def find_missing_fields(values: Mapping[str, str | None], required: list[str]) -> list[str]:
    """Return required field names whose values are empty after trimming.

    Args:
        values: Raw form values keyed by field name.
        required: Field names in the order they should be reported.

    Returns:
        List of missing field names, preserving the order of ``required``.
    """
    return [name for name in required if not clean_text(values.get(name))]


def normalize_phone(value: str | None) -> str:
    """Keep only digits and '+' signs."""
    return _PHONE_DISALLOWED.sub("", value or "")


def parse_leading_int(value: str | None) -> int:
    """Parse the leading integer of a string, returning 0 when there is none.

    Examples:
        >>> parse_leading_int("3")
        3
        >>> parse_leading_int(" 4 people")
        4
        >>> parse_leading_int("many")
        0
    """
    match = _LEADING_INT.match(value or "")
    if not match:
        return 0
    return int(match.group(1))


def clamp_attendees(value: str | None, *, minimum: int, maximum: int) -> int:
    """Parse and clamp an attendee count to ``[minimum, maximum]``."""
    return max(minimum, min(maximum, parse_leading_int(value)))
