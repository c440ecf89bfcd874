"""Text and structure normalization utilities."""

from collections.abc import Mapping, Sequence
from typing import Any, Optional


def first_token(value: Any) -> Optional[str]:
    """Return the first whitespace-delimited token of a string, or None if blank."""
    if not isinstance(value, str):
        return None
    parts = value.split()
    return parts[0] if parts else None


def collapse_whitespace(text: Optional[str]) -> str:
    """Collapse runs of whitespace to single spaces."""
    if not text:
        return ""
    return " ".join(text.split())


def is_author_sequence(value: Any) -> bool:
    """True for list-like author containers; strings, bytes and mappings do not count."""
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    return isinstance(value, Sequence)
