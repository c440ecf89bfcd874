"""Author identity keys and display names.

Two persons share an identity when the first token of their given name and
the first token of their family name match exactly. This is a lossy
heuristic: "Jane A. Doe" and "Jane B. Doe" collapse, case and diacritics
are significant, and persons without any name fields all share the empty
key.
"""

from typing import Any, List

from .models import Person
from .normalization import first_token

KEY_SEPARATOR = "|"


def author_identity_key(person: Any) -> str:
    """Compute the deduplication key for a raw author entry or Person."""
    p = Person.from_entry(person)
    tokens: List[str] = []
    given = first_token(p.given)
    if given:
        tokens.append(given)
    family = first_token(p.family)
    if family:
        tokens.append(family)
    return KEY_SEPARATOR.join(tokens)


def display_name(person: Any) -> str:
    """Join given and family name with one space, untrimmed."""
    p = Person.from_entry(person)
    return f"{p.given or ''} {p.family or ''}"
