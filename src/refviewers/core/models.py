"""Core domain models for works, persons and author aggregates.

Canonical works are kept as plain CSL-JSON mappings exactly as the format
converter emits them. Aggregates only ever hold references to those
mappings, so a work listed under several authors is the same object in
every list.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .links import scholar_lookup_url

CanonicalWork = Mapping[str, Any]


class Person(BaseModel):
    """Lenient typed view of one entry of a work's ``author`` list."""

    model_config = ConfigDict(extra="allow")

    given: Optional[str] = None
    family: Optional[str] = None

    @field_validator("given", "family", mode="before")
    @classmethod
    def _strings_only(cls, v: Any) -> Optional[str]:
        # CSL producers occasionally emit numbers or nulls here
        return v if isinstance(v, str) else None

    @classmethod
    def from_entry(cls, entry: Any) -> "Person":
        """Build a Person from a raw author entry; non-mappings have no name fields."""
        if isinstance(entry, Person):
            return entry
        if isinstance(entry, Mapping):
            return cls.model_validate({str(k): v for k, v in entry.items()})
        return cls()


@dataclass
class AuthorAggregate:
    """Authorship statistics for one resolved author identity.

    Attributes:
        full_name: Display name taken from the first occurrence of the identity.
        authorships: Every work the author appears in, in scan order.
        first_authorships: Works where the author is listed first.
        last_authorships: Works where the author is listed last.
    """

    full_name: str
    authorships: List[CanonicalWork] = field(default_factory=list)
    first_authorships: List[CanonicalWork] = field(default_factory=list)
    last_authorships: List[CanonicalWork] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return len(self.authorships)

    @property
    def first_count(self) -> int:
        return len(self.first_authorships)

    @property
    def last_count(self) -> int:
        return len(self.last_authorships)

    @property
    def scholar_url(self) -> str:
        return scholar_lookup_url(self.full_name)


class WorkLink(BaseModel):
    """Display-ready reference to a work."""

    title: str
    url: Optional[str] = None


class ReviewerRow(BaseModel):
    """One row of the reviewer recommendation table."""

    rank: int = Field(..., ge=1)
    full_name: str
    scholar_url: str
    total_authorships: int = Field(0, ge=0)
    first_authorships: int = Field(0, ge=0)
    last_authorships: int = Field(0, ge=0)
    works: List[WorkLink] = Field(default_factory=list)
    first_works: List[WorkLink] = Field(default_factory=list)
    last_works: List[WorkLink] = Field(default_factory=list)
