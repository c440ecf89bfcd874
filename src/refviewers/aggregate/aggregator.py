"""Per-author authorship aggregation over a canonical work list."""

from typing import Any, Dict, Iterable, List, Mapping

from ..core.identity import author_identity_key, display_name
from ..core.models import AuthorAggregate, CanonicalWork
from ..core.normalization import is_author_sequence
from ..utils.logging import get_logger

logger = get_logger(__name__)


def aggregate_authors(works: Iterable[CanonicalWork]) -> List[AuthorAggregate]:
    """
    Build one AuthorAggregate per distinct author identity.

    Each occurrence of a person in a work's ``author`` list appends that work
    to the identity's ``authorships``; position 0 also counts as a first
    authorship and the final position as a last authorship, so a sole author
    gets all three. Works without an ``author`` list are skipped.

    Aggregates are returned in order of first appearance and reference the
    input works directly; nothing in ``works`` is copied or modified.
    """
    authors: Dict[str, AuthorAggregate] = {}
    seen = 0
    skipped = 0
    for work in works:
        seen += 1
        people: Any = work.get("author") if isinstance(work, Mapping) else None
        if not is_author_sequence(people):
            skipped += 1
            continue
        last_index = len(people) - 1
        for i, person in enumerate(people):
            key = author_identity_key(person)
            aggregate = authors.get(key)
            if aggregate is None:
                aggregate = AuthorAggregate(full_name=display_name(person))
                authors[key] = aggregate
            aggregate.authorships.append(work)
            if i == 0:
                aggregate.first_authorships.append(work)
            if i == last_index:
                aggregate.last_authorships.append(work)
    if skipped:
        logger.debug(f"Skipped {skipped} works without an author list")
    logger.info(f"Aggregated {seen} works into {len(authors)} authors")
    return list(authors.values())
