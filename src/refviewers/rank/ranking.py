"""Reviewer ranking projection over author aggregates.

The ranking is a read-only view: aggregates are sorted by how many of the
input works each author appears in, with first and last authorship counts
reported alongside. Nothing here rescans the original work list.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional

from ..core.links import scholar_lookup_url
from ..core.models import AuthorAggregate, CanonicalWork, ReviewerRow, WorkLink
from ..core.normalization import collapse_whitespace


def rank_reviewers(
    aggregates: Iterable[AuthorAggregate],
    top_n: Optional[int] = None,
    min_authorships: int = 1,
) -> List[AuthorAggregate]:
    """Sort aggregates by total authorships, most first.

    Args:
        aggregates: Aggregates in first-appearance order.
        top_n: If provided, keep only the first N after sorting.
        min_authorships: Drop authors with fewer authorships than this.

    Returns:
        A new list; ties keep their input order.

    Raises:
        ValueError: If ``top_n`` is negative.
    """
    if top_n is not None and top_n < 0:
        raise ValueError(f"top_n must not be negative, got {top_n}")
    ranked = sorted(
        (a for a in aggregates if a.total_count >= min_authorships),
        key=lambda a: a.total_count,
        reverse=True,
    )
    return ranked[:top_n] if top_n else ranked


def _work_link(work: CanonicalWork, clean: Callable[[Any], str]) -> WorkLink:
    url = work.get("URL")
    return WorkLink(title=clean(work.get("title")), url=url if isinstance(url, str) else None)


def to_rows(
    aggregates: Iterable[AuthorAggregate],
    clean_title: Optional[Callable[[Any], str]] = None,
    base_url: Optional[str] = None,
) -> List[ReviewerRow]:
    """Project ranked aggregates into table rows.

    ``clean_title`` turns a raw work title into display text; titles are only
    whitespace-collapsed when none is given.
    """
    clean = clean_title or (lambda t: collapse_whitespace(t if isinstance(t, str) else None))
    rows: List[ReviewerRow] = []
    for rank, author in enumerate(aggregates, start=1):
        rows.append(
            ReviewerRow(
                rank=rank,
                full_name=author.full_name,
                scholar_url=scholar_lookup_url(author.full_name, base_url=base_url),
                total_authorships=author.total_count,
                first_authorships=author.first_count,
                last_authorships=author.last_count,
                works=[_work_link(w, clean) for w in author.authorships],
                first_works=[_work_link(w, clean) for w in author.first_authorships],
                last_works=[_work_link(w, clean) for w in author.last_authorships],
            )
        )
    return rows
