"""Rich console rendering of the reviewer recommendation table."""

from __future__ import annotations

from typing import List

from rich.markup import escape
from rich.table import Table

from ..core.models import ReviewerRow, WorkLink


def _link(text: str, url: str | None) -> str:
    if not url:
        return escape(text)
    return f"[link={escape(url)}]{escape(text)}[/link]"


def _work_list(works: List[WorkLink]) -> str:
    return "\n".join(_link(w.title or "(untitled)", w.url) for w in works)


def render_reviewer_table(rows: List[ReviewerRow], show_works: bool = False, title: str = "Authors") -> Table:
    """Build a table of ranked reviewers.

    Names link to the author's literature search. With ``show_works`` the
    titles of every authorship are listed too, each linked to its URL.
    """
    table = Table(title=title)
    table.add_column("Rank", style="dim", justify="right")
    table.add_column("Full Name", style="cyan")
    if show_works:
        table.add_column("All Authorships")
    table.add_column("Total Authorships", style="green", justify="right")
    table.add_column("First Authorships", style="magenta", justify="right")
    table.add_column("Last Authorships", style="yellow", justify="right")
    for row in rows:
        cells = [str(row.rank), _link(row.full_name, row.scholar_url)]
        if show_works:
            cells.append(_work_list(row.works))
        cells.extend(
            [
                str(row.total_authorships),
                str(row.first_authorships),
                str(row.last_authorships),
            ]
        )
        table.add_row(*cells)
    return table
