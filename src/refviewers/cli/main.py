"""CLI application using Typer for reviewer recommendation."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..aggregate.aggregator import aggregate_authors
from ..config.settings import settings
from ..core.errors import FormatError
from ..display.sanitize import clean_title
from ..display.table import render_reviewer_table
from ..io.convert import aread_citation_file
from ..io.export import EXPORT_FORMATS, export_ranking
from ..rank.ranking import rank_reviewers, to_rows
from ..utils.logging import configure_logging, get_logger

app = typer.Typer(
    name="refviewers",
    help="Recommend manuscript reviewers from the authors you cite",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


@app.callback()
def _configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages to stderr"),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="Log format (text, json)"),
):
    """Recommend manuscript reviewers from the authors you cite."""
    if verbose or log_format:
        configure_logging(level="DEBUG" if verbose else None, log_format=log_format)


def _load_works(citation_file: Path):
    try:
        return asyncio.run(aread_citation_file(citation_file))
    except FormatError as e:
        console.print(f"[red]{e.user_message}[/red]")
        logger.debug(f"Conversion of {citation_file} failed: {e.detail}")
        raise typer.Exit(1)


@app.command()
def rank(
    citation_file: Path = typer.Argument(..., help="RIS, BibTeX or CSL-JSON export", exists=True, dir_okay=False),
    top: Optional[int] = typer.Option(settings.default_top_n, "--top", "-n", min=1, help="Show only the top N authors"),
    min_authorships: int = typer.Option(
        settings.min_authorships, "--min-authorships", "-m", min=1, help="Hide authors cited fewer times"
    ),
    show_works: bool = typer.Option(False, "--show-works/--no-show-works", help="List each author's cited works"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Also write the ranking to this file"),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="Export format (csv, json); default from suffix"),
):
    """Rank the authors of the cited works as candidate reviewers."""
    if fmt and fmt.lower() not in EXPORT_FORMATS:
        console.print(f"[red]Error: --format must be one of {', '.join(EXPORT_FORMATS)}[/red]")
        raise typer.Exit(1)
    works = _load_works(citation_file)
    authors = aggregate_authors(works)
    ranked = rank_reviewers(authors, top_n=top, min_authorships=min_authorships)
    rows = to_rows(ranked, clean_title=clean_title)
    console.print(render_reviewer_table(rows, show_works=show_works))
    console.print(f"{len(works)} works, {len(authors)} distinct authors")
    if output is not None:
        path = export_ranking(rows, output, fmt=fmt)
        console.print(f"Saved: {path}")


@app.command()
def convert(
    citation_file: Path = typer.Argument(..., help="RIS, BibTeX or CSL-JSON export", exists=True, dir_okay=False),
):
    """Print the export as canonical CSL-JSON."""
    works = _load_works(citation_file)
    typer.echo(json.dumps(works, indent=2, ensure_ascii=False))


@app.command()
def serve(
    host: str = typer.Option(
        "127.0.0.1",
        "--host",
        help="Hostname to bind the web server to.",
    ),
    port: int = typer.Option(
        8000,
        "--port",
        help="Port for the web server.",
    ),
    reload: bool = typer.Option(
        False,
        "--reload/--no-reload",
        help="Enable auto-reload (development only).",
    ),
) -> None:
    """Start the upload web interface."""
    from ..web.app import start_server

    console.print(f"[bold blue]Starting web server[/bold blue] at http://{host}:{port}")
    start_server(host=host, port=port, reload=reload)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
