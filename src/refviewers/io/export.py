"""Export of reviewer rankings to CSV and JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

import pandas as pd  # type: ignore

from ..core.models import ReviewerRow
from ..utils.logging import get_logger


logger = get_logger(__name__)

EXPORT_FORMATS = ("csv", "json")


def rows_to_dataframe(rows: List[ReviewerRow]) -> pd.DataFrame:
    """Flatten reviewer rows into one record per author; work titles joined by '; '."""
    records = []
    for row in rows:
        records.append(
            {
                "rank": row.rank,
                "full_name": row.full_name,
                "scholar_url": row.scholar_url,
                "total_authorships": row.total_authorships,
                "first_authorships": row.first_authorships,
                "last_authorships": row.last_authorships,
                "works": "; ".join(w.title for w in row.works),
            }
        )
    columns = [
        "rank",
        "full_name",
        "scholar_url",
        "total_authorships",
        "first_authorships",
        "last_authorships",
        "works",
    ]
    return pd.DataFrame(records, columns=columns)


def export_ranking(rows: List[ReviewerRow], output_path: Path, fmt: str | None = None) -> Path:
    """Write a ranking to ``output_path``.

    Args:
        rows: Ranked reviewer rows.
        output_path: Destination file path.
        fmt: ``csv`` or ``json``; taken from the file suffix when omitted.

    Returns:
        The path written.
    """
    fmt = (fmt or output_path.suffix.lstrip(".") or "csv").lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt} (expected one of {', '.join(EXPORT_FORMATS)})")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"Exporting {len(rows)} reviewers as {fmt} -> {output_path}")
    if fmt == "csv":
        rows_to_dataframe(rows).to_csv(output_path, index=False)
    else:
        payload = [row.model_dump(mode="json") for row in rows]
        output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return output_path
