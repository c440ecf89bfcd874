"""Conversion of raw citation exports into canonical CSL-JSON works.

Supported inputs are CSL-JSON, BibTeX and RIS, the formats reference
managers export. The format is taken from the content type or file
extension when either names one, and sniffed from the content otherwise.
Whatever the source, the result is a list of plain mappings in CSL-JSON
shape, ready for :func:`refviewers.aggregate.aggregator.aggregate_authors`.

Example usage:

    works = convert(Path("refs.ris").read_bytes(), filename="refs.ris")
    works = await aread_citation_file(Path("refs.bib"))
"""

from __future__ import annotations

import asyncio
import json
import mimetypes
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from ..core.errors import FormatError
from ..utils.logging import get_logger
from .bibtex import parse_bibtex
from .ris import looks_like_ris, parse_ris


logger = get_logger(__name__)

CSL_JSON = "csl-json"
BIBTEX = "bibtex"
RIS = "ris"

CONTENT_TYPES = {
    "application/json": CSL_JSON,
    "application/vnd.citationstyles.csl+json": CSL_JSON,
    "application/x-bibtex": BIBTEX,
    "text/x-bibtex": BIBTEX,
    "application/x-research-info-systems": RIS,
}

EXTENSIONS = {
    ".json": CSL_JSON,
    ".csl": CSL_JSON,
    ".bib": BIBTEX,
    ".bibtex": BIBTEX,
    ".ris": RIS,
}

_BIBTEX_ENTRY = re.compile(r"@\s*[A-Za-z]+\s*[{(]")


def describe_content(content_type: Optional[str], filename: Optional[str]) -> str:
    """Name the input's type the way an upload form would report it."""
    if content_type:
        return content_type
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        return guessed or Path(filename).suffix or filename
    return "unknown"


def detect_format(text: str, content_type: Optional[str] = None, filename: Optional[str] = None) -> Optional[str]:
    """Work out which citation format ``text`` is in, or None if none fits."""
    if content_type:
        hinted = CONTENT_TYPES.get(content_type.split(";")[0].strip().lower())
        if hinted:
            return hinted
    if filename:
        hinted = EXTENSIONS.get(Path(filename).suffix.lower())
        if hinted:
            return hinted
    return sniff_format(text)


def sniff_format(text: str) -> Optional[str]:
    """Guess the format from the content alone."""
    if text.lstrip().startswith(("[", "{")):
        return CSL_JSON
    if looks_like_ris(text):
        return RIS
    if _BIBTEX_ENTRY.search(text):
        return BIBTEX
    return None


def _parse_csl_json(text: str) -> List[Dict[str, Any]]:
    data = json.loads(text)
    if isinstance(data, Mapping):
        data = [data]
    if not isinstance(data, list):
        raise ValueError(f"expected a list of CSL items, got {type(data).__name__}")
    return [item for item in data if isinstance(item, Mapping)]


def convert(
    raw: Union[str, bytes],
    content_type: Optional[str] = None,
    filename: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Convert a citation export into a list of canonical works.

    Args:
        raw: File contents, as text or undecoded bytes.
        content_type: MIME type reported for the file, if any.
        filename: Original file name, used as a format hint.

    Returns:
        CSL-JSON shaped works in file order.

    Raises:
        FormatError: If the input is not CSL-JSON, BibTeX or RIS.
    """
    label = describe_content(content_type, filename)
    if isinstance(raw, (bytes, bytearray)):
        try:
            text = bytes(raw).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise FormatError(label, "input is not UTF-8 text") from e
    else:
        text = raw
    if not text.strip():
        raise FormatError(label, "input is empty")
    fmt = detect_format(text, content_type=content_type, filename=filename)
    if fmt is None:
        raise FormatError(label, "no citation format recognized")
    try:
        if fmt == CSL_JSON:
            works = _parse_csl_json(text)
        elif fmt == BIBTEX:
            works = parse_bibtex(text)
        else:
            works = parse_ris(text)
    except Exception as e:
        logger.warning(f"Failed to parse {label} as {fmt}: {e}")
        raise FormatError(label, str(e)) from e
    if not works and sniff_format(text) != fmt:
        # a hint named a format the content does not look like
        raise FormatError(label, f"no {fmt} records found")
    logger.info(f"Converted {len(works)} works from {fmt} input")
    return works


def read_citation_file(path: Path) -> List[Dict[str, Any]]:
    """Read and convert a citation file from disk."""
    return convert(path.read_bytes(), filename=path.name)


async def aread_citation_file(path: Path) -> List[Dict[str, Any]]:
    """Read and convert a citation file without blocking the event loop."""
    return await asyncio.to_thread(read_citation_file, path)
