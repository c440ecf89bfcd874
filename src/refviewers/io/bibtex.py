"""BibTeX import for citation exports.

Entries are parsed with ``bibtexparser`` and mapped onto CSL-JSON shaped
works. Author fields are split on the top-level ``and`` separators and each
name is broken into given and family parts, so that

    author = {Doe, Jane and Lee, Bob and {World Health Organization}}

becomes three persons, the last one with a family name only.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List

import bibtexparser
from bibtexparser.bparser import BibTexParser
from bibtexparser.customization import splitname
from bibtexparser.latexenc import latex_to_unicode

from ..utils.logging import get_logger


logger = get_logger(__name__)

# Mapping from BibTeX entry type to CSL item type
ENTRY_TYPES = {
    "article": "article-journal",
    "inproceedings": "paper-conference",
    "conference": "paper-conference",
    "inbook": "chapter",
    "incollection": "chapter",
    "book": "book",
    "phdthesis": "thesis",
    "mastersthesis": "thesis",
    "techreport": "report",
    "misc": "article",
}

_YEAR = re.compile(r"\d{4}")


def _split_authors(field: str) -> List[str]:
    """Split an author field on ``and`` outside of braces."""
    names: List[str] = []
    depth = 0
    current: List[str] = []
    tokens = re.split(r"(\s+|[{}])", field)
    for tok in tokens:
        if tok == "{":
            depth += 1
        elif tok == "}":
            depth -= 1
        if depth == 0 and tok.lower() == "and":
            names.append("".join(current).strip())
            current = []
            continue
        current.append(tok)
    names.append("".join(current).strip())
    return [n for n in names if n]


def _clean(text: str) -> str:
    return " ".join(latex_to_unicode(text).replace("{", "").replace("}", "").split())


def parse_name(name: str) -> Dict[str, str]:
    """Convert one BibTeX name into a CSL person."""
    parts = splitname(name, strict_mode=False)
    family = _clean(" ".join(parts.get("von", []) + parts.get("last", [])))
    given = _clean(" ".join(parts.get("first", [])))
    person: Dict[str, str] = {}
    if given:
        person["given"] = given
    if family:
        person["family"] = family
    suffix = _clean(" ".join(parts.get("jr", [])))
    if suffix:
        person["suffix"] = suffix
    return person


def _entry_to_work(entry: Dict[str, Any]) -> Dict[str, Any]:
    work: Dict[str, Any] = {
        "id": entry.get("ID"),
        "type": ENTRY_TYPES.get(entry.get("ENTRYTYPE", "").lower(), "article"),
    }
    if entry.get("title"):
        work["title"] = _clean(entry["title"])
    if entry.get("author"):
        work["author"] = [parse_name(n) for n in _split_authors(entry["author"])]
    if entry.get("editor"):
        work["editor"] = [parse_name(n) for n in _split_authors(entry["editor"])]
    container = entry.get("journal") or entry.get("booktitle")
    if container:
        work["container-title"] = _clean(container)
    if entry.get("publisher"):
        work["publisher"] = _clean(entry["publisher"])
    if entry.get("doi"):
        work["DOI"] = entry["doi"].strip()
    if entry.get("url"):
        work["URL"] = entry["url"].strip()
    elif entry.get("doi"):
        work["URL"] = f"https://doi.org/{entry['doi'].strip()}"
    year = _YEAR.search(entry.get("year", ""))
    if year:
        work["issued"] = {"date-parts": [[int(year.group())]]}
    return work


def parse_bibtex(text: str) -> List[Dict[str, Any]]:
    """Parse BibTeX source into CSL-JSON shaped works."""
    parser = BibTexParser(common_strings=True, ignore_nonstandard_types=False)
    db = bibtexparser.loads(text, parser=parser)
    works = [_entry_to_work(entry) for entry in db.entries]
    logger.debug(f"Parsed {len(works)} BibTeX entries")
    return works
