"""RIS import for citation exports."""

from __future__ import annotations

import re
from collections import defaultdict
from typing import Any, Dict, List

from ..utils.logging import get_logger


logger = get_logger(__name__)

RIS_LINE_RE = re.compile(
    r"""
    ^\s*
    (?P<tag>[A-Z][A-Z0-9])   # two-char RIS tag
    \s{1,2}-\s?              # "  - " separator, tolerating sloppy spacing
    (?P<value>.*)$
    """,
    re.VERBOSE,
)

# Mapping from RIS reference type to CSL item type
REFERENCE_TYPES = {
    "JOUR": "article-journal",
    "JFULL": "article-journal",
    "EJOUR": "article-journal",
    "MGZN": "article-magazine",
    "NEWS": "article-newspaper",
    "BOOK": "book",
    "EBOOK": "book",
    "CHAP": "chapter",
    "ECHAP": "chapter",
    "CONF": "paper-conference",
    "CPAPER": "paper-conference",
    "THES": "thesis",
    "RPRT": "report",
    "ELEC": "webpage",
}

AUTHOR_TAGS = ("AU", "A1")
TITLE_TAGS = ("TI", "T1")
CONTAINER_TAGS = ("JO", "JF", "T2", "JA")
YEAR_TAGS = ("PY", "Y1", "DA")

_YEAR = re.compile(r"\d{4}")


def looks_like_ris(text: str) -> bool:
    """True if the text contains a ``TY  -`` record start."""
    for line in text.splitlines():
        m = RIS_LINE_RE.match(line)
        if m and m.group("tag") == "TY":
            return True
    return False


def _split_records(text: str) -> List[Dict[str, List[str]]]:
    records: List[Dict[str, List[str]]] = []
    current: Dict[str, List[str]] = defaultdict(list)
    last_tag = None
    for line in text.splitlines():
        m = RIS_LINE_RE.match(line)
        if m:
            tag, value = m.group("tag"), m.group("value").strip()
            if tag == "ER":
                if current:
                    records.append(dict(current))
                current = defaultdict(list)
                last_tag = None
                continue
            current[tag].append(value)
            last_tag = tag
        elif last_tag and line.strip():
            # continuation of a wrapped value
            current[last_tag][-1] += " " + line.strip()
    if current:
        records.append(dict(current))
    return records


def parse_name(name: str) -> Dict[str, str]:
    """Convert a RIS ``Family, Given`` name into a CSL person."""
    name = " ".join(name.split())
    person: Dict[str, str] = {}
    if "," in name:
        family, _, rest = name.partition(",")
        given, _, suffix = rest.partition(",")
        if given.strip():
            person["given"] = given.strip()
        if family.strip():
            person["family"] = family.strip()
        if suffix.strip():
            person["suffix"] = suffix.strip()
        return person
    parts = name.split()
    if len(parts) >= 2:
        person["given"] = " ".join(parts[:-1])
        person["family"] = parts[-1]
    elif parts:
        person["family"] = parts[0]
    return person


def _first(record: Dict[str, List[str]], tags: tuple) -> str:
    for tag in tags:
        values = record.get(tag)
        if values and values[0]:
            return values[0]
    return ""


def _record_to_work(record: Dict[str, List[str]], index: int) -> Dict[str, Any]:
    ref_type = _first(record, ("TY",)).upper()
    work: Dict[str, Any] = {
        "id": _first(record, ("ID",)) or f"ris-{index}",
        "type": REFERENCE_TYPES.get(ref_type, "article"),
    }
    title = _first(record, TITLE_TAGS)
    if title:
        work["title"] = title
    names = [n for tag in AUTHOR_TAGS for n in record.get(tag, []) if n.strip()]
    if names:
        work["author"] = [parse_name(n) for n in names]
    container = _first(record, CONTAINER_TAGS)
    if container:
        work["container-title"] = container
    if record.get("PB"):
        work["publisher"] = record["PB"][0]
    doi = _first(record, ("DO",))
    if doi:
        work["DOI"] = doi
    url = _first(record, ("UR",))
    if url:
        work["URL"] = url
    elif doi:
        work["URL"] = f"https://doi.org/{doi}"
    year = _YEAR.search(_first(record, YEAR_TAGS))
    if year:
        work["issued"] = {"date-parts": [[int(year.group())]]}
    return work


def parse_ris(text: str) -> List[Dict[str, Any]]:
    """Parse RIS source into CSL-JSON shaped works."""
    works = [_record_to_work(r, i) for i, r in enumerate(_split_records(text)) if r.get("TY")]
    logger.debug(f"Parsed {len(works)} RIS records")
    return works
