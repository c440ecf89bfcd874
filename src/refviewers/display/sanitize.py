"""Plain-text rendering of work titles that may carry markup."""

from typing import Any

from bs4 import BeautifulSoup

from ..core.normalization import collapse_whitespace


def clean_title(title: Any) -> str:
    """Strip every tag from a title, keeping its text, and collapse whitespace."""
    if not isinstance(title, str) or not title:
        return ""
    if "<" not in title and "&" not in title:
        return collapse_whitespace(title)
    return collapse_whitespace(BeautifulSoup(title, "html.parser").get_text())
