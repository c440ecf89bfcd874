"""Exception types raised by refviewers."""

from typing import Optional


class RefviewersError(Exception):
    """Base class for refviewers errors."""


class FormatError(RefviewersError):
    """Raw input is not a supported citation format (RIS, BibTeX, CSL-JSON)."""

    def __init__(self, content_type: Optional[str] = None, detail: Optional[str] = None) -> None:
        self.content_type = content_type or "unknown"
        self.detail = detail
        super().__init__(self.user_message)

    @property
    def user_message(self) -> str:
        return f"Invalid file type! You provided {self.content_type}, which is not supported."
