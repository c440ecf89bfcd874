"""Current reviewer result for an interactive surface.

A session shows one aggregation at a time. Loading a new export rebuilds
the aggregates from scratch and replaces the old ones; if the export cannot
be converted the previous result stays in place and the rejection message
is kept for display.
"""

from __future__ import annotations

import uuid
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Union

from .aggregate.aggregator import aggregate_authors
from .core.errors import FormatError
from .core.models import AuthorAggregate
from .io.convert import convert
from .rank.ranking import rank_reviewers
from .utils.logging import get_logger


logger = get_logger(__name__)


class ReviewerSession:
    """Holds the most recent successful aggregation and the last upload error."""

    def __init__(self) -> None:
        self.works: List[Dict[str, Any]] = []
        self.authors: List[AuthorAggregate] = []
        self.error: Optional[str] = None
        self.source_name: Optional[str] = None

    @property
    def loaded(self) -> bool:
        return self.source_name is not None

    def load(
        self,
        raw: Union[str, bytes],
        content_type: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> List[AuthorAggregate]:
        """Convert and aggregate an export, replacing the current result.

        Raises:
            FormatError: If conversion fails; the current result is left untouched.
        """
        try:
            works = convert(raw, content_type=content_type, filename=filename)
        except FormatError as e:
            self.error = e.user_message
            logger.warning(f"Rejected upload {filename or ''}: {e.detail}")
            raise
        self.works = works
        self.authors = aggregate_authors(works)
        self.error = None
        self.source_name = filename or "upload"
        return self.authors

    def ranking(self, top_n: Optional[int] = None, min_authorships: int = 1) -> List[AuthorAggregate]:
        return rank_reviewers(self.authors, top_n=top_n, min_authorships=min_authorships)

    def clear_error(self) -> None:
        self.error = None


class SessionStore:
    """Per-client sessions keyed by an opaque id.

    The store is bounded; once ``max_sessions`` is exceeded the least
    recently used session is dropped.
    """

    def __init__(self, max_sessions: int = 256) -> None:
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, ReviewerSession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    def get(self, session_id: str) -> ReviewerSession:
        """Return the session for ``session_id``, creating it if unknown."""
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
            return session
        session = ReviewerSession()
        self._sessions[session_id] = session
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.debug(f"Evicted session {evicted}")
        return session
