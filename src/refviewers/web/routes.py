"""API routes for the upload interface.

The web surface mirrors the original single-page tool: upload a citation
export, get back the ranked reviewer table. Each browser gets its own
``ReviewerSession`` (see ``app.py`` for the cookie), so the last successful
upload stays visible to that client after a rejected one and uploads from
different clients never overwrite each other.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from ..config.settings import settings
from ..core.errors import FormatError
from ..core.models import AuthorAggregate, ReviewerRow
from ..display.sanitize import clean_title
from ..rank.ranking import to_rows
from ..session import ReviewerSession, SessionStore
from ..utils.logging import get_logger


logger = get_logger(__name__)

router = APIRouter()
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
sessions = SessionStore(max_sessions=settings.max_sessions)


def current_session(request: Request) -> ReviewerSession:
    """Session of the requesting client, keyed by the id the app middleware assigned."""
    session_id = getattr(request.state, "session_id", None) or request.cookies.get(settings.session_cookie, "")
    return sessions.get(session_id)


def _current_rows(session: ReviewerSession, top: Optional[int] = None) -> List[ReviewerRow]:
    ranked = session.ranking(top_n=top, min_authorships=settings.min_authorships)
    return to_rows(ranked, clean_title=clean_title)


async def _load_upload(session: ReviewerSession, file: UploadFile) -> List[AuthorAggregate]:
    contents = await file.read()
    if len(contents) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File too large")
    # parsing large exports is CPU bound
    authors = await asyncio.to_thread(session.load, contents, file.content_type, file.filename)
    logger.info(f"Loaded {file.filename}: {len(session.works)} works, {len(authors)} authors")
    return authors


@router.post("/api/upload")
async def upload(
    file: UploadFile = File(...),
    session: ReviewerSession = Depends(current_session),
) -> Dict[str, object]:
    """Convert and aggregate an uploaded export, replacing the current result."""
    try:
        authors = await _load_upload(session, file)
    except FormatError as e:
        raise HTTPException(status_code=415, detail=e.user_message)
    return {
        "filename": session.source_name,
        "works": len(session.works),
        "authors": len(authors),
    }


@router.post("/upload")
async def upload_form(
    file: UploadFile = File(...),
    session: ReviewerSession = Depends(current_session),
) -> RedirectResponse:
    """Browser form upload; always lands back on the page, which shows the result or the error."""
    try:
        await _load_upload(session, file)
    except FormatError:
        # session.error already holds the rejection message for the page
        logger.debug(f"Form upload {file.filename} rejected")
    return RedirectResponse("/", status_code=303)


@router.get("/api/reviewers")
async def reviewers(
    top: Optional[int] = Query(None, ge=1),
    session: ReviewerSession = Depends(current_session),
) -> Dict[str, object]:
    """Current ranking as JSON rows."""
    rows = _current_rows(session, top or settings.default_top_n)
    return {
        "source": session.source_name,
        "error": session.error,
        "reviewers": [row.model_dump(mode="json") for row in rows],
    }


@router.get("/", response_class=HTMLResponse)
async def index(request: Request, session: ReviewerSession = Depends(current_session)) -> HTMLResponse:
    """Upload form and the current reviewer table."""
    # the error is shown once, like a dismissed alert
    error = session.error
    session.clear_error()
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "title": "refviewers",
            "error": error,
            "source": session.source_name,
            "work_count": len(session.works),
            "author_count": len(session.authors),
            "rows": _current_rows(session, settings.default_top_n),
        },
    )
