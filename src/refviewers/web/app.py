"""FastAPI application for the reviewer upload interface.

``create_app`` wires the routes and a middleware that hands every browser
a session cookie; the routes look the visitor's ``ReviewerSession`` up by
that id. ``start_server`` runs the module-level ``app`` under Uvicorn.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
import uvicorn

from ..config.settings import settings
from ..session import SessionStore
from ..utils.logging import get_logger
from .routes import router


logger = get_logger(__name__)


def create_app() -> FastAPI:
    application = FastAPI(
        title="refviewers",
        description="Recommend manuscript reviewers from a citation export",
        version="0.1.0",
    )

    @application.middleware("http")
    async def assign_session(request: Request, call_next):
        session_id = request.cookies.get(settings.session_cookie)
        issued = not session_id
        if issued:
            session_id = SessionStore.new_id()
        request.state.session_id = session_id
        response = await call_next(request)
        if issued:
            response.set_cookie(settings.session_cookie, session_id, httponly=True, samesite="lax")
        return response

    application.include_router(router)
    return application


app = create_app()


def start_server(host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    """Serve ``app`` with Uvicorn; ``reload`` is for development only."""
    logger.info(f"Serving on http://{host}:{port}")
    uvicorn.run("refviewers.web.app:app", host=host, port=port, reload=reload)
