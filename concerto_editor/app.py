"""
FastAPI application factory for the Concerto editor.

This module creates the main FastAPI app with:
- CORS configuration for the canvas frontend
- Editor session registry lifecycle
- Editor API routes
- Error mapping for service errors
- Static file serving for the frontend, when built

Usage:
    uvicorn concerto_editor.app:app --port 8082
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .config import Settings
from .errors import EditorError
from .routes import router
from .sessions import SessionManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage editor session registry lifecycle."""
    settings: Settings = app.state.settings
    sessions = SessionManager(max_sessions=settings.max_sessions)
    app.state.sessions = sessions

    yield

    logger.info(f"Shutting down with {len(sessions)} open sessions")
    sessions.clear()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or Settings()

    app = FastAPI(
        title="Concerto Editor",
        description=(
            "Backend for the visual Concerto concept editor. "
            "The canvas posts interaction events and renders the returned "
            "node and connection collections."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(EditorError)
    async def editor_error_handler(request: Request, exc: EditorError) -> JSONResponse:
        logger.info(f"{request.method} {request.url.path}: {exc.code} {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # API routes
    app.include_router(router, prefix="/api/v1")

    @app.get("/health")
    async def health():
        return {"status": "healthy", "service": "concerto-editor"}

    # Serve frontend static files
    static_dir = Path(__file__).parent / "frontend" / "dist"
    if static_dir.exists():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="frontend")

    return app


app = create_app()
