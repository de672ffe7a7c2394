"""FastAPI application for the mangafas web API.

Provides REST API endpoints wrapping the mangafas package for:
- Registration, profiles and rank management
- Site bans and comment bans
- Title and chapter submissions and the review queue
- Comment threads, votes, moderation and reports
- Per-user notification inboxes
- Favorites, reading history and profile stats
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mangafas import __version__
from mangafas.config import get_settings
from mangafas.errors import StoreUnavailableError
from mangafas.log import configure_logging
from web.backend.app.routers import comments, content, library, notifications, reports, suspensions, users

_settings = get_settings()
configure_logging(_settings.log_level, _settings.log_json)
logger = logging.getLogger("mangafas.web")

app = FastAPI(
    title="mangafas API",
    description=(
        "REST API for the mangafas trust and content-lifecycle engine. "
        "Provides endpoints for ranks, bans, submissions, comments, "
        "reports and notifications."
    ),
    version=__version__,
)

# ---------------------------------------------------------------------------
# CORS middleware (allow all origins for development)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage unavailable, try again later"},
    )


# ---------------------------------------------------------------------------
# Include routers
# ---------------------------------------------------------------------------
app.include_router(users.router)
app.include_router(suspensions.router)
app.include_router(content.router)
app.include_router(comments.router)
app.include_router(reports.router)
app.include_router(notifications.router)
app.include_router(library.router)


# ---------------------------------------------------------------------------
# Root and health-check endpoints
# ---------------------------------------------------------------------------


@app.get("/", tags=["meta"])
async def root():
    """Return basic API information."""
    return {
        "name": "mangafas API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


@app.get("/health", tags=["meta"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
