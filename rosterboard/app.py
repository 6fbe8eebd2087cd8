"""FastAPI application for the roster board."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .errors import BoardError
from .planning_center import OAuthError, PlanningCenterError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Auto-create tables for SQLite (local dev); PostgreSQL uses Alembic migrations
    if "sqlite" in settings.database_url:
        from .database import engine
        from .models import Base
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    yield


app = FastAPI(title=settings.app_title, lifespan=lifespan)


@app.exception_handler(BoardError)
async def board_error_handler(request: Request, exc: BoardError):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(PlanningCenterError)
async def planning_center_error_handler(request: Request, exc: PlanningCenterError):
    logger.warning("Planning Center request failed on %s: %s", request.url.path, exc.message)
    return JSONResponse({"error": f"Sync failed: {exc.message}"}, status_code=502)


@app.exception_handler(OAuthError)
async def oauth_error_handler(request: Request, exc: OAuthError):
    logger.warning("Planning Center OAuth failed: %s (%s)", exc.message, exc.error_code)
    return JSONResponse({"error": exc.message}, status_code=502)


# Import and register routers
from .routers import (  # noqa: E402
    display, health, locations, microphones, oauth, people, positions, setlist,
)

app.include_router(health.router)
app.include_router(display.router)
app.include_router(locations.router)
app.include_router(positions.router)
app.include_router(people.router)
app.include_router(microphones.router)
app.include_router(setlist.router)
app.include_router(oauth.router)
