"""Public display feed."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.display import DisplayFeed
from ..services import display_svc

router = APIRouter(tags=["display"])


@router.get("/api/display", response_model=DisplayFeed)
async def primary_display(slug: str | None = None, db: AsyncSession = Depends(get_db)):
    """Feed for ``?slug=`` or, without one, the primary location."""
    return await display_svc.compose_display(db, slug=slug)


@router.get("/api/display/{slug}", response_model=DisplayFeed)
async def location_display(slug: str, db: AsyncSession = Depends(get_db)):
    return await display_svc.compose_display(db, slug=slug)
