"""Setlist and board settings routes."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.admin import BoardSettingsUpdate, HiddenItems
from ..schemas.display import SetlistOverview
from ..services import setlist_svc, setting_svc
from ..tenant.deps import get_location_id

router = APIRouter(prefix="/api", tags=["setlist"])


@router.get("/locations/{location_id}/setlist", response_model=SetlistOverview)
async def setlist_overview(
    location_id: uuid.UUID = Depends(get_location_id),
    db: AsyncSession = Depends(get_db),
):
    return await setlist_svc.setlist_overview(db, location_id)


@router.put("/setlist/hidden-items", response_model=HiddenItems)
async def setlist_hidden_items(data: HiddenItems, db: AsyncSession = Depends(get_db)):
    hidden = await setlist_svc.set_hidden_items(db, data.hidden_items)
    return HiddenItems(hidden_items=hidden)


@router.get("/settings")
async def settings_detail(db: AsyncSession = Depends(get_db)):
    return await setting_svc.board_settings(db)


@router.put("/settings")
async def settings_update(data: BoardSettingsUpdate, db: AsyncSession = Depends(get_db)):
    return await setting_svc.update_board_settings(db, data.model_dump(exclude_unset=True))
