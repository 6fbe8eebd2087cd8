"""Position allow-list routes."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.admin import PositionToggle
from ..schemas.sync import PositionOut, PositionSyncResult
from ..services import position_svc
from ..sync import sync_engine
from ..tenant.deps import get_location_id

router = APIRouter(prefix="/api", tags=["positions"])


@router.get("/locations/{location_id}/positions", response_model=list[PositionOut])
async def position_list(
    location_id: uuid.UUID = Depends(get_location_id),
    db: AsyncSession = Depends(get_db),
):
    return await position_svc.list_positions(db, location_id)


@router.post("/locations/{location_id}/positions/sync", response_model=PositionSyncResult)
async def position_sync(
    location_id: uuid.UUID = Depends(get_location_id),
    db: AsyncSession = Depends(get_db),
):
    return await sync_engine.sync_positions(db, location_id)


@router.put("/positions/{position_id}", response_model=PositionOut)
async def position_toggle(
    position_id: uuid.UUID,
    data: PositionToggle,
    db: AsyncSession = Depends(get_db),
):
    return await position_svc.set_sync_enabled(db, position_id, data.sync_enabled)
