"""Location management routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.location import Location
from ..schemas.location import LocationCreate, LocationResponse, LocationUpdate
from ..schemas.sync import SyncReadiness
from ..services import location_svc
from ..sync import sync_engine
from ..tenant.deps import get_current_location

router = APIRouter(prefix="/api", tags=["locations"])


@router.get("/locations", response_model=list[LocationResponse])
async def location_list(db: AsyncSession = Depends(get_db)):
    return await location_svc.list_locations(db)


@router.post("/locations", response_model=LocationResponse, status_code=201)
async def location_create(data: LocationCreate, db: AsyncSession = Depends(get_db)):
    return await location_svc.create_location(db, data)


@router.get("/locations/candidates")
async def location_candidates(db: AsyncSession = Depends(get_db)):
    """Planning Center root folders that can become locations."""
    return await sync_engine.fetch_location_candidates(db)


@router.get("/service-types")
async def service_type_list(folder_id: str | None = None, db: AsyncSession = Depends(get_db)):
    return await sync_engine.fetch_service_types(db, folder_id)


@router.get("/locations/{location_id}", response_model=LocationResponse)
async def location_detail(location: Location = Depends(get_current_location)):
    return location


@router.put("/locations/{location_id}", response_model=LocationResponse)
async def location_update(
    data: LocationUpdate,
    location: Location = Depends(get_current_location),
    db: AsyncSession = Depends(get_db),
):
    return await location_svc.update_location(db, location.id, data)


@router.delete("/locations/{location_id}")
async def location_delete(
    location: Location = Depends(get_current_location),
    db: AsyncSession = Depends(get_db),
):
    await location_svc.delete_location(db, location.id)
    return {"message": "Location deleted"}


@router.get("/locations/{location_id}/readiness", response_model=SyncReadiness)
async def location_readiness(
    location: Location = Depends(get_current_location),
    db: AsyncSession = Depends(get_db),
):
    return await sync_engine.sync_readiness(db, location)
