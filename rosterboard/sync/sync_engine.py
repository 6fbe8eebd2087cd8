"""Sync orchestrator - resolves the location and Planning Center client for each run."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.location import Location
from ..models.position import Position
from ..schemas.sync import PeopleSyncResult, PositionSyncResult, SyncReadiness
from ..services import location_svc, pc_svc
from .folders import location_candidates, parent_folder_id, service_types_in_folder
from .people import check_people_syncable, import_people
from .positions import import_positions

NO_SERVICE_TYPE = "no_service_type"
HAS_SERVICE_TYPE = "has_service_type"
POSITIONS_NONE_ENABLED = "positions_none_enabled"
PEOPLE_SYNCABLE = "people_syncable"


async def sync_positions(db: AsyncSession, location_id: uuid.UUID) -> PositionSyncResult:
    """Refresh a location's position allow-list from its service type."""
    location = await location_svc.get_location(db, location_id)
    async with await pc_svc.get_pc_client(db) as pc:
        return await import_positions(db, location, pc)


async def sync_people(db: AsyncSession, location_id: uuid.UUID) -> PeopleSyncResult:
    """Import the people scheduled on a location's next plan."""
    location = await location_svc.get_location(db, location_id)
    # Configuration gaps surface before any Planning Center call.
    await check_people_syncable(db, location)
    async with await pc_svc.get_pc_client(db) as pc:
        return await import_people(db, location, pc)


async def sync_readiness(db: AsyncSession, location: Location) -> SyncReadiness:
    """Where a location stands in the service type -> positions -> people setup."""
    if not location.pc_service_type_id:
        return SyncReadiness(
            state=NO_SERVICE_TYPE,
            ready=False,
            reason="Link a Planning Center service type to this location.",
        )

    counts = (
        await db.execute(
            select(
                func.count(Position.id),
                func.count(Position.id).filter(Position.sync_enabled.is_(True)),
            ).where(Position.location_id == location.id)
        )
    ).one()
    total, enabled = counts[0], counts[1]

    if total == 0:
        return SyncReadiness(
            state=HAS_SERVICE_TYPE,
            ready=False,
            reason="Sync positions from Planning Center.",
        )
    if enabled == 0:
        return SyncReadiness(
            state=POSITIONS_NONE_ENABLED,
            ready=False,
            reason="Enable at least one position for sync.",
        )
    return SyncReadiness(state=PEOPLE_SYNCABLE, ready=True, enabled_positions=enabled)


async def fetch_location_candidates(db: AsyncSession) -> list[dict[str, Any]]:
    """Root folders that can become locations, with their service types."""
    async with await pc_svc.get_pc_client(db) as pc:
        folders = await pc.get_all_folders()
        service_types = await pc.get_all_service_types()
    return location_candidates(folders, service_types)


async def fetch_service_types(db: AsyncSession, folder_id: str | None = None) -> list[dict[str, Any]]:
    """Service types, optionally only those directly inside ``folder_id``."""
    async with await pc_svc.get_pc_client(db) as pc:
        service_types = await pc.get_all_service_types()
    if folder_id:
        service_types = service_types_in_folder(service_types, folder_id)
    return [
        {
            "id": str(st.get("id")),
            "name": (st.get("attributes") or {}).get("name") or "",
            "folder_id": parent_folder_id(st),
        }
        for st in service_types
    ]
