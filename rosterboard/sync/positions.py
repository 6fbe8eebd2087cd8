"""Planning Center team positions -> local Position allow-list."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import ConfigurationError
from ..models.location import Location
from ..models.position import Position
from ..planning_center import PlanningCenterClient
from ..schemas.sync import PositionOut, PositionSyncResult
from ..services import position_svc

logger = logging.getLogger(__name__)


async def import_positions(
    db: AsyncSession, location: Location, pc: PlanningCenterClient
) -> PositionSyncResult:
    """Upsert the service type's team positions for ``location``.

    Existing rows keep their ``sync_enabled`` flag and only get the name
    refreshed; new rows start disabled.
    """
    if not location.pc_service_type_id:
        raise ConfigurationError(
            f"Location '{location.name}' has no Planning Center service type. Link one first."
        )

    result = PositionSyncResult()
    team_positions = await pc.get_all_positions(location.pc_service_type_id)

    stmt = select(Position).where(Position.location_id == location.id)
    existing = {p.pc_position_id: p for p in (await db.execute(stmt)).scalars().all()}
    now = datetime.now(timezone.utc)

    for tp in team_positions:
        pc_id = tp.get("id")
        if not pc_id:
            result.skipped += 1
            continue
        pc_id = str(pc_id)
        name = (tp.get("attributes") or {}).get("name") or "Unnamed position"

        position = existing.get(pc_id)
        if position is not None:
            position.name = name
            position.last_synced_at = now
            result.updated += 1
        else:
            position = Position(
                location_id=location.id,
                pc_position_id=pc_id,
                name=name,
                sync_enabled=False,
                last_synced_at=now,
            )
            db.add(position)
            existing[pc_id] = position
            result.created += 1

    await db.commit()
    logger.info(
        "Synced positions for %s: %d created, %d updated",
        location.slug, result.created, result.updated,
    )

    result.positions = [
        PositionOut.model_validate(p) for p in await position_svc.list_positions(db, location.id)
    ]
    return result
