"""Position service."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError
from ..models.position import Position


async def list_positions(db: AsyncSession, location_id: uuid.UUID) -> list[Position]:
    stmt = select(Position).where(Position.location_id == location_id).order_by(Position.name)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_position(db: AsyncSession, position_id: uuid.UUID) -> Position:
    position = await db.get(Position, position_id)
    if position is None:
        raise NotFoundError(f"Position {position_id} not found")
    return position


async def set_sync_enabled(db: AsyncSession, position_id: uuid.UUID, enabled: bool) -> Position:
    position = await get_position(db, position_id)
    position.sync_enabled = enabled
    await db.commit()
    await db.refresh(position)
    return position
