"""FastAPI dependencies for location resolution."""

from __future__ import annotations

import uuid

from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.location import Location
from ..services import location_svc


async def get_current_location(
    location_id: uuid.UUID = Path(..., description="Location id"),
    db: AsyncSession = Depends(get_db),
) -> Location:
    """Resolve the path's location id. NotFoundError becomes a 404."""
    return await location_svc.get_location(db, location_id)


async def get_location_id(
    location: Location = Depends(get_current_location),
) -> uuid.UUID:
    """Shorthand dependency that returns just the location_id."""
    return location.id
