"""Location service."""

from __future__ import annotations

import logging
import re
import uuid
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..errors import (
    ConfigurationError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
    PrimaryLocationError,
)
from ..models.location import Location
from ..planning_center import PlanningCenterError
from ..schemas.location import LocationCreate, LocationUpdate
from . import pc_svc

logger = logging.getLogger(__name__)

SLUG_RE = re.compile(r"^[a-z0-9-]+$")


def validate_slug(slug: str) -> str:
    if not SLUG_RE.match(slug or ""):
        raise InvalidInputError("Slug must contain only lowercase letters, numbers, and hyphens")
    return slug


def validate_timezone(name: str) -> str:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidInputError(f"Unknown timezone '{name}'")
    return name


async def list_locations(db: AsyncSession) -> list[Location]:
    """All locations, grouped by folder then by name (unfiled last)."""
    stmt = select(Location).order_by(Location.folder_name.is_(None), Location.folder_name, Location.name)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_location(db: AsyncSession, location_id: uuid.UUID) -> Location:
    location = await db.get(Location, location_id)
    if location is None:
        raise NotFoundError(f"Location {location_id} not found")
    return location


async def get_location_by_slug(db: AsyncSession, slug: str) -> Location:
    stmt = select(Location).where(Location.slug == slug)
    location = (await db.execute(stmt)).scalar_one_or_none()
    if location is None:
        raise NotFoundError(f"Location '{slug}' not found")
    return location


async def get_primary_location(db: AsyncSession) -> Location:
    """The primary location, else the oldest one."""
    stmt = select(Location).order_by(Location.is_primary.desc(), Location.created_at).limit(1)
    location = (await db.execute(stmt)).scalar_one_or_none()
    if location is None:
        raise NotFoundError("No locations configured")
    return location


async def _demote_others(db: AsyncSession, keep_id: uuid.UUID | None) -> None:
    stmt = update(Location).where(Location.is_primary.is_(True)).values(is_primary=False)
    if keep_id is not None:
        stmt = stmt.where(Location.id != keep_id)
    await db.execute(stmt)


async def _commit(db: AsyncSession, slug: str) -> None:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(f"A location with slug '{slug}' already exists")


async def create_location(db: AsyncSession, data: LocationCreate) -> Location:
    validate_slug(data.slug)
    if not data.name.strip():
        raise InvalidInputError("Name is required")
    timezone = validate_timezone(data.timezone or settings.default_timezone)

    location = Location(
        id=uuid.uuid4(),
        name=data.name.strip(),
        slug=data.slug,
        display_name=data.display_name,
        is_primary=data.is_primary,
        timezone=timezone,
    )
    if data.is_primary:
        await _demote_others(db, keep_id=None)
    db.add(location)
    await _commit(db, data.slug)
    await db.refresh(location)
    logger.info("Created location %s", location.slug)
    return location


async def lookup_service_type_name(db: AsyncSession, service_type_id: str) -> str | None:
    """Cached name for a service type; None when Planning Center can't say."""
    try:
        async with await pc_svc.get_pc_client(db) as pc:
            service_types = await pc.get_all_service_types()
    except (PlanningCenterError, ConfigurationError) as e:
        logger.warning("Could not look up service type %s: %s", service_type_id, e)
        return None
    for st in service_types:
        if str(st.get("id")) == str(service_type_id):
            return (st.get("attributes") or {}).get("name")
    return None


async def update_location(
    db: AsyncSession, location_id: uuid.UUID, data: LocationUpdate
) -> Location:
    location = await get_location(db, location_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("slug") is not None:
        validate_slug(changes["slug"])
    if changes.get("timezone") is not None:
        validate_timezone(changes["timezone"])

    if "pc_service_type_id" in changes:
        service_type_id = changes.pop("pc_service_type_id") or None
        location.pc_service_type_id = service_type_id
        location.service_type_name = (
            await lookup_service_type_name(db, service_type_id) if service_type_id else None
        )

    is_primary = changes.pop("is_primary", None)
    if is_primary:
        await _demote_others(db, keep_id=location.id)
        location.is_primary = True
    elif is_primary is False:
        location.is_primary = False

    # Required columns ignore an explicit null; optional ones are cleared by it.
    for key in ("name", "slug", "timezone"):
        if changes.get(key) is not None:
            setattr(location, key, changes[key])
    for key in ("display_name", "pc_folder_id", "folder_name"):
        if key in changes:
            setattr(location, key, changes[key])

    await _commit(db, location.slug)
    await db.refresh(location)
    return location


async def delete_location(db: AsyncSession, location_id: uuid.UUID) -> None:
    """Delete a location and everything it owns.

    Raises:
        PrimaryLocationError: The location is primary and others exist.
    """
    location = await get_location(db, location_id)
    if location.is_primary:
        count = (await db.execute(select(func.count(Location.id)))).scalar_one()
        if count > 1:
            raise PrimaryLocationError(
                "Cannot delete the primary location while other locations exist. "
                "Set another location as primary first."
            )
    slug = location.slug
    await db.delete(location)
    await db.commit()
    logger.info("Deleted location %s", slug)
