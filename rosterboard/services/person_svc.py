"""Person service."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..config import settings
from ..errors import NotFoundError
from ..models.person import Person, PersonLocation
from ..schemas.sync import PersonOut

logger = logging.getLogger(__name__)


def photo_file(photo_path: str) -> Path:
    """Where a stored ``photo_path`` lives on disk (always under the photo dir)."""
    return settings.photos_path / Path(photo_path).name


def _remove_photo(photo_path: str | None) -> None:
    if not photo_path:
        return
    path = photo_file(photo_path)
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove photo %s: %s", path, e)


def to_out(person: Person) -> PersonOut:
    return PersonOut(
        id=person.id,
        pc_person_id=person.pc_person_id,
        first_name=person.first_name,
        last_name=person.last_name,
        position_id=person.position_id,
        position_name=person.position.name if person.position else None,
        photo_path=person.photo_path,
        photo_position_x=person.photo_position_x,
        photo_position_y=person.photo_position_y,
        photo_zoom=person.photo_zoom,
    )


async def list_people(db: AsyncSession, location_id: uuid.UUID) -> list[Person]:
    """People linked to a location, by last then first name."""
    stmt = (
        select(Person)
        .join(PersonLocation, PersonLocation.person_id == Person.id)
        .where(PersonLocation.location_id == location_id)
        .options(selectinload(Person.position))
        .order_by(Person.last_name, Person.first_name)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_people_out(db: AsyncSession, location_id: uuid.UUID) -> list[PersonOut]:
    return [to_out(p) for p in await list_people(db, location_id)]


async def get_person(db: AsyncSession, person_id: uuid.UUID) -> Person:
    stmt = select(Person).where(Person.id == person_id).options(selectinload(Person.position))
    person = (await db.execute(stmt)).scalar_one_or_none()
    if person is None:
        raise NotFoundError(f"Person {person_id} not found")
    return person


async def update_photo_crop(
    db: AsyncSession,
    person_id: uuid.UUID,
    *,
    position_x: float,
    position_y: float,
    zoom: float | None = None,
) -> Person:
    person = await get_person(db, person_id)
    person.photo_position_x = position_x
    person.photo_position_y = position_y
    person.photo_zoom = zoom if zoom is not None else 1.0
    await db.commit()
    return person


async def set_photo_path(db: AsyncSession, person_id: uuid.UUID, photo_path: str | None) -> Person:
    """Point a person at a new photo, removing the previous file."""
    person = await get_person(db, person_id)
    old_path = person.photo_path
    person.photo_path = photo_path
    await db.commit()
    if old_path and old_path != photo_path:
        _remove_photo(old_path)
    return person


async def delete_person(db: AsyncSession, person_id: uuid.UUID) -> None:
    person = await get_person(db, person_id)
    photo_path = person.photo_path
    await db.delete(person)
    await db.commit()
    _remove_photo(photo_path)
