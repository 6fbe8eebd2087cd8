"""Microphone service - ordered slots, separators and person assignments."""

from __future__ import annotations

import uuid

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..errors import ConfigurationError, InvalidInputError, NotFoundError
from ..models.microphone import Microphone, PersonMicrophone
from ..models.person import Person
from ..schemas.microphone import (
    AssignedPerson,
    MicrophoneCreate,
    MicrophoneResponse,
    MicrophoneUpdate,
)


def to_response(mic: Microphone) -> MicrophoneResponse:
    return MicrophoneResponse(
        id=mic.id,
        location_id=mic.location_id,
        name=mic.name,
        description=mic.description,
        display_order=mic.display_order,
        is_separator=mic.is_separator,
        assigned_people=[AssignedPerson.model_validate(p) for p in mic.people],
    )


async def list_microphones(db: AsyncSession, location_id: uuid.UUID) -> list[Microphone]:
    stmt = (
        select(Microphone)
        .where(Microphone.location_id == location_id)
        .options(selectinload(Microphone.people))
        .order_by(Microphone.display_order, Microphone.id)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_microphone(db: AsyncSession, microphone_id: uuid.UUID) -> Microphone:
    stmt = (
        select(Microphone)
        .where(Microphone.id == microphone_id)
        .options(selectinload(Microphone.people))
    )
    mic = (await db.execute(stmt)).scalar_one_or_none()
    if mic is None:
        raise NotFoundError(f"Microphone {microphone_id} not found")
    return mic


async def create_microphone(
    db: AsyncSession, location_id: uuid.UUID, data: MicrophoneCreate
) -> Microphone:
    """Append a microphone (or separator) after the location's last slot."""
    name = (data.name or "").strip()
    if not name:
        raise InvalidInputError("Name is required")

    stmt = select(func.max(Microphone.display_order)).where(Microphone.location_id == location_id)
    last = (await db.execute(stmt)).scalar_one_or_none()

    mic = Microphone(
        location_id=location_id,
        name=name,
        description=data.description or None,
        is_separator=data.is_separator,
        display_order=0 if last is None else last + 1,
    )
    db.add(mic)
    await db.commit()
    return await get_microphone(db, mic.id)


async def update_microphone(
    db: AsyncSession, microphone_id: uuid.UUID, data: MicrophoneUpdate
) -> Microphone:
    mic = await get_microphone(db, microphone_id)
    changes = data.model_dump(exclude_unset=True)
    if "name" in changes:
        name = (changes["name"] or "").strip()
        if not name:
            raise InvalidInputError("Name is required")
        mic.name = name
    if "description" in changes:
        mic.description = changes["description"] or None
    await db.commit()
    return mic


async def delete_microphone(db: AsyncSession, microphone_id: uuid.UUID) -> None:
    mic = await get_microphone(db, microphone_id)
    await db.delete(mic)
    await db.commit()


async def reorder_microphones(
    db: AsyncSession, location_id: uuid.UUID, microphone_ids: list[uuid.UUID]
) -> list[Microphone]:
    """Renumber a location's microphones densely in one UPDATE ... CASE statement.

    Listed ids take their list index; microphones left out follow them in
    their current order.

    Raises:
        InvalidInputError: The list repeats an id.
        NotFoundError: An id is not a microphone of this location.
    """
    if not microphone_ids:
        return await list_microphones(db, location_id)
    if len(set(microphone_ids)) != len(microphone_ids):
        raise InvalidInputError("Microphone order lists the same microphone twice")

    stmt = (
        select(Microphone.id)
        .where(Microphone.location_id == location_id)
        .order_by(Microphone.display_order, Microphone.id)
    )
    current = list((await db.execute(stmt)).scalars().all())
    known = set(current)
    missing = [str(mid) for mid in microphone_ids if mid not in known]
    if missing:
        raise NotFoundError(f"Microphones not found in this location: {', '.join(missing)}")

    listed = set(microphone_ids)
    ordered = list(microphone_ids) + [mid for mid in current if mid not in listed]
    order = case(
        {mic_id: index for index, mic_id in enumerate(ordered)},
        value=Microphone.id,
    )
    await db.execute(
        update(Microphone)
        .where(Microphone.location_id == location_id, Microphone.id.in_(ordered))
        .values(display_order=order)
        .execution_options(synchronize_session="fetch")
    )
    await db.commit()
    db.expire_all()
    return await list_microphones(db, location_id)


async def assign_person(
    db: AsyncSession, microphone_id: uuid.UUID, person_id: uuid.UUID
) -> Microphone:
    """Assign a person to a microphone; assigning twice is a no-op.

    Raises:
        ConfigurationError: The microphone is a separator.
    """
    mic = await get_microphone(db, microphone_id)
    if mic.is_separator:
        raise ConfigurationError(f"'{mic.name}' is a separator and cannot have people assigned")
    if await db.get(Person, person_id) is None:
        raise NotFoundError(f"Person {person_id} not found")

    stmt = select(PersonMicrophone).where(
        PersonMicrophone.microphone_id == microphone_id,
        PersonMicrophone.person_id == person_id,
    )
    if (await db.execute(stmt)).scalar_one_or_none() is None:
        db.add(PersonMicrophone(microphone_id=microphone_id, person_id=person_id))
        await db.commit()
        await db.refresh(mic, ["people"])
    return mic


async def unassign_person(
    db: AsyncSession, microphone_id: uuid.UUID, person_id: uuid.UUID
) -> Microphone:
    await db.execute(
        delete(PersonMicrophone).where(
            PersonMicrophone.microphone_id == microphone_id,
            PersonMicrophone.person_id == person_id,
        )
    )
    await db.commit()
    mic = await get_microphone(db, microphone_id)
    await db.refresh(mic, ["people"])
    return mic
