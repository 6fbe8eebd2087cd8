"""Tests for collapsing duplicate people onto one global row."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from rosterboard.models.location import Location
from rosterboard.models.microphone import Microphone, PersonMicrophone
from rosterboard.models.person import Person, PersonLocation
from rosterboard.sync import merge
from rosterboard.sync.merge import merge_duplicate_persons


def at(month: int) -> datetime:
    return datetime(2026, month, 1, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_merge_keeps_oldest_and_moves_links(
    db: AsyncSession, location: Location, linked_location: Location
):
    # Legacy databases predate the unique index.
    await db.execute(text("DROP INDEX uq_person_pc_person_id"))

    oldest = Person(id=uuid.uuid4(), pc_person_id="100", first_name="Ada", last_name="Lovelace", created_at=at(1))
    newer = Person(id=uuid.uuid4(), pc_person_id="100", first_name="Ada", last_name="L.", created_at=at(3))
    other = Person(id=uuid.uuid4(), pc_person_id="200", first_name="Grace", last_name="Hopper", created_at=at(2))
    db.add_all([oldest, newer, other])
    await db.flush()

    mic = Microphone(id=uuid.uuid4(), location_id=linked_location.id, name="Mic 1", display_order=0)
    db.add(mic)
    await db.flush()
    db.add_all(
        [
            PersonLocation(person_id=oldest.id, location_id=location.id),
            PersonLocation(person_id=newer.id, location_id=location.id),
            PersonLocation(person_id=newer.id, location_id=linked_location.id),
            PersonLocation(person_id=other.id, location_id=location.id),
            PersonMicrophone(person_id=newer.id, microphone_id=mic.id),
        ]
    )
    await db.commit()
    oldest_id, newer_id, other_id = oldest.id, newer.id, other.id
    location_ids = {location.id, linked_location.id}
    mic_id = mic.id

    result = await merge_duplicate_persons(db)

    assert result.groups_merged == 1
    assert result.rows_removed == 1
    assert result.links_moved == 2

    ids = set((await db.execute(select(Person.id))).scalars().all())
    assert ids == {oldest_id, other_id}
    assert newer_id not in ids

    locations = (
        await db.execute(select(PersonLocation.location_id).where(PersonLocation.person_id == oldest_id))
    ).scalars().all()
    assert set(locations) == location_ids

    mics = (
        await db.execute(select(PersonMicrophone.microphone_id).where(PersonMicrophone.person_id == oldest_id))
    ).scalars().all()
    assert mics == [mic_id]

    orphaned = (
        await db.execute(select(PersonLocation).where(PersonLocation.person_id == newer_id))
    ).scalars().all()
    assert orphaned == []


@pytest.mark.asyncio
async def test_merge_without_duplicates_is_a_no_op(db: AsyncSession, location: Location):
    db.add(Person(id=uuid.uuid4(), pc_person_id="100", first_name="Ada"))
    db.add(Person(id=uuid.uuid4(), pc_person_id=None, first_name="Manual"))
    db.add(Person(id=uuid.uuid4(), pc_person_id=None, first_name="Also Manual"))
    await db.commit()

    result = await merge_duplicate_persons(db)

    assert (result.groups_merged, result.rows_removed, result.links_moved) == (0, 0, 0)
    assert len((await db.execute(select(Person.id))).scalars().all()) == 3


async def link_snapshot(db: AsyncSession):
    people = set((await db.execute(select(Person.id, Person.pc_person_id))).all())
    locations = set((await db.execute(select(PersonLocation.person_id, PersonLocation.location_id))).all())
    mics = set((await db.execute(select(PersonMicrophone.person_id, PersonMicrophone.microphone_id))).all())
    return people, locations, mics


@pytest.mark.asyncio
async def test_merge_failure_in_later_group_rolls_back_everything(
    db: AsyncSession, location: Location, linked_location: Location
):
    await db.execute(text("DROP INDEX uq_person_pc_person_id"))

    people = [
        Person(id=uuid.uuid4(), pc_person_id="100", first_name="Ada", created_at=at(1)),
        Person(id=uuid.uuid4(), pc_person_id="100", first_name="Ada", created_at=at(2)),
        Person(id=uuid.uuid4(), pc_person_id="200", first_name="Grace", created_at=at(1)),
        Person(id=uuid.uuid4(), pc_person_id="200", first_name="Grace", created_at=at(2)),
    ]
    db.add_all(people)
    mic = Microphone(id=uuid.uuid4(), location_id=location.id, name="Mic 1", display_order=0)
    db.add(mic)
    await db.flush()
    db.add_all(
        [
            PersonLocation(person_id=people[0].id, location_id=location.id),
            PersonLocation(person_id=people[1].id, location_id=linked_location.id),
            PersonLocation(person_id=people[2].id, location_id=location.id),
            PersonLocation(person_id=people[3].id, location_id=linked_location.id),
            PersonMicrophone(person_id=people[1].id, microphone_id=mic.id),
            PersonMicrophone(person_id=people[3].id, microphone_id=mic.id),
        ]
    )
    await db.commit()
    before = await link_snapshot(db)

    real_relink = merge._relink
    calls = []

    def failing_relink(session, canonical_id, duplicate_ids):
        calls.append(canonical_id)
        if len(calls) == 2:
            raise RuntimeError("disk full")
        return real_relink(session, canonical_id, duplicate_ids)

    with patch("rosterboard.sync.merge._relink", side_effect=failing_relink):
        with pytest.raises(RuntimeError):
            await merge_duplicate_persons(db)

    assert len(calls) == 2
    assert await link_snapshot(db) == before
    assert len(before[0]) == 4
