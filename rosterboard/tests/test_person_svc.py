"""Tests for person admin operations."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from rosterboard.config import settings
from rosterboard.errors import NotFoundError
from rosterboard.models.location import Location
from rosterboard.models.person import Person, PersonLocation
from rosterboard.services import person_svc


@pytest.fixture
def photo_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "photo_dir", str(tmp_path))
    return tmp_path


async def make_person(db: AsyncSession, location: Location, first: str, last: str, **kwargs) -> Person:
    person = Person(id=uuid.uuid4(), pc_person_id=f"pc-{first}", first_name=first, last_name=last, **kwargs)
    db.add(person)
    await db.flush()
    db.add(PersonLocation(person_id=person.id, location_id=location.id))
    await db.commit()
    return person


@pytest.mark.asyncio
async def test_list_people_orders_by_name(db: AsyncSession, location: Location, linked_location: Location):
    await make_person(db, location, "Grace", "Hopper")
    await make_person(db, location, "Ada", "Lovelace")
    await make_person(db, location, "Alan", "Hopper")
    await make_person(db, linked_location, "Other", "Campus")

    people = await person_svc.list_people_out(db, location.id)

    assert [(p.last_name, p.first_name) for p in people] == [
        ("Hopper", "Alan"),
        ("Hopper", "Grace"),
        ("Lovelace", "Ada"),
    ]


@pytest.mark.asyncio
async def test_photo_crop_defaults_zoom(db: AsyncSession, location: Location):
    person = await make_person(db, location, "Ada", "Lovelace", photo_zoom=2.5)

    updated = await person_svc.update_photo_crop(db, person.id, position_x=10.0, position_y=80.0)

    assert (updated.photo_position_x, updated.photo_position_y, updated.photo_zoom) == (10.0, 80.0, 1.0)


@pytest.mark.asyncio
async def test_set_photo_path_removes_previous_file(db: AsyncSession, location: Location, photo_dir):
    (photo_dir / "old.jpg").write_bytes(b"old")
    (photo_dir / "new.jpg").write_bytes(b"new")
    person = await make_person(db, location, "Ada", "Lovelace", photo_path="/photos/old.jpg")

    await person_svc.set_photo_path(db, person.id, "/photos/new.jpg")

    assert not (photo_dir / "old.jpg").exists()
    assert (photo_dir / "new.jpg").exists()


def test_photo_file_stays_in_photo_dir(photo_dir):
    assert person_svc.photo_file("../../etc/passwd") == photo_dir / "passwd"


@pytest.mark.asyncio
async def test_delete_person_removes_photo(db: AsyncSession, location: Location, photo_dir):
    (photo_dir / "ada.jpg").write_bytes(b"ada")
    person = await make_person(db, location, "Ada", "Lovelace", photo_path="ada.jpg")

    await person_svc.delete_person(db, person.id)

    assert not (photo_dir / "ada.jpg").exists()
    assert await person_svc.list_people(db, location.id) == []
    with pytest.raises(NotFoundError):
        await person_svc.get_person(db, person.id)


@pytest.mark.asyncio
async def test_delete_person_without_file(db: AsyncSession, location: Location, photo_dir):
    person = await make_person(db, location, "Ada", "Lovelace", photo_path="missing.jpg")
    await person_svc.delete_person(db, person.id)
