"""Tests for location management."""

from __future__ import annotations

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rosterboard.errors import ConflictError, InvalidInputError, NotFoundError, PrimaryLocationError
from rosterboard.models.location import Location
from rosterboard.models.microphone import Microphone
from rosterboard.models.position import Position
from rosterboard.planning_center import UpstreamUnavailable
from rosterboard.schemas.location import LocationCreate, LocationUpdate
from rosterboard.services import location_svc


@pytest.mark.asyncio
async def test_create_location(db: AsyncSession):
    loc = await location_svc.create_location(
        db, LocationCreate(name=" North ", slug="north", timezone="America/Chicago")
    )
    assert loc.name == "North"
    assert loc.timezone == "America/Chicago"
    assert loc.is_primary is False


@pytest.mark.asyncio
@pytest.mark.parametrize("slug", ["North", "north campus", "north_campus", ""])
async def test_create_rejects_bad_slug(db: AsyncSession, slug):
    with pytest.raises(InvalidInputError):
        await location_svc.create_location(db, LocationCreate(name="North", slug=slug))


@pytest.mark.asyncio
async def test_create_rejects_unknown_timezone(db: AsyncSession):
    with pytest.raises(InvalidInputError):
        await location_svc.create_location(
            db, LocationCreate(name="North", slug="north", timezone="Mars/Olympus")
        )


@pytest.mark.asyncio
async def test_duplicate_slug_is_conflict(db: AsyncSession, location: Location):
    with pytest.raises(ConflictError):
        await location_svc.create_location(db, LocationCreate(name="Again", slug=location.slug))


@pytest.mark.asyncio
async def test_new_primary_demotes_old(db: AsyncSession, linked_location: Location):
    loc = await location_svc.create_location(
        db, LocationCreate(name="South", slug="south", is_primary=True)
    )
    await db.refresh(linked_location)
    assert loc.is_primary is True
    assert linked_location.is_primary is False

    primaries = (await db.execute(select(Location).where(Location.is_primary.is_(True)))).scalars().all()
    assert [p.slug for p in primaries] == ["south"]


@pytest.mark.asyncio
async def test_update_promotes_and_demotes(db: AsyncSession, location: Location, linked_location: Location):
    await location_svc.update_location(db, location.id, LocationUpdate(is_primary=True))
    await db.refresh(linked_location)
    assert linked_location.is_primary is False

    loc = await location_svc.update_location(db, location.id, LocationUpdate(is_primary=False))
    assert loc.is_primary is False


@pytest.mark.asyncio
async def test_update_clears_optional_fields_only(db: AsyncSession, linked_location: Location):
    loc = await location_svc.update_location(
        db, linked_location.id, LocationUpdate(name=None, display_name=None)
    )
    assert loc.name == "Main Campus"
    assert loc.display_name is None
    assert loc.label == "Main Campus"


@pytest.mark.asyncio
async def test_update_service_type_caches_name(db: AsyncSession, location: Location, pc, patched_pc):
    pc.get_all_service_types.return_value = [
        {"id": "st-7", "type": "ServiceType", "attributes": {"name": "Evening"}},
    ]
    loc = await location_svc.update_location(db, location.id, LocationUpdate(pc_service_type_id="st-7"))
    assert loc.pc_service_type_id == "st-7"
    assert loc.service_type_name == "Evening"


@pytest.mark.asyncio
async def test_update_service_type_tolerates_upstream_failure(
    db: AsyncSession, location: Location, pc, patched_pc
):
    pc.get_all_service_types.side_effect = UpstreamUnavailable("down", status_code=503)
    loc = await location_svc.update_location(db, location.id, LocationUpdate(pc_service_type_id="st-7"))
    assert loc.pc_service_type_id == "st-7"
    assert loc.service_type_name is None


@pytest.mark.asyncio
async def test_unlinking_service_type(db: AsyncSession, linked_location: Location, patched_pc):
    loc = await location_svc.update_location(db, linked_location.id, LocationUpdate(pc_service_type_id=""))
    assert loc.pc_service_type_id is None
    assert loc.service_type_name is None
    patched_pc.assert_not_called()


@pytest.mark.asyncio
async def test_primary_location_fallback(db: AsyncSession, location: Location):
    primary = await location_svc.get_primary_location(db)
    assert primary.id == location.id


@pytest.mark.asyncio
async def test_primary_location_none_configured(db: AsyncSession):
    with pytest.raises(NotFoundError):
        await location_svc.get_primary_location(db)


@pytest.mark.asyncio
async def test_cannot_delete_primary_with_others(
    db: AsyncSession, location: Location, linked_location: Location
):
    with pytest.raises(PrimaryLocationError):
        await location_svc.delete_location(db, linked_location.id)

    await location_svc.delete_location(db, location.id)
    await location_svc.delete_location(db, linked_location.id)
    assert await location_svc.list_locations(db) == []


@pytest.mark.asyncio
async def test_delete_cascades_owned_rows(db: AsyncSession, location: Location):
    db.add(Position(location_id=location.id, pc_position_id="tp-1", name="Vocals"))
    db.add(Microphone(location_id=location.id, name="Mic 1", display_order=0))
    await db.commit()

    await location_svc.delete_location(db, location.id)

    assert (await db.execute(select(Position))).scalars().all() == []
    assert (await db.execute(select(Microphone))).scalars().all() == []


@pytest.mark.asyncio
async def test_list_locations_groups_by_folder(db: AsyncSession):
    for name, slug, folder in [("Zeta", "zeta", None), ("Beta", "beta", "West"), ("Alpha", "alpha", "East")]:
        db.add(Location(name=name, slug=slug, folder_name=folder, timezone="UTC"))
    await db.commit()

    assert [loc.slug for loc in await location_svc.list_locations(db)] == ["alpha", "beta", "zeta"]
