"""Async test fixtures for roster board tests using SQLite."""

from __future__ import annotations

import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from rosterboard.database import get_db
from rosterboard.models.base import Base
from rosterboard.models.location import Location
from rosterboard.planning_center import PlanningCenterClient


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine):
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def location(db: AsyncSession):
    loc = Location(
        id=uuid.uuid4(),
        name="Test Location",
        slug="test-location",
        timezone="UTC",
    )
    db.add(loc)
    await db.commit()
    await db.refresh(loc)
    return loc


@pytest_asyncio.fixture
async def linked_location(db: AsyncSession):
    """A location already linked to Planning Center service type "st-1"."""
    loc = Location(
        id=uuid.uuid4(),
        name="Main Campus",
        slug="main",
        display_name="Main Campus Worship",
        is_primary=True,
        timezone="America/New_York",
        pc_service_type_id="st-1",
        service_type_name="Sunday Morning",
    )
    db.add(loc)
    await db.commit()
    await db.refresh(loc)
    return loc


@pytest.fixture
def pc():
    """Planning Center client double usable as ``async with ... as pc``."""
    client = AsyncMock(spec=PlanningCenterClient)
    client.__aenter__.return_value = client
    client.__aexit__.return_value = None
    client.get_all_folders.return_value = []
    client.get_all_service_types.return_value = []
    client.get_all_positions.return_value = []
    client.get_next_plan.return_value = None
    client.get_plan_team_members.return_value = []
    client.get_plan_items.return_value = []
    return client


@pytest.fixture
def patched_pc(pc):
    """Route every ``pc_svc.get_pc_client`` call to the ``pc`` double."""
    with patch("rosterboard.services.pc_svc.get_pc_client", AsyncMock(return_value=pc)) as factory:
        yield factory


@pytest_asyncio.fixture
async def client(engine):
    """HTTPX async test client against the roster board app."""
    from rosterboard.app import app

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


def _plan(plan_id: str = "plan-1", title: str = "Sunday Service", sort_date: str = "2026-10-25T13:30:00Z"):
    return {
        "id": plan_id,
        "type": "Plan",
        "attributes": {"title": title, "sort_date": sort_date},
        "service_type_id": "st-1",
    }


def _team_member(person_id: str, position_name: str, name: str = ""):
    return {
        "id": f"tm-{person_id}-{position_name}",
        "type": "PlanPerson",
        "attributes": {"name": name, "team_position_name": position_name, "status": "C"},
        "relationships": {"person": {"data": {"type": "Person", "id": person_id}}},
    }


def _person_detail(person_id: str, first_name: str, last_name: str):
    return {
        "id": person_id,
        "type": "Person",
        "attributes": {"first_name": first_name, "last_name": last_name},
    }


def _plan_item(title: str, item_type: str = "song", key_name: str | None = None):
    attrs = {"title": title, "item_type": item_type}
    if key_name:
        attrs["key_name"] = key_name
    return {"id": f"item-{title}", "type": "Item", "attributes": attrs}


@pytest.fixture
def payloads():
    """Builders for Planning Center JSON:API payloads."""
    return SimpleNamespace(
        plan=_plan,
        team_member=_team_member,
        person_detail=_person_detail,
        plan_item=_plan_item,
    )
