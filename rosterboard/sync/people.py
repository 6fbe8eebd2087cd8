"""Planning Center plan team members -> global Person rows.

Members are only imported when their team position name matches a Position
the admin enabled for the location. A person is one row system-wide, keyed
by ``pc_person_id``, and linked to every location that schedules them.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import ConfigurationError, NoUpcomingPlanError
from ..models.location import Location
from ..models.person import Person, PersonLocation
from ..models.position import Position
from ..planning_center import PlanningCenterClient
from ..schemas.sync import PeopleSyncResult
from ..services import person_svc

logger = logging.getLogger(__name__)


def _member_person_id(member: dict[str, Any]) -> str | None:
    ref = ((member.get("relationships") or {}).get("person") or {}).get("data")
    if isinstance(ref, dict) and ref.get("id"):
        return str(ref["id"])
    return None


async def enabled_positions(db: AsyncSession, location_id: uuid.UUID) -> dict[str, uuid.UUID]:
    """Enabled position name -> Position id for a location."""
    stmt = select(Position.name, Position.id).where(
        Position.location_id == location_id,
        Position.sync_enabled.is_(True),
    )
    return {row.name: row.id for row in (await db.execute(stmt)).all()}


async def check_people_syncable(db: AsyncSession, location: Location) -> dict[str, uuid.UUID]:
    """Enabled positions of a location ready for people sync.

    Raises:
        ConfigurationError: Naming the missing setup step.
    """
    if not location.pc_service_type_id:
        raise ConfigurationError(
            f"Location '{location.name}' has no Planning Center service type. Link one first."
        )
    positions = await enabled_positions(db, location.id)
    if not positions:
        raise ConfigurationError(
            f"No positions are enabled for sync at '{location.name}'. "
            "Sync positions and enable at least one."
        )
    return positions


async def _find_person(db: AsyncSession, pc_person_id: str) -> Person | None:
    stmt = select(Person).where(Person.pc_person_id == pc_person_id)
    return (await db.execute(stmt)).scalar_one_or_none()


async def _ensure_link(db: AsyncSession, person_id: uuid.UUID, location_id: uuid.UUID) -> None:
    stmt = select(PersonLocation).where(
        PersonLocation.person_id == person_id,
        PersonLocation.location_id == location_id,
    )
    if (await db.execute(stmt)).scalar_one_or_none() is None:
        db.add(PersonLocation(person_id=person_id, location_id=location_id))


async def _update_person(
    db: AsyncSession,
    person: Person,
    *,
    location_id: uuid.UUID,
    position_id: uuid.UUID,
    now: datetime,
) -> None:
    person.position_id = position_id
    person.last_synced_at = now
    await _ensure_link(db, person.id, location_id)
    await db.commit()


async def import_people(
    db: AsyncSession, location: Location, pc: PlanningCenterClient
) -> PeopleSyncResult:
    """Upsert the next plan's team members into the global person space.

    Commits once per member, so a failure part-way through leaves the
    earlier members in place and propagates to the caller.

    Raises:
        ConfigurationError: No linked service type, or no enabled positions.
        NoUpcomingPlanError: The service type has no future plan.
    """
    location_id = location.id
    slug = location.slug
    service_type_id = location.pc_service_type_id
    positions = await check_people_syncable(db, location)

    plan = await pc.get_next_plan(service_type_id)
    if not plan:
        raise NoUpcomingPlanError(f"No upcoming plan found for '{location.name}'")

    result = PeopleSyncResult(
        plan_id=str(plan.get("id")),
        plan_title=(plan.get("attributes") or {}).get("title"),
    )
    members = await pc.get_plan_team_members(plan["id"], plan.get("service_type_id"))
    now = datetime.now(timezone.utc)

    for member in members:
        position_name = (member.get("attributes") or {}).get("team_position_name")
        position_id = positions.get(position_name)
        pc_person_id = _member_person_id(member)
        if position_id is None or pc_person_id is None:
            result.skipped += 1
            continue

        person = await _find_person(db, pc_person_id)
        if person is not None:
            await _update_person(db, person, location_id=location_id, position_id=position_id, now=now)
            result.updated += 1
            result.processed += 1
            continue

        detail = await pc.get_person(pc_person_id)
        attrs = detail.get("attributes") or {}
        person_id = uuid.uuid4()
        db.add(
            Person(
                id=person_id,
                pc_person_id=pc_person_id,
                first_name=attrs.get("first_name"),
                last_name=attrs.get("last_name"),
                position_id=position_id,
                last_synced_at=now,
            )
        )
        db.add(PersonLocation(person_id=person_id, location_id=location_id))
        try:
            await db.commit()
            result.created += 1
        except IntegrityError:
            # Another sync inserted this person first; apply ours to that row.
            await db.rollback()
            person = await _find_person(db, pc_person_id)
            if person is None:
                raise
            await _update_person(db, person, location_id=location_id, position_id=position_id, now=now)
            result.updated += 1
        result.processed += 1

    logger.info(
        "Synced people for %s from plan %s: %d created, %d updated, %d skipped",
        slug, result.plan_id, result.created, result.updated, result.skipped,
    )

    result.people = await person_svc.list_people_out(db, location_id)
    return result
