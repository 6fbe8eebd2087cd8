"""Public display feed composition.

The board walks a location's microphones in ``display_order``: separators
are emitted as headings and each microphone slot opens the people whose
lowest assigned slot it is. The setlist comes from Planning Center and never
breaks the feed; when it can't be fetched it is simply absent.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Any, Iterable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..config import settings
from ..errors import ConfigurationError
from ..models.location import Location
from ..models.microphone import Microphone, PersonMicrophone
from ..models.person import Person, PersonLocation
from ..planning_center import PlanningCenterError
from ..schemas.display import (
    DisplayFeed,
    DisplayItem,
    DisplayPerson,
    DisplaySeparator,
    Logo,
    Setlist,
)
from . import location_svc, pc_svc, setlist_svc, setting_svc

logger = logging.getLogger(__name__)

SUNDAY = 6  # date.weekday()


def next_sunday(today: date) -> date:
    """The Sunday strictly after ``today`` (a week ahead when today is Sunday)."""
    days = (SUNDAY - today.weekday()) % 7 or 7
    return today + timedelta(days=days)


def location_zone(location: Location) -> ZoneInfo:
    try:
        return ZoneInfo(location.timezone or settings.default_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r for %s; using default", location.timezone, location.slug)
        return ZoneInfo(settings.default_timezone)


def plan_date(plan: dict[str, Any], tz: ZoneInfo) -> date | None:
    """Calendar date of a plan's ``sort_date`` in ``tz``."""
    raw = (plan.get("attributes") or {}).get("sort_date")
    if not raw:
        return None
    try:
        moment = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Unparseable plan sort_date %r", raw)
        return None
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


def _person_sort_key(person: DisplayPerson) -> tuple:
    return (
        person.position_name is None,
        person.position_name or "",
        person.last_name or "",
        person.first_name or "",
    )


def _to_display_person(person: Person, mic_order: int | None) -> DisplayPerson:
    return DisplayPerson(
        id=person.id,
        first_name=person.first_name,
        last_name=person.last_name,
        position_name=person.position.name if person.position else None,
        photo_path=person.photo_path,
        photo_position_x=person.photo_position_x,
        photo_position_y=person.photo_position_y,
        photo_zoom=person.photo_zoom,
        mic_order=mic_order,
    )


async def load_location_people(db: AsyncSession, location_id: uuid.UUID) -> list[DisplayPerson]:
    """People linked to the location with their lowest non-separator slot.

    ``mic_order`` is None for people without a microphone at this location.
    """
    min_order = (
        select(
            PersonMicrophone.person_id.label("person_id"),
            func.min(Microphone.display_order).label("min_order"),
        )
        .join(Microphone, Microphone.id == PersonMicrophone.microphone_id)
        .where(Microphone.location_id == location_id, Microphone.is_separator.is_(False))
        .group_by(PersonMicrophone.person_id)
        .subquery()
    )
    stmt = (
        select(Person, min_order.c.min_order)
        .join(PersonLocation, PersonLocation.person_id == Person.id)
        .outerjoin(min_order, min_order.c.person_id == Person.id)
        .where(PersonLocation.location_id == location_id)
        .options(selectinload(Person.position))
    )
    rows = (await db.execute(stmt)).all()
    return [_to_display_person(person, order) for person, order in rows]


def compose_display_items(
    microphones: Iterable[Microphone], people: Iterable[DisplayPerson]
) -> list[DisplayItem]:
    """Interleave separators and people in microphone order.

    Each person appears once, at the first microphone whose order equals their
    ``mic_order``; several microphones sharing an order open it only once.
    """
    by_order: dict[int, list[DisplayPerson]] = {}
    for person in people:
        if person.mic_order is not None:
            by_order.setdefault(person.mic_order, []).append(person)

    items: list[DisplayItem] = []
    opened: set[int] = set()
    for mic in microphones:
        if mic.is_separator:
            items.append(DisplaySeparator(name=mic.name, display_order=mic.display_order))
            continue
        if mic.display_order in opened:
            continue
        opened.add(mic.display_order)
        items.extend(sorted(by_order.get(mic.display_order, []), key=_person_sort_key))
    return items


def sort_people(people: Iterable[DisplayPerson], limit: int | None = None) -> list[DisplayPerson]:
    """Flat list by slot (unassigned last), then position, last and first name."""
    ordered = sorted(
        people,
        key=lambda p: (p.mic_order is None, p.mic_order or 0, *_person_sort_key(p)),
    )
    return ordered[:limit] if limit is not None else ordered


async def build_setlist(db: AsyncSession, location: Location, tz: ZoneInfo) -> Setlist | None:
    """Next plan's visible items, or None when there is none to show."""
    if not location.pc_service_type_id:
        return None
    service_type_id = location.pc_service_type_id
    slug = location.slug

    try:
        async with await pc_svc.get_pc_client(db) as pc:
            plan, items = await setlist_svc.fetch_next_plan_items(pc, service_type_id)
    except (PlanningCenterError, ConfigurationError) as e:
        logger.warning("Setlist unavailable for %s: %s", slug, e)
        return None
    if plan is None:
        return None

    hidden = await setlist_svc.get_hidden_items(db)
    return Setlist(
        title=(plan.get("attributes") or {}).get("title"),
        plan_id=str(plan.get("id")),
        plan_date=plan_date(plan, tz),
        items=setlist_svc.filter_setlist(setlist_svc.to_setlist_items(items), hidden),
    )


async def _resolve_location(
    db: AsyncSession, location_id: uuid.UUID | None, slug: str | None
) -> Location:
    if location_id is not None:
        return await location_svc.get_location(db, location_id)
    if slug:
        return await location_svc.get_location_by_slug(db, slug)
    return await location_svc.get_primary_location(db)


async def compose_display(
    db: AsyncSession,
    *,
    location_id: uuid.UUID | None = None,
    slug: str | None = None,
    today: date | None = None,
) -> DisplayFeed:
    """Display feed for a location by id, by slug, or the primary location."""
    location = await _resolve_location(db, location_id, slug)
    tz = location_zone(location)
    today = today or datetime.now(tz).date()
    board_date = next_sunday(today)

    stmt = (
        select(Microphone)
        .where(Microphone.location_id == location.id)
        .order_by(Microphone.display_order, Microphone.id)
    )
    microphones = list((await db.execute(stmt)).scalars().all())
    people = await load_location_people(db, location.id)
    display_items = compose_display_items(microphones, people)

    setlist = await build_setlist(db, location, tz)
    date_matches_plan = None
    if setlist is not None and setlist.plan_date is not None:
        date_matches_plan = setlist.plan_date == board_date
        if not date_matches_plan:
            logger.info(
                "Next plan for %s is on %s, board shows %s",
                location.slug, setlist.plan_date, board_date,
            )

    values = await setting_svc.get_settings(
        db,
        setting_svc.CHURCH_NAME,
        setting_svc.LOGO_PATH,
        setting_svc.LOGO_POSITION,
        setting_svc.LOGO_DISPLAY_MODE,
        setting_svc.DARK_MODE,
    )

    return DisplayFeed(
        church_name=values[setting_svc.CHURCH_NAME] or "Church",
        location_name=location.label,
        location_slug=location.slug,
        date=board_date,
        timezone=location.timezone or settings.default_timezone,
        people=sort_people(people, settings.display_people_limit),
        display_items=display_items,
        setlist=setlist,
        date_matches_plan=date_matches_plan,
        logo=Logo(
            path=values[setting_svc.LOGO_PATH] or "",
            position=values[setting_svc.LOGO_POSITION] or "left",
            display_mode=values[setting_svc.LOGO_DISPLAY_MODE] or "both",
        ),
        dark_mode=setting_svc.as_bool(values[setting_svc.DARK_MODE]),
    )
