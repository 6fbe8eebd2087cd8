"""Setlist service - plan items from Planning Center minus the hidden titles."""

from __future__ import annotations

import uuid
from typing import Any, Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import ConfigurationError
from ..planning_center import PlanningCenterClient
from ..schemas.display import SetlistItem, SetlistOverview
from . import location_svc, pc_svc, setting_svc

# Pre-service and setup items nobody needs on the board.
DEFAULT_HIDDEN_ITEMS = ["Worship Team - Dress-code", "Vocal Warm-ups"]


async def get_hidden_items(db: AsyncSession) -> list[str]:
    hidden = await setting_svc.get_json_setting(db, setting_svc.SETLIST_HIDDEN_ITEMS)
    if hidden is None:
        return list(DEFAULT_HIDDEN_ITEMS)
    return [str(title) for title in hidden]


async def set_hidden_items(db: AsyncSession, titles: list[str]) -> list[str]:
    titles = [t for t in dict.fromkeys(titles) if t]
    await setting_svc.set_json_setting(db, setting_svc.SETLIST_HIDDEN_ITEMS, titles)
    return titles


def to_setlist_items(items: Iterable[dict[str, Any]]) -> list[SetlistItem]:
    """Plan items as title / item type / key name, in plan order."""
    result = []
    for item in items:
        attrs = item.get("attributes") or {}
        result.append(
            SetlistItem(
                title=attrs.get("title"),
                type=attrs.get("item_type"),
                key_name=attrs.get("key_name"),
            )
        )
    return result


def filter_setlist(items: Iterable[SetlistItem], hidden: Iterable[str]) -> list[SetlistItem]:
    """Drop items whose title exactly matches a hidden title; order is kept."""
    hidden_titles = set(hidden)
    return [item for item in items if item.title not in hidden_titles]


async def fetch_next_plan_items(
    pc: PlanningCenterClient, service_type_id: str
) -> tuple[dict[str, Any] | None, list[dict[str, Any]]]:
    plan = await pc.get_next_plan(service_type_id)
    if not plan:
        return None, []
    items = await pc.get_plan_items(plan["id"], plan.get("service_type_id"))
    return plan, items


async def setlist_overview(db: AsyncSession, location_id: uuid.UUID) -> SetlistOverview:
    """Every item of the next plan plus the hidden list, for the admin screen."""
    location = await location_svc.get_location(db, location_id)
    if not location.pc_service_type_id:
        raise ConfigurationError(
            f"Location '{location.name}' has no Planning Center service type. Link one first."
        )
    service_type_id = location.pc_service_type_id

    hidden = await get_hidden_items(db)
    async with await pc_svc.get_pc_client(db) as pc:
        plan, items = await fetch_next_plan_items(pc, service_type_id)
    if plan is None:
        return SetlistOverview(hidden_items=hidden)

    return SetlistOverview(
        plan_id=str(plan.get("id")),
        plan_title=(plan.get("attributes") or {}).get("title"),
        items=to_setlist_items(items),
        hidden_items=hidden,
    )
