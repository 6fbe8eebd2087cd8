"""Tests for global settings and the admin setlist overview."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from rosterboard.errors import ConfigurationError, InvalidInputError
from rosterboard.models.location import Location
from rosterboard.models.setting import Setting
from rosterboard.services import setlist_svc, setting_svc


@pytest.mark.asyncio
async def test_get_settings_fills_missing_keys(db: AsyncSession):
    await setting_svc.set_setting(db, setting_svc.CHURCH_NAME, "Grace")
    values = await setting_svc.get_settings(db, setting_svc.CHURCH_NAME, setting_svc.LOGO_PATH)
    assert values == {setting_svc.CHURCH_NAME: "Grace", setting_svc.LOGO_PATH: None}


@pytest.mark.asyncio
async def test_set_setting_overwrites(db: AsyncSession):
    await setting_svc.set_setting(db, "k", "one")
    await setting_svc.set_setting(db, "k", "two")
    assert await setting_svc.get_setting(db, "k") == "two"


@pytest.mark.asyncio
async def test_invalid_json_setting_falls_back(db: AsyncSession):
    db.add(Setting(key=setting_svc.SETLIST_HIDDEN_ITEMS, value="not json"))
    await db.commit()
    assert await setlist_svc.get_hidden_items(db) == setlist_svc.DEFAULT_HIDDEN_ITEMS


@pytest.mark.asyncio
async def test_hidden_items_default_and_update(db: AsyncSession):
    assert await setlist_svc.get_hidden_items(db) == ["Worship Team - Dress-code", "Vocal Warm-ups"]
    await setlist_svc.set_hidden_items(db, [])
    assert await setlist_svc.get_hidden_items(db) == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "changes",
    [{setting_svc.LOGO_POSITION: "right"}, {setting_svc.LOGO_DISPLAY_MODE: "banner"}],
)
async def test_update_board_settings_validates(db: AsyncSession, changes):
    with pytest.raises(InvalidInputError):
        await setting_svc.update_board_settings(db, changes)


@pytest.mark.parametrize("raw,expected", [("true", True), ("On", True), ("0", False), (None, False), ("", False)])
def test_as_bool(raw, expected):
    assert setting_svc.as_bool(raw) is expected


@pytest.mark.asyncio
async def test_setlist_overview_lists_everything(db: AsyncSession, linked_location: Location, pc, patched_pc, payloads):
    pc.get_next_plan.return_value = payloads.plan()
    pc.get_plan_items.return_value = [
        payloads.plan_item("Vocal Warm-ups", "item"),
        payloads.plan_item("Song A", key_name="E"),
    ]

    overview = await setlist_svc.setlist_overview(db, linked_location.id)

    assert overview.plan_title == "Sunday Service"
    assert [i.title for i in overview.items] == ["Vocal Warm-ups", "Song A"]
    assert "Vocal Warm-ups" in overview.hidden_items


@pytest.mark.asyncio
async def test_setlist_overview_without_plan(db: AsyncSession, linked_location: Location, patched_pc):
    overview = await setlist_svc.setlist_overview(db, linked_location.id)
    assert overview.plan_id is None
    assert overview.items == []
    assert overview.hidden_items == setlist_svc.DEFAULT_HIDDEN_ITEMS


@pytest.mark.asyncio
async def test_setlist_overview_requires_service_type(db: AsyncSession, location: Location):
    with pytest.raises(ConfigurationError):
        await setlist_svc.setlist_overview(db, location.id)
