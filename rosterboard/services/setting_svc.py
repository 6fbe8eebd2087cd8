"""Global key/value settings."""

from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import InvalidInputError
from ..models.setting import Setting

logger = logging.getLogger(__name__)

CHURCH_NAME = "church_name"
SETLIST_HIDDEN_ITEMS = "setlist_hidden_items"
PC_OAUTH_CLIENT_ID = "pc_oauth_client_id"
PC_OAUTH_CLIENT_SECRET = "pc_oauth_client_secret"
LOGO_PATH = "logo_path"
LOGO_POSITION = "logo_position"
LOGO_DISPLAY_MODE = "logo_display_mode"
DARK_MODE = "dark_mode"

_TRUTHY = {"true", "1", "yes", "on"}


async def get_setting(db: AsyncSession, key: str) -> str | None:
    stmt = select(Setting.value).where(Setting.key == key)
    return (await db.execute(stmt)).scalar_one_or_none()


async def get_settings(db: AsyncSession, *keys: str) -> dict[str, str | None]:
    """Values for ``keys`` (all settings when none are given)."""
    stmt = select(Setting.key, Setting.value)
    if keys:
        stmt = stmt.where(Setting.key.in_(keys))
    rows = (await db.execute(stmt)).all()
    values: dict[str, str | None] = {key: None for key in keys}
    values.update({row.key: row.value for row in rows})
    return values


async def set_setting(db: AsyncSession, key: str, value: str | None) -> Setting:
    stmt = select(Setting).where(Setting.key == key)
    setting = (await db.execute(stmt)).scalar_one_or_none()
    if setting is None:
        setting = Setting(key=key, value=value)
        db.add(setting)
    else:
        setting.value = value
    await db.commit()
    await db.refresh(setting)
    return setting


async def get_json_setting(db: AsyncSession, key: str, default: Any = None) -> Any:
    raw = await get_setting(db, key)
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Setting %s does not hold valid JSON; using default", key)
        return default


async def set_json_setting(db: AsyncSession, key: str, value: Any) -> Setting:
    return await set_setting(db, key, json.dumps(value))


def as_bool(value: str | None) -> bool:
    return bool(value) and value.strip().lower() in _TRUTHY


LOGO_POSITIONS = ("left", "center")
LOGO_DISPLAY_MODES = ("church_only", "logo_only", "both")

_BOARD_KEYS = (
    CHURCH_NAME,
    LOGO_PATH,
    LOGO_POSITION,
    LOGO_DISPLAY_MODE,
    DARK_MODE,
    PC_OAUTH_CLIENT_ID,
    PC_OAUTH_CLIENT_SECRET,
)


async def board_settings(db: AsyncSession) -> dict[str, Any]:
    """Admin view of the global settings; the OAuth secret is never echoed."""
    values = await get_settings(db, *_BOARD_KEYS)
    return {
        CHURCH_NAME: values[CHURCH_NAME] or "Church",
        LOGO_PATH: values[LOGO_PATH] or "",
        LOGO_POSITION: values[LOGO_POSITION] or "left",
        LOGO_DISPLAY_MODE: values[LOGO_DISPLAY_MODE] or "both",
        DARK_MODE: as_bool(values[DARK_MODE]),
        PC_OAUTH_CLIENT_ID: values[PC_OAUTH_CLIENT_ID] or "",
        "pc_oauth_client_secret_set": bool(values[PC_OAUTH_CLIENT_SECRET]),
    }


async def update_board_settings(db: AsyncSession, changes: dict[str, Any]) -> dict[str, Any]:
    """Store the given settings; unknown keys and None values are ignored."""
    position = changes.get(LOGO_POSITION)
    if position is not None and position not in LOGO_POSITIONS:
        raise InvalidInputError(f"Invalid logo position. Must be one of: {', '.join(LOGO_POSITIONS)}")
    mode = changes.get(LOGO_DISPLAY_MODE)
    if mode is not None and mode not in LOGO_DISPLAY_MODES:
        raise InvalidInputError(f"Invalid display mode. Must be one of: {', '.join(LOGO_DISPLAY_MODES)}")

    for key in _BOARD_KEYS:
        value = changes.get(key)
        if value is None:
            continue
        if key == DARK_MODE:
            value = "true" if value else "false"
        await set_setting(db, key, str(value))
    return await board_settings(db)
