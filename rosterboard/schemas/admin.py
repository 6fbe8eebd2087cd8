"""Request bodies for the admin endpoints."""

from __future__ import annotations

from pydantic import BaseModel


class PositionToggle(BaseModel):
    sync_enabled: bool


class PhotoCrop(BaseModel):
    photo_position_x: float = 50.0
    photo_position_y: float = 50.0
    photo_zoom: float | None = None


class PhotoPath(BaseModel):
    photo_path: str | None = None


class HiddenItems(BaseModel):
    hidden_items: list[str] = []


class BoardSettingsUpdate(BaseModel):
    church_name: str | None = None
    logo_path: str | None = None
    logo_position: str | None = None
    logo_display_mode: str | None = None
    dark_mode: bool | None = None
    pc_oauth_client_id: str | None = None
    pc_oauth_client_secret: str | None = None
