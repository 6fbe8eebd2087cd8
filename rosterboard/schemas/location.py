"""Location schemas."""

from __future__ import annotations

import uuid

from pydantic import BaseModel


class LocationCreate(BaseModel):
    name: str
    slug: str
    display_name: str | None = None
    is_primary: bool = False
    timezone: str | None = None


class LocationUpdate(BaseModel):
    name: str | None = None
    slug: str | None = None
    display_name: str | None = None
    is_primary: bool | None = None
    timezone: str | None = None
    pc_service_type_id: str | None = None
    pc_folder_id: str | None = None
    folder_name: str | None = None


class LocationResponse(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    display_name: str | None = None
    is_primary: bool
    timezone: str
    pc_service_type_id: str | None = None
    service_type_name: str | None = None
    pc_folder_id: str | None = None
    folder_name: str | None = None

    model_config = {"from_attributes": True}
