"""Planning Center sync schemas."""

from __future__ import annotations

import uuid

from pydantic import BaseModel


class SyncResult(BaseModel):
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: list[str] = []


class PositionOut(BaseModel):
    id: uuid.UUID
    pc_position_id: str
    name: str
    sync_enabled: bool

    model_config = {"from_attributes": True}


class PersonOut(BaseModel):
    id: uuid.UUID
    pc_person_id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    position_id: uuid.UUID | None = None
    position_name: str | None = None
    photo_path: str | None = None
    photo_position_x: float = 50.0
    photo_position_y: float = 50.0
    photo_zoom: float = 1.0


class PositionSyncResult(SyncResult):
    positions: list[PositionOut] = []


class PeopleSyncResult(SyncResult):
    processed: int = 0
    plan_id: str | None = None
    plan_title: str | None = None
    people: list[PersonOut] = []


class MergeResult(BaseModel):
    groups_merged: int = 0
    rows_removed: int = 0
    links_moved: int = 0


class SyncReadiness(BaseModel):
    state: str
    ready: bool
    reason: str | None = None
    enabled_positions: int = 0
