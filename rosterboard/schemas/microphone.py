"""Microphone schemas."""

from __future__ import annotations

import uuid

from pydantic import BaseModel


class MicrophoneCreate(BaseModel):
    name: str
    description: str | None = None
    is_separator: bool = False


class MicrophoneUpdate(BaseModel):
    name: str | None = None
    description: str | None = None


class MicrophoneReorder(BaseModel):
    microphone_ids: list[uuid.UUID]


class AssignedPerson(BaseModel):
    id: uuid.UUID
    first_name: str | None = None
    last_name: str | None = None

    model_config = {"from_attributes": True}


class MicrophoneResponse(BaseModel):
    id: uuid.UUID
    location_id: uuid.UUID
    name: str
    description: str | None = None
    display_order: int
    is_separator: bool
    assigned_people: list[AssignedPerson] = []
