"""Public display feed schemas."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Literal, Union

from pydantic import BaseModel


class DisplayPerson(BaseModel):
    type: Literal["person"] = "person"
    id: uuid.UUID
    first_name: str | None = None
    last_name: str | None = None
    position_name: str | None = None
    photo_path: str | None = None
    photo_position_x: float = 50.0
    photo_position_y: float = 50.0
    photo_zoom: float = 1.0
    mic_order: int | None = None


class DisplaySeparator(BaseModel):
    type: Literal["separator"] = "separator"
    name: str
    display_order: int


DisplayItem = Union[DisplayPerson, DisplaySeparator]


class SetlistItem(BaseModel):
    title: str | None = None
    type: str | None = None
    key_name: str | None = None


class Setlist(BaseModel):
    title: str | None = None
    plan_id: str | None = None
    plan_date: date | None = None
    items: list[SetlistItem] = []


class SetlistOverview(BaseModel):
    plan_id: str | None = None
    plan_title: str | None = None
    items: list[SetlistItem] = []
    hidden_items: list[str] = []


class Logo(BaseModel):
    path: str = ""
    position: str = "left"
    display_mode: str = "both"


class DisplayFeed(BaseModel):
    church_name: str
    location_name: str
    location_slug: str
    date: date
    timezone: str
    people: list[DisplayPerson] = []
    display_items: list[DisplayItem] = []
    setlist: Setlist | None = None
    date_matches_plan: bool | None = None
    logo: Logo = Logo()
    dark_mode: bool = False
