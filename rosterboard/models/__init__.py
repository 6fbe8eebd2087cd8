"""Roster board models - re-exports all models and Base.metadata."""

from .base import Base, UUIDMixin, TimestampMixin, TenantMixin, PCSyncMixin
from .location import Location
from .position import Position
from .person import Person, PersonLocation
from .microphone import Microphone, PersonMicrophone
from .setting import Setting, OAuthToken

__all__ = [
    "Base",
    "UUIDMixin",
    "TimestampMixin",
    "TenantMixin",
    "PCSyncMixin",
    "Location",
    "Position",
    "Person",
    "PersonLocation",
    "Microphone",
    "PersonMicrophone",
    "Setting",
    "OAuthToken",
]
