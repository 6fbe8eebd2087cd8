"""Person model - a global identity shared across locations."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UUIDMixin, TimestampMixin, PCSyncMixin


class PersonLocation(Base):
    """M2M join table for people <-> locations."""

    __tablename__ = "person_location"

    person_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("person.id", ondelete="CASCADE"), primary_key=True
    )
    location_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("location.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class Person(UUIDMixin, TimestampMixin, PCSyncMixin, Base):
    __tablename__ = "person"
    __table_args__ = (
        Index("uq_person_pc_person_id", "pc_person_id", unique=True),
    )

    pc_person_id: Mapped[str | None] = mapped_column(String(100), default=None)
    first_name: Mapped[str | None] = mapped_column(String(100), default=None)
    last_name: Mapped[str | None] = mapped_column(String(100), default=None)
    position_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("position.id", ondelete="SET NULL"), default=None
    )
    photo_path: Mapped[str | None] = mapped_column(String(500), default=None)
    photo_position_x: Mapped[float] = mapped_column(Float, default=50.0)
    photo_position_y: Mapped[float] = mapped_column(Float, default=50.0)
    photo_zoom: Mapped[float] = mapped_column(Float, default=1.0)

    # Relationships
    position: Mapped["Position | None"] = relationship(back_populates="people")  # noqa: F821
    locations: Mapped[list["Location"]] = relationship(  # noqa: F821
        secondary="person_location", back_populates="people"
    )
    microphones: Mapped[list["Microphone"]] = relationship(  # noqa: F821
        secondary="person_microphone", back_populates="people"
    )

    @property
    def full_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or "Unnamed"

    def __repr__(self) -> str:
        return f"<Person {self.full_name!r}>"
