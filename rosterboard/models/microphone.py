"""Microphone model with M2M person assignments.

A row with ``is_separator`` set is a label-only divider sharing the same
``display_order`` sequence as the microphones around it.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UUIDMixin, TimestampMixin, TenantMixin


class PersonMicrophone(Base):
    """M2M join table for people <-> microphones."""

    __tablename__ = "person_microphone"

    person_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("person.id", ondelete="CASCADE"), primary_key=True
    )
    microphone_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("microphone.id", ondelete="CASCADE"), primary_key=True
    )


class Microphone(UUIDMixin, TimestampMixin, TenantMixin, Base):
    __tablename__ = "microphone"

    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text, default=None)
    display_order: Mapped[int] = mapped_column(Integer, default=0, index=True)
    is_separator: Mapped[bool] = mapped_column(Boolean, default=False)

    # Relationships
    location: Mapped["Location"] = relationship(back_populates="microphones")  # noqa: F821
    people: Mapped[list["Person"]] = relationship(  # noqa: F821
        secondary="person_microphone", back_populates="microphones"
    )

    def __repr__(self) -> str:
        kind = "Separator" if self.is_separator else "Microphone"
        return f"<{kind} {self.name!r} order={self.display_order}>"
