"""Position model - per-location allow-list of Planning Center team positions."""

from __future__ import annotations

from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UUIDMixin, TimestampMixin, TenantMixin, PCSyncMixin


class Position(UUIDMixin, TimestampMixin, TenantMixin, PCSyncMixin, Base):
    __tablename__ = "position"
    __table_args__ = (
        UniqueConstraint("location_id", "pc_position_id", name="uq_position_location_pc_id"),
    )

    pc_position_id: Mapped[str] = mapped_column(String(100), index=True)
    name: Mapped[str] = mapped_column(String(200))
    # New positions are off until an admin opts in.
    sync_enabled: Mapped[bool] = mapped_column(Boolean, default=False)

    # Relationships
    location: Mapped["Location"] = relationship(back_populates="positions")  # noqa: F821
    people: Mapped[list["Person"]] = relationship(back_populates="position")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Position {self.name!r}>"
