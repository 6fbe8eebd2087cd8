"""Location model - the tenant root."""

from __future__ import annotations

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UUIDMixin, TimestampMixin


class Location(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "location"

    name: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    display_name: Mapped[str | None] = mapped_column(String(200), default=None)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False)
    timezone: Mapped[str] = mapped_column(String(50), default="America/New_York")
    pc_service_type_id: Mapped[str | None] = mapped_column(String(100), default=None)
    service_type_name: Mapped[str | None] = mapped_column(String(200), default=None)
    pc_folder_id: Mapped[str | None] = mapped_column(String(100), default=None)
    folder_name: Mapped[str | None] = mapped_column(String(200), default=None)

    # Relationships
    positions: Mapped[list["Position"]] = relationship(  # noqa: F821
        back_populates="location", cascade="all, delete-orphan"
    )
    microphones: Mapped[list["Microphone"]] = relationship(  # noqa: F821
        back_populates="location", cascade="all, delete-orphan"
    )
    people: Mapped[list["Person"]] = relationship(  # noqa: F821
        secondary="person_location", back_populates="locations"
    )

    @property
    def label(self) -> str:
        return self.display_name or self.name

    def __repr__(self) -> str:
        return f"<Location {self.slug!r}>"


# At most one row may carry is_primary = true.
Index(
    "uq_location_primary",
    Location.is_primary,
    unique=True,
    sqlite_where=Location.is_primary.is_(True),
    postgresql_where=Location.is_primary.is_(True),
)
