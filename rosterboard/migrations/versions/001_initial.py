"""Initial roster board schema (people scoped per location).

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Location (tenant root)
    op.create_table(
        "location",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("display_name", sa.String(200)),
        sa.Column("is_primary", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("timezone", sa.String(50), nullable=False, server_default="America/New_York"),
        sa.Column("pc_service_type_id", sa.String(100)),
        sa.Column("service_type_name", sa.String(200)),
        sa.Column("pc_folder_id", sa.String(100)),
        sa.Column("folder_name", sa.String(200)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_location_slug", "location", ["slug"], unique=True)
    op.create_index(
        "uq_location_primary",
        "location",
        ["is_primary"],
        unique=True,
        sqlite_where=sa.text("is_primary = 1"),
        postgresql_where=sa.text("is_primary = true"),
    )

    # Position
    op.create_table(
        "position",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("location_id", sa.Uuid, sa.ForeignKey("location.id", ondelete="CASCADE"), nullable=False),
        sa.Column("pc_position_id", sa.String(100), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("sync_enabled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("last_synced_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("location_id", "pc_position_id", name="uq_position_location_pc_id"),
    )
    op.create_index("ix_position_location_id", "position", ["location_id"])
    op.create_index("ix_position_pc_position_id", "position", ["pc_position_id"])

    # Person - one row per (location, Planning Center person)
    op.create_table(
        "person",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("location_id", sa.Uuid, sa.ForeignKey("location.id", ondelete="CASCADE")),
        sa.Column("pc_person_id", sa.String(100)),
        sa.Column("first_name", sa.String(100)),
        sa.Column("last_name", sa.String(100)),
        sa.Column("position_id", sa.Uuid, sa.ForeignKey("position.id", ondelete="SET NULL")),
        sa.Column("photo_path", sa.String(500)),
        sa.Column("photo_position_x", sa.Float, nullable=False, server_default="50"),
        sa.Column("photo_position_y", sa.Float, nullable=False, server_default="50"),
        sa.Column("photo_zoom", sa.Float, nullable=False, server_default="1"),
        sa.Column("last_synced_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_person_location_id", "person", ["location_id"])
    op.create_index("ix_person_pc_person_id", "person", ["pc_person_id"])

    # Microphone (separators share the ordering)
    op.create_table(
        "microphone",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("location_id", sa.Uuid, sa.ForeignKey("location.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("display_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_separator", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_microphone_location_id", "microphone", ["location_id"])
    op.create_index("ix_microphone_display_order", "microphone", ["display_order"])

    op.create_table(
        "person_microphone",
        sa.Column("person_id", sa.Uuid, sa.ForeignKey("person.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("microphone_id", sa.Uuid, sa.ForeignKey("microphone.id", ondelete="CASCADE"), primary_key=True),
    )

    # Settings and stored OAuth tokens
    op.create_table(
        "setting",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("key", sa.String(100), nullable=False),
        sa.Column("value", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_setting_key", "setting", ["key"], unique=True)

    op.create_table(
        "oauth_token",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("provider", sa.String(50), nullable=False),
        sa.Column("access_token", sa.Text, nullable=False),
        sa.Column("refresh_token", sa.Text),
        sa.Column("token_type", sa.String(20), nullable=False, server_default="bearer"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("scope", sa.String(200)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_oauth_token_provider", "oauth_token", ["provider"])


def downgrade() -> None:
    op.drop_table("oauth_token")
    op.drop_table("setting")
    op.drop_table("person_microphone")
    op.drop_table("microphone")
    op.drop_table("person")
    op.drop_table("position")
    op.drop_table("location")
