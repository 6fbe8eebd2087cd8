"""Share people across locations.

Moves person -> location ownership into the person_location join table,
merges rows that share a Planning Center id onto the oldest one, then makes
pc_person_id unique.

Revision ID: 002_global_person_identity
Revises: 001_initial
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.orm import Session

from rosterboard.sync.merge import merge_duplicates

revision = "002_global_person_identity"
down_revision = "001_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "person_location",
        sa.Column("person_id", sa.Uuid, sa.ForeignKey("person.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("location_id", sa.Uuid, sa.ForeignKey("location.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.execute(
        "INSERT INTO person_location (person_id, location_id) "
        "SELECT id, location_id FROM person WHERE location_id IS NOT NULL"
    )

    # Runs inside the migration transaction; a failure leaves nothing relinked.
    session = Session(bind=op.get_bind())
    merge_duplicates(session)
    session.flush()

    with op.batch_alter_table("person") as batch:
        batch.drop_index("ix_person_location_id")
        batch.drop_index("ix_person_pc_person_id")
        batch.drop_column("location_id")
        batch.create_index("uq_person_pc_person_id", ["pc_person_id"], unique=True)


def downgrade() -> None:
    # Merged duplicates are not restored; each person returns to one location.
    with op.batch_alter_table("person") as batch:
        batch.drop_index("uq_person_pc_person_id")
        batch.add_column(sa.Column("location_id", sa.Uuid, sa.ForeignKey("location.id", ondelete="CASCADE")))
        batch.create_index("ix_person_pc_person_id", ["pc_person_id"])
        batch.create_index("ix_person_location_id", ["location_id"])
    op.execute(
        "UPDATE person SET location_id = ("
        "SELECT pl.location_id FROM person_location pl WHERE pl.person_id = person.id "
        "ORDER BY pl.created_at LIMIT 1)"
    )
    op.drop_table("person_location")
