"""One-time consolidation of per-location person rows into global identities.

Before people were shared across locations, each location held its own copy
of a Planning Center person. Merging keeps the oldest row for every
``pc_person_id``, moves the location and microphone links of the others onto
it, and deletes the rest. The sync ``Session`` variant is what the Alembic
revision runs; the async wrapper serves the CLI and tests.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from ..models.microphone import PersonMicrophone
from ..models.person import Person, PersonLocation
from ..schemas.sync import MergeResult

logger = logging.getLogger(__name__)

_LINK_TABLES = (
    (PersonLocation.__table__, "location_id"),
    (PersonMicrophone.__table__, "microphone_id"),
)


def _relink(
    session: Session,
    canonical_id: uuid.UUID,
    duplicate_ids: list[uuid.UUID],
) -> int:
    moved = 0
    for table, target_col in _LINK_TABLES:
        person_col = table.c.person_id
        target = table.c[target_col]
        already = set(session.execute(select(target).where(person_col == canonical_id)).scalars())
        incoming = set(session.execute(select(target).where(person_col.in_(duplicate_ids))).scalars())
        for target_id in sorted(incoming - already, key=str):
            session.execute(insert(table).values({"person_id": canonical_id, target_col: target_id}))
            moved += 1
        session.execute(delete(table).where(person_col.in_(duplicate_ids)))
    return moved


def merge_duplicates(session: Session) -> MergeResult:
    """Collapse every ``pc_person_id`` onto its earliest-created row.

    Does not commit; the caller owns the transaction so a failure rolls back
    every relink.
    """
    result = MergeResult()
    person = Person.__table__
    groups = (
        select(person.c.pc_person_id)
        .where(person.c.pc_person_id.is_not(None))
        .group_by(person.c.pc_person_id)
        .having(func.count() > 1)
    )

    for pc_person_id in session.execute(groups).scalars().all():
        ids = (
            session.execute(
                select(person.c.id)
                .where(person.c.pc_person_id == pc_person_id)
                .order_by(person.c.created_at, person.c.id)
            )
            .scalars()
            .all()
        )
        canonical_id, duplicate_ids = ids[0], list(ids[1:])

        result.links_moved += _relink(session, canonical_id, duplicate_ids)
        session.execute(delete(person).where(person.c.id.in_(duplicate_ids)))
        result.groups_merged += 1
        result.rows_removed += len(duplicate_ids)
        logger.info(
            "Merged %d duplicate(s) of Planning Center person %s into %s",
            len(duplicate_ids), pc_person_id, canonical_id,
        )

    return result


async def merge_duplicate_persons(db: AsyncSession) -> MergeResult:
    """Run :func:`merge_duplicates` atomically."""
    try:
        result = await db.run_sync(merge_duplicates)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    db.expire_all()
    return result
