"""People routes."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.admin import PhotoCrop, PhotoPath
from ..schemas.sync import MergeResult, PeopleSyncResult, PersonOut
from ..services import person_svc
from ..sync import sync_engine
from ..sync.merge import merge_duplicate_persons
from ..tenant.deps import get_location_id

router = APIRouter(prefix="/api", tags=["people"])


@router.get("/locations/{location_id}/people", response_model=list[PersonOut])
async def people_list(
    location_id: uuid.UUID = Depends(get_location_id),
    db: AsyncSession = Depends(get_db),
):
    return await person_svc.list_people_out(db, location_id)


@router.post("/locations/{location_id}/people/sync", response_model=PeopleSyncResult)
async def people_sync(
    location_id: uuid.UUID = Depends(get_location_id),
    db: AsyncSession = Depends(get_db),
):
    return await sync_engine.sync_people(db, location_id)


@router.post("/people/merge", response_model=MergeResult)
async def people_merge(db: AsyncSession = Depends(get_db)):
    return await merge_duplicate_persons(db)


@router.put("/people/{person_id}/photo-position", response_model=PersonOut)
async def person_photo_position(
    person_id: uuid.UUID,
    data: PhotoCrop,
    db: AsyncSession = Depends(get_db),
):
    person = await person_svc.update_photo_crop(
        db,
        person_id,
        position_x=data.photo_position_x,
        position_y=data.photo_position_y,
        zoom=data.photo_zoom,
    )
    return person_svc.to_out(person)


@router.put("/people/{person_id}/photo", response_model=PersonOut)
async def person_photo(
    person_id: uuid.UUID,
    data: PhotoPath,
    db: AsyncSession = Depends(get_db),
):
    person = await person_svc.set_photo_path(db, person_id, data.photo_path)
    return person_svc.to_out(person)


@router.delete("/people/{person_id}")
async def person_delete(person_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    await person_svc.delete_person(db, person_id)
    return {"message": "Person deleted"}
