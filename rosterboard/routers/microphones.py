"""Microphone routes."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.microphone import (
    MicrophoneCreate,
    MicrophoneReorder,
    MicrophoneResponse,
    MicrophoneUpdate,
)
from ..services import microphone_svc
from ..tenant.deps import get_location_id

router = APIRouter(prefix="/api", tags=["microphones"])


@router.get("/locations/{location_id}/microphones", response_model=list[MicrophoneResponse])
async def microphone_list(
    location_id: uuid.UUID = Depends(get_location_id),
    db: AsyncSession = Depends(get_db),
):
    mics = await microphone_svc.list_microphones(db, location_id)
    return [microphone_svc.to_response(m) for m in mics]


@router.post(
    "/locations/{location_id}/microphones",
    response_model=MicrophoneResponse,
    status_code=201,
)
async def microphone_create(
    data: MicrophoneCreate,
    location_id: uuid.UUID = Depends(get_location_id),
    db: AsyncSession = Depends(get_db),
):
    mic = await microphone_svc.create_microphone(db, location_id, data)
    return microphone_svc.to_response(mic)


@router.put("/locations/{location_id}/microphones/reorder", response_model=list[MicrophoneResponse])
async def microphone_reorder(
    data: MicrophoneReorder,
    location_id: uuid.UUID = Depends(get_location_id),
    db: AsyncSession = Depends(get_db),
):
    mics = await microphone_svc.reorder_microphones(db, location_id, data.microphone_ids)
    return [microphone_svc.to_response(m) for m in mics]


@router.put("/microphones/{microphone_id}", response_model=MicrophoneResponse)
async def microphone_update(
    microphone_id: uuid.UUID,
    data: MicrophoneUpdate,
    db: AsyncSession = Depends(get_db),
):
    mic = await microphone_svc.update_microphone(db, microphone_id, data)
    return microphone_svc.to_response(mic)


@router.delete("/microphones/{microphone_id}")
async def microphone_delete(microphone_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    await microphone_svc.delete_microphone(db, microphone_id)
    return {"message": "Microphone deleted"}


@router.post("/microphones/{microphone_id}/assign/{person_id}", response_model=MicrophoneResponse)
async def microphone_assign(
    microphone_id: uuid.UUID,
    person_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    mic = await microphone_svc.assign_person(db, microphone_id, person_id)
    return microphone_svc.to_response(mic)


@router.delete("/microphones/{microphone_id}/assign/{person_id}", response_model=MicrophoneResponse)
async def microphone_unassign(
    microphone_id: uuid.UUID,
    person_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    mic = await microphone_svc.unassign_person(db, microphone_id, person_id)
    return microphone_svc.to_response(mic)
