"""Planning Center OAuth connection routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..services import pc_svc

router = APIRouter(prefix="/api/oauth/planning-center", tags=["oauth"])


@router.get("/authorize-url")
async def authorize_url(db: AsyncSession = Depends(get_db)):
    oauth = await pc_svc.get_oauth_client(db)
    return {"url": oauth.get_authorization_url()}


@router.get("/callback")
async def callback(code: str, db: AsyncSession = Depends(get_db)):
    token = await pc_svc.exchange_code(db, code)
    return {"connected": True, "expires_at": token.expires_at.isoformat()}


@router.get("/status")
async def status(db: AsyncSession = Depends(get_db)):
    return await pc_svc.oauth_status(db)


@router.post("/refresh")
async def refresh(db: AsyncSession = Depends(get_db)):
    token = await pc_svc.refresh_token(db)
    return {"refreshed": True, "expires_at": token.expires_at.isoformat()}


@router.delete("/disconnect")
async def disconnect(db: AsyncSession = Depends(get_db)):
    removed = await pc_svc.disconnect(db)
    return {"disconnected": True, "tokens_removed": removed}
