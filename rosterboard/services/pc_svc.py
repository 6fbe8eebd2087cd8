"""Planning Center service - credential selection and stored OAuth tokens."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..errors import ConfigurationError
from ..models.setting import OAuthToken
from ..planning_center import OAuthClient, OAuthError, OAuthTokens, PlanningCenterClient
from . import setting_svc

logger = logging.getLogger(__name__)

PROVIDER = "planning_center"


async def get_oauth_client(db: AsyncSession) -> OAuthClient:
    """OAuth client built from the app credentials stored in settings.

    Raises:
        ConfigurationError: If no OAuth client id / secret is stored.
    """
    values = await setting_svc.get_settings(
        db, setting_svc.PC_OAUTH_CLIENT_ID, setting_svc.PC_OAUTH_CLIENT_SECRET
    )
    client_id = values[setting_svc.PC_OAUTH_CLIENT_ID]
    client_secret = values[setting_svc.PC_OAUTH_CLIENT_SECRET]
    if not client_id or not client_secret:
        raise ConfigurationError(
            "Planning Center OAuth is not configured. Save the OAuth client id and secret first."
        )
    return OAuthClient(client_id=client_id, client_secret=client_secret)


async def get_current_token(db: AsyncSession) -> OAuthToken | None:
    """Newest stored Planning Center token."""
    stmt = (
        select(OAuthToken)
        .where(OAuthToken.provider == PROVIDER)
        .order_by(OAuthToken.created_at.desc())
        .limit(1)
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def store_tokens(db: AsyncSession, tokens: OAuthTokens) -> OAuthToken:
    """Replace any stored tokens with ``tokens``."""
    await db.execute(delete(OAuthToken).where(OAuthToken.provider == PROVIDER))
    row = OAuthToken(
        provider=PROVIDER,
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
        expires_at=tokens.expires_at,
        scope=tokens.scope,
    )
    db.add(row)
    await db.commit()
    await db.refresh(row)
    return row


async def exchange_code(db: AsyncSession, code: str) -> OAuthToken:
    """Complete the OAuth callback and store the resulting tokens."""
    oauth = await get_oauth_client(db)
    tokens = await oauth.exchange_code(code)
    logger.info("Connected to Planning Center via OAuth")
    return await store_tokens(db, tokens)


async def refresh_token(db: AsyncSession, token: OAuthToken | None = None) -> OAuthToken:
    """Refresh the stored token and persist the new pair.

    Raises:
        ConfigurationError: If there is nothing to refresh.
        OAuthError: If Planning Center rejects the refresh.
    """
    token = token or await get_current_token(db)
    if token is None or not token.refresh_token:
        raise ConfigurationError("No Planning Center refresh token stored. Reconnect via OAuth.")
    oauth = await get_oauth_client(db)
    tokens = await oauth.refresh_tokens(token.refresh_token)
    logger.info("Refreshed Planning Center access token")
    return await store_tokens(db, tokens)


async def disconnect(db: AsyncSession) -> int:
    """Forget every stored Planning Center token. Returns rows removed."""
    result = await db.execute(delete(OAuthToken).where(OAuthToken.provider == PROVIDER))
    await db.commit()
    return result.rowcount or 0


async def oauth_status(db: AsyncSession) -> dict[str, Any]:
    token = await get_current_token(db)
    values = await setting_svc.get_settings(
        db, setting_svc.PC_OAUTH_CLIENT_ID, setting_svc.PC_OAUTH_CLIENT_SECRET
    )
    return {
        "oauth_configured": bool(
            values[setting_svc.PC_OAUTH_CLIENT_ID] and values[setting_svc.PC_OAUTH_CLIENT_SECRET]
        ),
        "connected": token is not None,
        "expired": token.is_expired if token else None,
        "expires_at": token.expires_at.isoformat() if token else None,
        "scope": token.scope if token else None,
        "basic_auth_configured": settings.pc_basic_auth_configured,
    }


async def _basic_credentials(db: AsyncSession) -> tuple[str, str] | None:
    values = await setting_svc.get_settings(
        db, setting_svc.PC_OAUTH_CLIENT_ID, setting_svc.PC_OAUTH_CLIENT_SECRET
    )
    app_id = values[setting_svc.PC_OAUTH_CLIENT_ID] or settings.pc_app_id
    secret = values[setting_svc.PC_OAUTH_CLIENT_SECRET] or settings.pc_secret
    if app_id and secret:
        return app_id, secret
    return None


async def get_pc_client(db: AsyncSession) -> PlanningCenterClient:
    """Authenticated Planning Center client, for use as an async context manager.

    Prefers a stored OAuth token (refreshed inline when expired) and falls
    back to basic auth with the stored or configured app id / secret.

    Usage:
        async with await get_pc_client(db) as pc:
            plan = await pc.get_next_plan(service_type_id)

    Raises:
        ConfigurationError: If no credentials are available.
    """
    token = await get_current_token(db)
    if token is not None:
        if token.is_expired:
            try:
                token = await refresh_token(db, token)
            except (OAuthError, ConfigurationError) as e:
                logger.warning("Planning Center token refresh failed: %s", e)
                token = None
        if token is not None:
            return PlanningCenterClient(access_token=token.access_token)

    credentials = await _basic_credentials(db)
    if credentials is None:
        raise ConfigurationError(
            "Planning Center is not connected. Connect via OAuth or configure an App ID and Secret."
        )
    logger.info("Using Planning Center basic auth credentials")
    app_id, secret = credentials
    return PlanningCenterClient(app_id=app_id, secret=secret)
