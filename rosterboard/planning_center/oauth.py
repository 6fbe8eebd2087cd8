"""OAuth 2.0 client for Planning Center.

Handles the Authorization Code flow:
1. Generate authorization URL
2. Exchange the callback code for access + refresh tokens
3. Refresh tokens when expired
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import urlencode

import httpx

from ..config import settings


@dataclass
class OAuthTokens:
    """OAuth tokens returned from Planning Center."""

    access_token: str
    refresh_token: str | None
    expires_in: int  # seconds
    token_type: str = "bearer"
    scope: str = ""
    _created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def expires_at(self) -> datetime:
        """When the access token expires (based on creation time)."""
        return self._created_at + timedelta(seconds=self.expires_in)


class OAuthError(Exception):
    """OAuth-related error."""

    def __init__(self, message: str, error_code: str | None = None, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class OAuthClient:
    """OAuth 2.0 client for a Planning Center developer application.

    Usage:
        client = OAuthClient(client_id="...", client_secret="...")
        auth_url = client.get_authorization_url()

        # Planning Center redirects back with ?code=xxx
        tokens = await client.exchange_code(code)

        # Later, refresh when expired
        tokens = await client.refresh_tokens(tokens.refresh_token)
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str | None = None,
        scopes: list[str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri or settings.pc_oauth_redirect_uri
        self.scopes = scopes if scopes is not None else settings.pc_oauth_scopes.split()
        self._transport = transport

    def get_authorization_url(self) -> str:
        """URL to redirect the admin to for consent."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.scopes),
        }
        return f"{settings.pc_oauth_authorize_url}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> OAuthTokens:
        """Exchange an authorization code for tokens.

        Raises:
            OAuthError: If the exchange fails
        """
        return await self._token_request(
            {
                "grant_type": "authorization_code",
                "code": code,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
            },
            failure="Token exchange failed",
        )

    async def refresh_tokens(self, refresh_token: str) -> OAuthTokens:
        """Refresh the access token; keeps the old refresh token if none is returned.

        Raises:
            OAuthError: If the refresh fails
        """
        tokens = await self._token_request(
            {
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            },
            failure="Token refresh failed",
        )
        if not tokens.refresh_token:
            tokens.refresh_token = refresh_token
        return tokens

    async def _token_request(self, payload: dict[str, Any], *, failure: str) -> OAuthTokens:
        try:
            async with httpx.AsyncClient(timeout=settings.pc_timeout_seconds, transport=self._transport) as client:
                response = await client.post(settings.pc_oauth_token_url, json=payload)
        except httpx.RequestError as e:
            raise OAuthError(f"{failure}: {e}", error_code="unreachable") from e

        if response.status_code != 200:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = None
            if not isinstance(error_data, dict):
                error_data = {"raw_response": response.text[:500]}
            message = error_data.get("error_description") or f"{failure}: {response.status_code}"
            raise OAuthError(
                message,
                error_code=error_data.get("error", "token_request_failed"),
                details=error_data,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise OAuthError(
                f"{failure}: token endpoint did not return JSON",
                error_code="invalid_response",
                details={"raw_response": response.text[:500]},
            ) from e
        if not isinstance(data, dict):
            raise OAuthError(f"{failure}: unexpected token response", error_code="invalid_response")
        return self._parse_token_response(data)

    def _parse_token_response(self, data: dict[str, Any]) -> OAuthTokens:
        try:
            return OAuthTokens(
                access_token=data["access_token"],
                refresh_token=data.get("refresh_token"),
                expires_in=int(data.get("expires_in", 7200)),
                token_type=data.get("token_type", "bearer"),
                scope=data.get("scope", ""),
            )
        except KeyError as e:
            raise OAuthError(
                f"Invalid token response: missing {e}",
                error_code="invalid_response",
                details={"missing_field": str(e), "response_keys": list(data.keys())},
            )
        except (TypeError, ValueError) as e:
            raise OAuthError(
                f"Invalid token response: bad expires_in {data.get('expires_in')!r}",
                error_code="invalid_response",
            ) from e
