"""Planning Center Services API client."""

from __future__ import annotations

from typing import Any

import httpx

from ..config import settings


class PlanningCenterError(Exception):
    """Base exception for Planning Center API errors."""

    def __init__(self, message: str, status_code: int | None = None, response: dict | None = None):
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(self.message)


class PlanningCenterAuthError(PlanningCenterError):
    """Authentication error."""

    pass


class PlanningCenterRateLimitError(PlanningCenterError):
    """Rate limit exceeded."""

    pass


class UpstreamUnavailable(PlanningCenterError):
    """Network failure or 5xx from Planning Center."""

    pass


def _safe_json(response: httpx.Response) -> dict | None:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return {"raw_response": response.text[:500]}


class PlanningCenterClient:
    """Planning Center Services client.

    Authenticates with either an OAuth bearer token or a basic-auth app
    id / secret pair; exactly one must be given.

    Usage:
        async with PlanningCenterClient(access_token=token) as pc:
            plan = await pc.get_next_plan(service_type_id)
            items = await pc.get_plan_items(plan["id"], plan["service_type_id"])
    """

    def __init__(
        self,
        *,
        access_token: str | None = None,
        app_id: str | None = None,
        secret: str | None = None,
        base_url: str | None = None,
        people_base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not access_token and not (app_id and secret):
            raise PlanningCenterAuthError(
                "Planning Center credentials not configured. "
                "Connect via OAuth or provide an App ID and Secret."
            )

        self.base_url = base_url or settings.pc_api_base
        self.people_base_url = people_base_url or settings.pc_people_api_base
        self.auth_mode = "oauth" if access_token else "basic"

        headers = {"Content-Type": "application/json"}
        auth = None
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        else:
            auth = httpx.BasicAuth(app_id, secret)

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            auth=auth,
            timeout=timeout or settings.pc_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
    ) -> dict[str, Any]:
        """Make an API request with error handling."""
        try:
            response = await self._client.request(method=method, url=path, params=params)
        except httpx.RequestError as e:
            raise UpstreamUnavailable(f"Planning Center is unreachable: {e}") from e

        if response.status_code == 401:
            raise PlanningCenterAuthError("Invalid Planning Center credentials or token expired", 401)

        if response.status_code == 429:
            raise PlanningCenterRateLimitError(
                "Planning Center rate limit exceeded. Wait and retry.",
                429,
                _safe_json(response),
            )

        if response.status_code >= 500:
            raise UpstreamUnavailable(
                f"Planning Center error: {response.status_code}",
                response.status_code,
                _safe_json(response),
            )

        if response.is_error:
            raise PlanningCenterError(
                f"Planning Center API error: {response.status_code}",
                response.status_code,
                _safe_json(response),
            )

        return _safe_json(response) or {}

    async def _get_data(self, path: str, params: dict | None = None) -> list[dict[str, Any]]:
        resp = await self._request("GET", path, params=params)
        data = resp.get("data", [])
        return data if isinstance(data, list) else [data]

    # ------------------------------------------------------------------
    # Folders and service types
    # ------------------------------------------------------------------

    async def get_all_folders(self) -> list[dict[str, Any]]:
        """List every folder (flat; parents via relationships.parent)."""
        return await self._get_data("/folders", params={"per_page": settings.pc_per_page})

    async def get_all_service_types(self) -> list[dict[str, Any]]:
        """List every service type with its parent folder reference."""
        return await self._get_data(
            "/service_types",
            params={"per_page": settings.pc_per_page, "include": "folder"},
        )

    # ------------------------------------------------------------------
    # Positions, plans and people
    # ------------------------------------------------------------------

    async def get_all_positions(self, service_type_id: str) -> list[dict[str, Any]]:
        """Team positions for a service type."""
        return await self._get_data(
            f"/service_types/{service_type_id}/team_positions",
            params={"per_page": settings.pc_per_page},
        )

    async def get_next_plan(self, service_type_id: str) -> dict[str, Any] | None:
        """Earliest future plan of a service type, or None."""
        plans = await self._get_data(
            f"/service_types/{service_type_id}/plans",
            params={"filter": "future", "order": "sort_date", "per_page": 1},
        )
        if not plans:
            return None
        plan = plans[0]
        plan["service_type_id"] = service_type_id
        return plan

    async def get_plan_team_members(
        self, plan_id: str, service_type_id: str | None = None
    ) -> list[dict[str, Any]]:
        """Team members scheduled on a plan."""
        path = (
            f"/service_types/{service_type_id}/plans/{plan_id}/team_members"
            if service_type_id
            else f"/plans/{plan_id}/team_members"
        )
        return await self._get_data(path, params={"include": "person", "per_page": settings.pc_per_page})

    async def get_person(self, person_id: str) -> dict[str, Any]:
        """Person detail from the People API."""
        resp = await self._request("GET", f"{self.people_base_url}/people/{person_id}")
        return resp.get("data") or {}

    async def get_plan_items(
        self, plan_id: str, service_type_id: str | None = None
    ) -> list[dict[str, Any]]:
        """Plan items in sequence order, songs enriched with ``key_name``."""
        path = (
            f"/service_types/{service_type_id}/plans/{plan_id}/items"
            if service_type_id
            else f"/plans/{plan_id}/items"
        )
        resp = await self._request(
            "GET",
            path,
            params={"order": "sequence", "per_page": settings.pc_per_page, "include": "arrangement"},
        )
        items = resp.get("data") or []
        arrangements = {
            inc.get("id"): inc.get("attributes") or {}
            for inc in resp.get("included") or []
            if inc.get("type") == "Arrangement"
        }

        for item in items:
            arrangement_ref = ((item.get("relationships") or {}).get("arrangement") or {}).get("data")
            if not isinstance(arrangement_ref, dict):
                continue
            arrangement = arrangements.get(arrangement_ref.get("id"))
            # Only fully specified arrangements carry a trustworthy key.
            if arrangement and arrangement.get("bpm") and arrangement.get("meter") and arrangement.get("key_name"):
                item.setdefault("attributes", {})["key_name"] = arrangement["key_name"]

        return items
