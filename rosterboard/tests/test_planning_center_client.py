"""Tests for the Planning Center HTTP client."""

from __future__ import annotations

import base64

import httpx
import pytest

from rosterboard.planning_center import (
    PlanningCenterAuthError,
    PlanningCenterClient,
    PlanningCenterError,
    PlanningCenterRateLimitError,
    UpstreamUnavailable,
)


def make_client(handler, **kwargs) -> PlanningCenterClient:
    kwargs.setdefault("access_token", "tok")
    return PlanningCenterClient(
        base_url="https://pc.test/services/v2",
        people_base_url="https://pc.test/people/v2",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def test_requires_credentials():
    with pytest.raises(PlanningCenterAuthError):
        PlanningCenterClient()


@pytest.mark.asyncio
async def test_bearer_token_header():
    seen = {}

    def handler(request: httpx.Request):
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(200, json={"data": []})

    async with make_client(handler) as pc:
        assert pc.auth_mode == "oauth"
        await pc.get_all_folders()
    assert seen["auth"] == "Bearer tok"


@pytest.mark.asyncio
async def test_basic_auth_header():
    seen = {}

    def handler(request: httpx.Request):
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(200, json={"data": []})

    async with make_client(handler, access_token=None, app_id="app", secret="shh") as pc:
        assert pc.auth_mode == "basic"
        await pc.get_all_service_types()
    expected = base64.b64encode(b"app:shh").decode()
    assert seen["auth"] == f"Basic {expected}"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,error",
    [
        (401, PlanningCenterAuthError),
        (429, PlanningCenterRateLimitError),
        (503, UpstreamUnavailable),
        (404, PlanningCenterError),
    ],
)
async def test_status_codes_map_to_errors(status, error):
    async with make_client(lambda request: httpx.Response(status, json={"errors": []})) as pc:
        with pytest.raises(error) as exc_info:
            await pc.get_all_folders()
    assert exc_info.value.status_code == status


@pytest.mark.asyncio
async def test_network_failure_is_upstream_unavailable():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("boom", request=request)

    async with make_client(handler) as pc:
        with pytest.raises(UpstreamUnavailable):
            await pc.get_all_positions("st-1")


@pytest.mark.asyncio
async def test_get_next_plan_query_and_service_type():
    seen = {}

    def handler(request: httpx.Request):
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"data": [{"id": "p1", "attributes": {"title": "Sunday"}}]})

    async with make_client(handler) as pc:
        plan = await pc.get_next_plan("st-9")

    assert seen["path"] == "/services/v2/service_types/st-9/plans"
    assert seen["params"]["filter"] == "future"
    assert seen["params"]["order"] == "sort_date"
    assert seen["params"]["per_page"] == "1"
    assert plan["id"] == "p1"
    assert plan["service_type_id"] == "st-9"


@pytest.mark.asyncio
async def test_get_next_plan_none_when_no_future_plans():
    async with make_client(lambda request: httpx.Response(200, json={"data": []})) as pc:
        assert await pc.get_next_plan("st-1") is None


@pytest.mark.asyncio
async def test_get_person_uses_people_api():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"data": {"id": "42", "attributes": {"first_name": "Ada"}}})

    async with make_client(handler) as pc:
        person = await pc.get_person("42")

    assert seen["url"] == "https://pc.test/people/v2/people/42"
    assert person["attributes"]["first_name"] == "Ada"


@pytest.mark.asyncio
async def test_plan_items_copy_key_from_complete_arrangements():
    def handler(request: httpx.Request):
        assert request.url.params["include"] == "arrangement"
        assert request.url.params["order"] == "sequence"
        return httpx.Response(
            200,
            json={
                "data": [
                    {
                        "id": "i1",
                        "attributes": {"title": "Song A", "item_type": "song"},
                        "relationships": {"arrangement": {"data": {"type": "Arrangement", "id": "a1"}}},
                    },
                    {
                        "id": "i2",
                        "attributes": {"title": "Song B", "item_type": "song"},
                        "relationships": {"arrangement": {"data": {"type": "Arrangement", "id": "a2"}}},
                    },
                    {
                        "id": "i3",
                        "attributes": {"title": "Welcome", "item_type": "header"},
                        "relationships": {"arrangement": {"data": None}},
                    },
                ],
                "included": [
                    {"id": "a1", "type": "Arrangement", "attributes": {"bpm": 72, "meter": "4/4", "key_name": "G"}},
                    {"id": "a2", "type": "Arrangement", "attributes": {"bpm": None, "meter": "4/4", "key_name": "D"}},
                ],
            },
        )

    async with make_client(handler) as pc:
        items = await pc.get_plan_items("p1", "st-1")

    assert [i["id"] for i in items] == ["i1", "i2", "i3"]
    assert items[0]["attributes"]["key_name"] == "G"
    assert "key_name" not in items[1]["attributes"]
    assert "key_name" not in items[2]["attributes"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "failure",
    [
        lambda request: httpx.TooManyRedirects("redirect loop", request=request),
        lambda request: httpx.DecodingError("bad gzip", request=request),
    ],
)
async def test_request_errors_are_upstream_unavailable(failure):
    def handler(request: httpx.Request):
        raise failure(request)

    async with make_client(handler) as pc:
        with pytest.raises(UpstreamUnavailable):
            await pc.get_all_folders()
