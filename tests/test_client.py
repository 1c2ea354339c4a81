"""
Tests for the async API client, run against the app in-process.
"""

import httpx
import pytest

from grantmatch.client import GrantMatchAPI


@pytest.fixture
def api(asgi_transport):
    return GrantMatchAPI("client-user", base_url="http://test", transport=asgi_transport)


async def test_onboarding_flow(api, seeded, company_payload):
    async with api:
        assert (await api.health()) == {"status": "ok"}
        assert await api.get_my_company() is None

        company = await api.create_company(**company_payload)
        assert (await api.get_my_company())["id"] == company["id"]

        matches = await api.list_matches()
        assert matches[0]["grant"]["title"] == "Kit Digital - Segmento I"

        updated = await api.update_match_status(matches[0]["id"], "applied")
        assert updated["status"] == "applied"


async def test_grants_listing(api, seeded):
    async with api:
        national = await api.list_grants(scope="Nacional")
        assert {g["title"] for g in national} == {"Kit Digital - Segmento I", "Programa Neotec 2024"}

        detail = await api.get_grant(national[0]["id"])
        assert detail["id"] == national[0]["id"]


async def test_errors_raise(api):
    async with api:
        with pytest.raises(httpx.HTTPStatusError):
            await api.get_grant(9999)
        with pytest.raises(httpx.HTTPStatusError):
            await api.update_company(1, name="x")
