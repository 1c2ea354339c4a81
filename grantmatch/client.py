"""
API client -- thin async HTTP client for the grant matching API.

Covers what the web pages fetch: the caller's company profile, the grant
list / detail with match info, and the match list with status updates.

Configuration:
    BACKEND_URL env var or fallback to http://localhost:8000
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from grantmatch import config
from grantmatch.auth import USER_HEADER

logger = logging.getLogger(__name__)

TIMEOUT = 30.0


class GrantMatchAPI:
    """Async HTTP client acting on behalf of one user."""

    def __init__(self, user_id: str, base_url: str = None, transport: httpx.AsyncBaseTransport = None):
        self._base_url = (base_url or config.BACKEND_URL).rstrip("/")
        self._user_id = user_id
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=TIMEOUT,
                headers={USER_HEADER: self._user_id},
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "GrantMatchAPI":
        return self

    async def __aexit__(self, *exc):
        await self.close()

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    async def health(self) -> dict:
        client = await self._get_client()
        resp = await client.get("/health")
        resp.raise_for_status()
        return resp.json()

    # ------------------------------------------------------------------
    # Companies
    # ------------------------------------------------------------------

    async def get_my_company(self) -> Optional[dict]:
        """The caller's company, or None if onboarding has not happened yet."""
        client = await self._get_client()
        resp = await client.get("/api/companies/me")
        resp.raise_for_status()
        return resp.json()

    async def create_company(self, **fields) -> dict:
        client = await self._get_client()
        resp = await client.post("/api/companies", json=fields)
        resp.raise_for_status()
        return resp.json()

    async def update_company(self, company_id: int, **fields) -> dict:
        client = await self._get_client()
        resp = await client.put(f"/api/companies/{company_id}", json=fields)
        resp.raise_for_status()
        return resp.json()

    # ------------------------------------------------------------------
    # Grants
    # ------------------------------------------------------------------

    async def list_grants(
        self,
        search: Optional[str] = None,
        scope: Optional[str] = None,
        min_amount: Optional[float] = None,
    ) -> list[dict]:
        params = {
            k: v
            for k, v in {"search": search, "scope": scope, "min_amount": min_amount}.items()
            if v not in (None, "")
        }
        client = await self._get_client()
        resp = await client.get("/api/grants", params=params)
        resp.raise_for_status()
        return resp.json()

    async def get_grant(self, grant_id: int) -> dict:
        client = await self._get_client()
        resp = await client.get(f"/api/grants/{grant_id}")
        resp.raise_for_status()
        return resp.json()

    # ------------------------------------------------------------------
    # Matches
    # ------------------------------------------------------------------

    async def list_matches(self) -> list[dict]:
        client = await self._get_client()
        resp = await client.get("/api/matches")
        resp.raise_for_status()
        return resp.json()

    async def update_match_status(self, match_id: int, status: str) -> dict:
        client = await self._get_client()
        resp = await client.patch(f"/api/matches/{match_id}", json={"status": status})
        resp.raise_for_status()
        return resp.json()
