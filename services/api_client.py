"""
API Client -- Thin async HTTP client for the StartupLink FastAPI backend.

Used by scripts and the mobile companion. The bearer token returned by
register / login is cached on the instance and sent with every request.

Configuration:
    BACKEND_URL env var or fallback to http://localhost:8000
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from config_env import BACKEND_URL

logger = logging.getLogger(__name__)

TIMEOUT = 30.0


class StartupLinkAPI:
    """Async HTTP client for the StartupLink backend."""

    def __init__(
        self,
        base_url: str = BACKEND_URL,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self.token = token

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=TIMEOUT,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    def _headers(self) -> dict:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    async def _request(self, method: str, path: str, what: str, **kwargs) -> Optional[dict]:
        client = await self._get_client()
        try:
            resp = await client.request(method, path, headers=self._headers(), **kwargs)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            logger.error("%s API error %d: %s", what, e.response.status_code, e.response.text)
            return None
        except httpx.HTTPError as e:
            logger.error("%s API call failed: %s", what, e)
            return None

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    async def health(self) -> dict:
        """Check if the backend is alive."""
        client = await self._get_client()
        try:
            resp = await client.get("/health")
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as e:
            logger.warning("Backend health check failed: %s", e)
            return {"status": "unavailable", "error": str(e)}

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def register(self, payload: dict) -> Optional[dict]:
        data = await self._request("POST", "/auth/register", "Register", json=payload)
        if data:
            self.token = data.get("token")
        return data

    async def login(self, email: str, password: str) -> Optional[dict]:
        data = await self._request(
            "POST", "/auth/login", "Login", json={"email": email, "password": password},
        )
        if data:
            self.token = data.get("token")
        return data

    def logout(self):
        """Forget the cached token (tokens are stateless server-side)."""
        self.token = None

    # ------------------------------------------------------------------
    # Startups
    # ------------------------------------------------------------------

    async def list_startups(self, **filters) -> Optional[dict]:
        params = {k: v for k, v in filters.items() if v is not None}
        return await self._request("GET", "/startups/", "List startups", params=params)

    async def get_startup(self, startup_id: str) -> Optional[dict]:
        return await self._request("GET", f"/startups/{startup_id}", "Get startup")

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    async def startup_recommendations(self, limit: int = 10) -> Optional[dict]:
        return await self._request(
            "GET", "/recommendations/startups", "Startup recommendations",
            params={"limit": limit},
        )

    async def investor_recommendations(self, startup_id: str, limit: int = 10) -> Optional[dict]:
        return await self._request(
            "GET", f"/recommendations/investors/{startup_id}", "Investor recommendations",
            params={"limit": limit},
        )

    async def trending_sectors(self) -> Optional[dict]:
        return await self._request("GET", "/recommendations/trending-sectors", "Trending sectors")

    # ------------------------------------------------------------------
    # Investments
    # ------------------------------------------------------------------

    async def invest(self, startup_id: str, amount: float) -> Optional[dict]:
        return await self._request(
            "POST", "/investments/", "Invest",
            json={"startup_id": startup_id, "amount": amount},
        )

    async def portfolio(self) -> Optional[dict]:
        return await self._request("GET", "/investments/portfolio", "Portfolio")


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

_api_client: Optional[StartupLinkAPI] = None


def get_api_client() -> StartupLinkAPI:
    """Get or create the global API client singleton."""
    global _api_client
    if _api_client is None:
        _api_client = StartupLinkAPI()
    return _api_client
