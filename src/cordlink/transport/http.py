"""
REST HTTP client for the Discord API.
"""

from typing import Any, Optional

import httpx

from cordlink.errors import HTTPError

DEFAULT_API_URL = "https://discord.com/api/v9"
USER_AGENT = "cordlink/0.1.0"


class HttpClient:
    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": self._token}

    @staticmethod
    def _check(resp: httpx.Response) -> Any:
        if resp.status_code >= 400:
            raise HTTPError(resp.status_code, f"HTTP {resp.status_code}: {resp.text[:200]}")
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        resp = await self._client.get(path, params=params, headers=self._auth_headers())
        return self._check(resp)

    async def post(self, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        resp = await self._client.post(path, json=body, headers=self._auth_headers())
        return self._check(resp)

    async def close(self) -> None:
        await self._client.aclose()
