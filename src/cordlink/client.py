"""
Cordlink — entry point bundling the REST API and gateway clients for one token.
"""

from typing import Any, Optional

from cordlink.cache import ResponseCache
from cordlink.gateway.client import GatewayClient
from cordlink.gateway.negotiator import DEFAULT_INTENTS
from cordlink.rest import RestAPI
from cordlink.transport.http import DEFAULT_API_URL, HttpClient
from cordlink.transport.websocket import DEFAULT_GATEWAY_URL


class Cordlink:
    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        gateway_url: str = DEFAULT_GATEWAY_URL,
        intents: int = DEFAULT_INTENTS,
        cache: Optional[ResponseCache] = None,
        http: Optional[HttpClient] = None,
    ):
        self._token = token
        self._gateway_url = gateway_url
        self._intents = intents
        self.cache = cache if cache is not None else ResponseCache()
        self.http = http or HttpClient(token, base_url=api_url)
        self.rest = RestAPI(self.http, self.cache)

    def gateway(self, **kwargs: Any) -> GatewayClient:
        """New GatewayClient for this token. Keyword arguments override defaults."""
        kwargs.setdefault("url", self._gateway_url)
        kwargs.setdefault("intents", self._intents)
        return GatewayClient(self._token, **kwargs)

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "Cordlink":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
