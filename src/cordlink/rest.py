"""
Discord REST API — guilds, channels and messages.

Plain request/response calls; the gateway socket is handled separately by
GatewayClient. Read calls go through an optional ResponseCache.
"""

from __future__ import annotations

import random
import string
from typing import Any, Optional

from cordlink.cache import ResponseCache
from cordlink.models.resources import Channel, Guild, Message
from cordlink.transport.http import HttpClient

NONCE_ALPHABET = string.ascii_letters + string.digits


def make_nonce(length: int = 16) -> str:
    return "".join(random.choices(NONCE_ALPHABET, k=length))


class RestAPI:
    def __init__(self, http: HttpClient, cache: Optional[ResponseCache] = None):
        self._http = http
        self._cache = cache

    async def _cached_get(self, kind: str, key: str, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        if self._cache is not None:
            hit = self._cache.get(kind, key)
            if hit is not None:
                return hit
        data = await self._http.get(path, params=params)
        if self._cache is not None:
            self._cache.set(kind, key, data)
        return data

    async def list_guilds(self) -> list[Guild]:
        """Guilds the current user is a member of."""
        data = await self._cached_get("guilds", "@me", "/users/@me/guilds")
        return [Guild.model_validate(g) for g in data]

    async def list_channels(self, guild_id: str) -> list[Channel]:
        data = await self._cached_get("channels", guild_id, f"/guilds/{guild_id}/channels")
        channels = [Channel.model_validate(c) for c in data]
        return sorted(channels, key=lambda c: (c.position is None, c.position or 0))

    async def list_messages(self, channel_id: str, limit: int = 50) -> list[Message]:
        """Most recent messages first, as returned by the API."""
        data = await self._cached_get(
            "messages", channel_id, f"/channels/{channel_id}/messages", params={"limit": limit},
        )
        return [Message.model_validate(m) for m in data]

    async def send_message(self, channel_id: str, content: str, *, tts: bool = False) -> Message:
        data = await self._http.post(f"/channels/{channel_id}/messages", {
            "content": content,
            "tts": tts,
            "nonce": make_nonce(),
        })
        if self._cache is not None:
            self._cache.invalidate("messages", channel_id)
        return Message.model_validate(data)
