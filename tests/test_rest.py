"""REST API and response cache."""

import json

import httpx
import pytest

from cordlink.cache import ResponseCache
from cordlink.errors import HTTPError
from cordlink.rest import RestAPI, make_nonce
from cordlink.transport.http import HttpClient

GUILDS = [{"id": "1", "name": "Rustaceans", "owner": True, "permissions": "8", "features": []}]
CHANNELS = [
    {"id": "20", "type": 0, "name": "random", "position": 2, "guild_id": "1"},
    {"id": "10", "type": 0, "name": "general", "position": 0, "guild_id": "1", "topic": "hi"},
    {"id": "30", "type": 4, "name": "Text Channels"},
]
MESSAGE = {
    "id": "99", "channel_id": "10", "content": "hello", "type": 0,
    "author": {"id": "5", "username": "ferris", "discriminator": "0"},
    "timestamp": "2023-01-01T00:00:00+00:00",
}


class FakeAPI:
    def __init__(self):
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.endswith("/users/@me/guilds"):
            return httpx.Response(200, json=GUILDS)
        if path.endswith("/guilds/1/channels"):
            return httpx.Response(200, json=CHANNELS)
        if path.endswith("/channels/10/messages") and request.method == "GET":
            return httpx.Response(200, json=[MESSAGE])
        if path.endswith("/channels/10/messages") and request.method == "POST":
            body = json.loads(request.content)
            return httpx.Response(200, json={**MESSAGE, "id": "100", "content": body["content"]})
        return httpx.Response(401, json={"message": "401: Unauthorized", "code": 0})


def make_api(cache=None):
    fake = FakeAPI()
    http = HttpClient("user-token", transport=httpx.MockTransport(fake))
    return RestAPI(http, cache), fake


class TestRestAPI:
    @pytest.mark.asyncio
    async def test_list_guilds_sends_token(self):
        api, fake = make_api()
        guilds = await api.list_guilds()
        assert [g.name for g in guilds] == ["Rustaceans"]
        request = fake.requests[0]
        assert request.headers["Authorization"] == "user-token"
        assert request.url.host == "discord.com"
        assert request.url.path.startswith("/api/v9/")

    @pytest.mark.asyncio
    async def test_channels_sorted_by_position(self):
        api, _ = make_api()
        channels = await api.list_channels("1")
        assert [c.id for c in channels] == ["10", "20", "30"]

    @pytest.mark.asyncio
    async def test_list_messages(self):
        api, fake = make_api()
        messages = await api.list_messages("10", limit=5)
        assert messages[0].author.username == "ferris"
        assert messages[0].message_type == 0
        assert fake.requests[0].url.params["limit"] == "5"

    @pytest.mark.asyncio
    async def test_send_message_body(self):
        api, fake = make_api()
        sent = await api.send_message("10", "hi there")
        body = json.loads(fake.requests[0].content)
        assert body["content"] == "hi there"
        assert body["tts"] is False
        assert len(body["nonce"]) == 16 and body["nonce"].isalnum()
        assert sent.id == "100"

    @pytest.mark.asyncio
    async def test_http_error(self):
        api, _ = make_api()
        with pytest.raises(HTTPError) as exc:
            await api.list_channels("404")
        assert exc.value.status_code == 401
        assert exc.value.code == "http_error"

    @pytest.mark.asyncio
    async def test_cache_hit_and_invalidation_on_send(self):
        api, fake = make_api(ResponseCache())
        await api.list_messages("10")
        await api.list_messages("10")
        assert len(fake.requests) == 1

        await api.send_message("10", "new")
        await api.list_messages("10")
        assert [r.method for r in fake.requests] == ["GET", "POST", "GET"]

    @pytest.mark.asyncio
    async def test_without_cache_every_call_hits_api(self):
        api, fake = make_api()
        await api.list_guilds()
        await api.list_guilds()
        assert len(fake.requests) == 2


class TestResponseCache:
    def test_ttl_expiry(self):
        now = [0.0]
        cache = ResponseCache(ttl=10, clock=lambda: now[0])
        cache.set("channels", "1", ["a"])
        now[0] = 9.9
        assert cache.get("channels", "1") == ["a"]
        now[0] = 10.0
        assert cache.get("channels", "1") is None
        assert len(cache) == 0

    def test_lru_eviction(self):
        cache = ResponseCache(max_entries=2)
        cache.set("messages", "a", 1)
        cache.set("messages", "b", 2)
        cache.get("messages", "a")
        cache.set("messages", "c", 3)
        assert cache.get("messages", "b") is None
        assert cache.get("messages", "a") == 1
        assert cache.get("messages", "c") == 3

    def test_kinds_do_not_collide_and_clear(self):
        cache = ResponseCache()
        cache.set("channels", "1", "c")
        cache.set("messages", "1", "m")
        assert cache.get("channels", "1") == "c"
        cache.invalidate("messages", "1")
        assert cache.get("messages", "1") is None
        cache.clear()
        assert len(cache) == 0


def test_nonce_alphabet():
    assert all(make_nonce().isalnum() for _ in range(20))
