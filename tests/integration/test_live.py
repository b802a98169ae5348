"""
Integration tests against the real Discord gateway and API.

Requires environment variables:
  CORDLINK_TOKEN        — valid token
  CORDLINK_INTEGRATION  — set to run these tests

Run: CORDLINK_INTEGRATION=1 pytest tests/integration/ -v
"""

import asyncio
import json
import os

import pytest

from cordlink import CloseReason, Cordlink, GatewayClient, HTTPError, RecvError

SKIP = not os.environ.get("CORDLINK_INTEGRATION")
TOKEN = os.environ.get("CORDLINK_TOKEN", "")

pytestmark = [pytest.mark.integration, pytest.mark.skipif(SKIP, reason="CORDLINK_INTEGRATION not set")]


class TestGatewayLifecycle:
    @pytest.mark.asyncio
    async def test_identify_and_receive_ready(self):
        client = GatewayClient(TOKEN)
        await client.start()
        assert client.heartbeat_interval_ms > 0

        events = []

        def on_frame(frame):
            payload = json.loads(frame)
            events.append(payload)
            if payload.get("t") == "READY":
                client.abort()

        status = await asyncio.wait_for(client.run(on_frame), timeout=30)
        assert status.reason is CloseReason.ABORTED
        assert client.session_id

    @pytest.mark.asyncio
    async def test_invalid_token_closes_session(self):
        client = GatewayClient("invalid")
        await client.start()
        status = await asyncio.wait_for(client.run(lambda f: None), timeout=30)
        assert status.reason in (CloseReason.ERROR, CloseReason.CLOSED)
        if status.error:
            assert isinstance(status.error, RecvError)


class TestRest:
    @pytest.mark.asyncio
    async def test_list_guilds(self):
        async with Cordlink(TOKEN) as client:
            guilds = await client.rest.list_guilds()
            assert isinstance(guilds, list)

    @pytest.mark.asyncio
    async def test_bad_token_rejected(self):
        async with Cordlink("invalid") as client:
            with pytest.raises(HTTPError):
                await client.rest.list_guilds()
