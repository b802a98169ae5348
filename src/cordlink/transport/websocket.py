"""
Gateway socket transport.

``connect()`` opens a TLS WebSocket and returns its two halves. Both halves
wrap the same websockets connection: it tolerates one concurrent reader and
one concurrent writer, which is exactly how the gateway client uses it.
"""

import asyncio
import logging
from typing import Optional, Union

import websockets

from cordlink.errors import ConnectError, RecvError, SendError

LOGGER = logging.getLogger(__name__)

DEFAULT_GATEWAY_URL = "wss://gateway.discord.gg/?v=9&encoding=json"
MAX_FRAME_SIZE = 2**24

Frame = Union[str, bytes]


class FrameReader:
    def __init__(self, ws):
        self._ws = ws

    async def next_frame(self) -> Optional[Frame]:
        """Receive one frame. Returns None once the peer closed cleanly."""
        try:
            frame = await self._ws.recv()
        except websockets.ConnectionClosedOK:
            return None
        except websockets.ConnectionClosedError as e:
            raise RecvError(f"Gateway connection lost: {e}", details={"code": e.rcvd.code if e.rcvd else None})
        LOGGER.debug("Gateway recv: %.200s", frame)
        return frame


class FrameWriter:
    def __init__(self, ws):
        self._ws = ws

    async def send_frame(self, frame: str) -> None:
        LOGGER.debug("Gateway send: %.200s", frame)
        try:
            await self._ws.send(frame)
        except websockets.ConnectionClosed as e:
            raise SendError(f"Gateway connection closed: {e}")

    async def close(self) -> None:
        await self._ws.close()


async def connect(url: str = DEFAULT_GATEWAY_URL, open_timeout: float = 10.0) -> tuple[FrameWriter, FrameReader]:
    """Open the gateway socket and split it into (writer, reader)."""
    LOGGER.info("Connecting to gateway at %s", url)
    try:
        ws = await websockets.connect(url, max_size=MAX_FRAME_SIZE, open_timeout=open_timeout)
    except (OSError, asyncio.TimeoutError, websockets.InvalidURI, websockets.InvalidHandshake) as e:
        raise ConnectError(f"Failed to connect to {url}: {e}", details={"url": url})
    return FrameWriter(ws), FrameReader(ws)
