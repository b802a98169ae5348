"""
ThreadedGateway — sync wrapper that runs a GatewayClient on a private event
loop in a daemon thread, for callers (UIs, scripts) that are not async.
"""

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Optional

from cordlink.errors import GatewayStateError
from cordlink.gateway.client import CloseStatus, FrameHandler, GatewayClient

LOGGER = logging.getLogger(__name__)


class ThreadedGateway:
    def __init__(self, token: str, **kwargs: Any):
        self._token = token
        self._kwargs = kwargs
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._client: Optional[GatewayClient] = None
        self._thread: Optional[threading.Thread] = None
        self._abort_requested = False
        self._started: concurrent.futures.Future[None] = concurrent.futures.Future()
        self._finished: concurrent.futures.Future[CloseStatus] = concurrent.futures.Future()

    @property
    def client(self) -> Optional[GatewayClient]:
        return self._client

    def start(self, on_frame: FrameHandler, timeout: Optional[float] = None) -> None:
        """Connect in the background and block until the handshake is done.

        ``on_frame`` runs on the gateway thread. Handshake errors are re-raised here.
        """
        if self._thread is not None:
            raise GatewayStateError("ThreadedGateway already started")
        self._thread = threading.Thread(target=self._main, args=(on_frame,), name="cordlink-gateway", daemon=True)
        self._thread.start()
        self._started.result(timeout=timeout)

    def send(self, payload: str) -> None:
        """Queue a raw frame for the writer. Callable from any thread."""
        if self._client is None or not self._started.done():
            raise GatewayStateError("Gateway not started")
        self._client.outbound.send(payload)

    def abort(self) -> None:
        """Stop the gateway thread. Idempotent.

        Called before the session is up, the abort is applied right after the handshake.
        """
        self._abort_requested = True
        loop = self._loop
        if loop is None or loop.is_closed() or self._client is None:
            return
        try:
            loop.call_soon_threadsafe(self._client.abort)
        except RuntimeError:
            # loop closed between the check and the call
            pass

    def join(self, timeout: Optional[float] = None) -> CloseStatus:
        """Wait for the read loop to end and return its terminal status."""
        return self._finished.result(timeout=timeout)

    def _main(self, on_frame: FrameHandler) -> None:
        self._loop = asyncio.new_event_loop()
        try:
            self._loop.run_until_complete(self._serve(on_frame))
        finally:
            self._loop.close()

    async def _serve(self, on_frame: FrameHandler) -> None:
        self._client = GatewayClient(self._token, **self._kwargs)
        try:
            await self._client.start()
        except Exception as e:
            self._started.set_exception(e)
            self._finished.set_exception(e)
            return
        self._started.set_result(None)
        if self._abort_requested:
            self._client.abort()
        try:
            status = await self._client.run(on_frame)
        except Exception as e:
            LOGGER.exception("Gateway thread crashed")
            self._finished.set_exception(e)
            return
        self._finished.set_result(status)
