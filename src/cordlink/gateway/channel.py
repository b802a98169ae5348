"""
Outbound channel — the only synchronization point between the foreground
and the heartbeat writer.

Producers hold an ``OutboundHandle`` and may live on any thread. The single
consumer is the heartbeat writer running on the channel's event loop.
"""

import asyncio
import collections
import logging
import threading
from dataclasses import dataclass
from typing import Optional, Union

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendMessage:
    payload: str


@dataclass(frozen=True)
class Abort:
    pass


ThreadEvent = Union[SendMessage, Abort]


class OutboundChannel:
    """FIFO of ThreadEvents. Must be created on the loop that consumes it."""

    def __init__(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._loop_thread = threading.get_ident()
        self._items: collections.deque[ThreadEvent] = collections.deque()
        self._ready = asyncio.Event()
        self._closed = False

    def put(self, event: ThreadEvent) -> None:
        """Enqueue an event. Safe to call from any thread."""
        if not self._call(self._put, event) and isinstance(event, SendMessage):
            LOGGER.warning("Dropping outbound frame, gateway connection is closed")

    def close(self) -> None:
        """Mark the producers as gone; the consumer drains what is left."""
        self._call(self._close)

    def get_nowait(self) -> Optional[ThreadEvent]:
        """Non-blocking poll; None when nothing is queued."""
        if not self._items:
            if not self._closed:
                self._ready.clear()
            return None
        return self._items.popleft()

    @property
    def disconnected(self) -> bool:
        return self._closed and not self._items

    @property
    def ready(self) -> asyncio.Event:
        """Set whenever an event is queued or the channel closes."""
        return self._ready

    def _call(self, fn, *args) -> bool:
        """Run ``fn`` on the loop thread. False if the loop is already closed."""
        if threading.get_ident() == self._loop_thread:
            fn(*args)
            return True
        try:
            self._loop.call_soon_threadsafe(fn, *args)
        except RuntimeError:
            return False
        return True

    def _put(self, event: ThreadEvent) -> None:
        if self._closed:
            if isinstance(event, SendMessage):
                LOGGER.warning("Dropping outbound frame, gateway connection is closed")
            return
        self._items.append(event)
        self._ready.set()

    def _close(self) -> None:
        self._closed = True
        self._ready.set()


class OutboundHandle:
    """Producer side of the outbound channel. Cheap to share between threads."""

    def __init__(self, channel: OutboundChannel):
        self._channel = channel

    def send(self, payload: str) -> None:
        """Queue a raw gateway frame for the writer to relay verbatim."""
        self._channel.put(SendMessage(payload))

    def abort(self) -> None:
        """Ask the writer to stop. Repeated calls are harmless."""
        self._channel.put(Abort())
