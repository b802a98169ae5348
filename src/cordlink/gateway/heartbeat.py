"""
Heartbeat writer — owns the write half of the gateway socket.

Heartbeats go out on fixed deadlines (t0 + n, t0 + 2n, ...). Between beats
the writer relays whatever the foreground queued on the outbound channel.
Channel activity may wake the writer early, but never moves the next
deadline, so a busy producer cannot delay or duplicate a heartbeat.
"""

import asyncio
import logging

from cordlink.errors import SendError
from cordlink.gateway.channel import Abort, OutboundChannel, SendMessage
from cordlink.transport.envelope import HEARTBEAT_FRAME

LOGGER = logging.getLogger(__name__)


class LoopTimer:
    """Monotonic clock and timed wait backed by the running event loop."""

    def now(self) -> float:
        return asyncio.get_running_loop().time()

    async def wait(self, event: asyncio.Event, timeout: float) -> bool:
        """Wait for ``event`` at most ``timeout`` seconds. True if it fired."""
        try:
            await asyncio.wait_for(event.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            return False
        return True


class HeartbeatWriter:
    def __init__(self, writer, channel: OutboundChannel, interval_ms: int, timer=None):
        self._writer = writer
        self._channel = channel
        self._interval = interval_ms / 1000.0
        self._timer = timer or LoopTimer()
        self.heartbeats_sent = 0

    async def run(self) -> None:
        deadline = self._timer.now() + self._interval
        while await self._drain():
            remaining = deadline - self._timer.now()
            if remaining > 0:
                await self._timer.wait(self._channel.ready, remaining)
                continue
            await self._beat()
            deadline += self._interval
            if deadline <= self._timer.now():
                # The loop stalled for more than a full period; don't burst.
                deadline = self._timer.now() + self._interval
        LOGGER.info("Heartbeat writer exiting after %d heartbeats", self.heartbeats_sent)

    async def _drain(self) -> bool:
        """Relay queued events. False once the writer should stop."""
        while True:
            event = self._channel.get_nowait()
            if event is None:
                return not self._channel.disconnected
            if isinstance(event, Abort):
                return False
            if isinstance(event, SendMessage):
                try:
                    await self._writer.send_frame(event.payload)
                except SendError as e:
                    LOGGER.error("Error sending gateway message: %s", e)
                except Exception:
                    LOGGER.exception("Unexpected error relaying gateway message")

    async def _beat(self) -> None:
        LOGGER.debug("Sending heartbeat")
        try:
            await self._writer.send_frame(HEARTBEAT_FRAME)
        except SendError as e:
            LOGGER.warning("Error sending heartbeat: %s", e)
            return
        except Exception:
            LOGGER.exception("Unexpected error sending heartbeat")
            return
        self.heartbeats_sent += 1
