"""
GatewayClient — long-lived client for the gateway socket.

Lifecycle: DISCONNECTED -> NEGOTIATING -> STEADY_STATE -> CLOSING -> DISCONNECTED.

``start()`` connects, performs the Hello/Identify handshake and spawns the
heartbeat writer as its own task. ``run()`` is the foreground read loop: it
hands every inbound text frame to the consumer and returns a single
``CloseStatus`` once the stream ends or ``abort()`` is called. While the
client is in steady state, ``outbound`` queues frames for the writer from
any thread.

Usage:
    client = GatewayClient(token)
    await client.start()
    status = await client.run(print)
"""

import asyncio
import enum
import inspect
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

from cordlink.errors import ConnectError, GatewayStateError, RecvError, SendError
from cordlink.gateway.channel import OutboundChannel, OutboundHandle
from cordlink.gateway.heartbeat import HeartbeatWriter
from cordlink.gateway.negotiator import DEFAULT_INTENTS, ResumeState, negotiate
from cordlink.models.envelope import Opcode
from cordlink.transport.envelope import frame_data, peek_frame
from cordlink.transport.websocket import DEFAULT_GATEWAY_URL, connect

LOGGER = logging.getLogger(__name__)

GATEWAY_QUERY = "?v=9&encoding=json"

FrameHandler = Callable[[str], Union[None, Awaitable[None]]]


class GatewayState(enum.Enum):
    DISCONNECTED = "disconnected"
    NEGOTIATING = "negotiating"
    STEADY_STATE = "steady_state"
    CLOSING = "closing"


class CloseReason(enum.Enum):
    CLOSED = "closed"            # peer closed the stream cleanly
    ERROR = "error"              # the stream failed
    ABORTED = "aborted"          # abort() was called
    RECONNECT = "reconnect"      # server asked for a reconnect or invalidated the session


@dataclass(frozen=True)
class CloseStatus:
    reason: CloseReason
    error: Optional[Exception] = None


@dataclass(frozen=True)
class ReconnectPolicy:
    """Exponential backoff with jitter between connection attempts."""
    base_delay: float = 1.0
    max_delay: float = 60.0
    jitter: float = 0.2

    def delay(self, attempt: int) -> float:
        delay = min(self.max_delay, self.base_delay * (2 ** (attempt - 1)))
        return max(0.0, delay * random.uniform(1 - self.jitter, 1 + self.jitter))


class GatewayClient:
    def __init__(
        self,
        token: str,
        *,
        url: str = DEFAULT_GATEWAY_URL,
        intents: int = DEFAULT_INTENTS,
        properties: Optional[dict[str, str]] = None,
        connector: Callable[[str], Awaitable[Any]] = connect,
        timer: Any = None,
        reconnect_policy: Optional[ReconnectPolicy] = None,
    ):
        self._token = token
        self._url = url
        self._intents = intents
        self._properties = properties
        self._connector = connector
        self._timer = timer
        self._reconnect_policy = reconnect_policy or ReconnectPolicy()

        self._state = GatewayState.DISCONNECTED
        self._heartbeat_interval_ms: Optional[int] = None
        self._reader: Any = None
        self._writer: Any = None
        self._channel: Optional[OutboundChannel] = None
        self._outbound: Optional[OutboundHandle] = None
        self._writer_task: Optional[asyncio.Task[None]] = None
        self._read_task: Optional[asyncio.Future[Any]] = None
        self._aborted = False
        self._abort_event = asyncio.Event()

        self._last_sequence: Optional[int] = None
        self._session_id: Optional[str] = None
        self._resume_url: Optional[str] = None

    @property
    def token(self) -> str:
        return self._token

    @property
    def state(self) -> GatewayState:
        return self._state

    @property
    def heartbeat_interval_ms(self) -> Optional[int]:
        return self._heartbeat_interval_ms

    @property
    def outbound(self) -> OutboundHandle:
        if self._outbound is None:
            raise GatewayStateError("Gateway not started. Call start() first.")
        return self._outbound

    @property
    def last_sequence(self) -> Optional[int]:
        return self._last_sequence

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    @property
    def resume_state(self) -> Optional[ResumeState]:
        if self._session_id is None or self._last_sequence is None:
            return None
        return ResumeState(self._session_id, self._last_sequence)

    async def start(self, resume: Optional[ResumeState] = None) -> None:
        """Connect and negotiate. Raises ConnectError or NegotiationError."""
        if self._state is not GatewayState.DISCONNECTED:
            raise GatewayStateError(f"Cannot start from state {self._state.value}")
        self._state = GatewayState.NEGOTIATING
        self._aborted = False
        self._abort_event.clear()

        url = self._resume_url if resume is not None and self._resume_url else self._url
        try:
            writer, reader = await self._connector(url)
        except Exception:
            self._state = GatewayState.DISCONNECTED
            raise

        try:
            interval = await negotiate(
                reader, writer, self._token,
                intents=self._intents, properties=self._properties, resume=resume,
            )
        except (RecvError, SendError) as e:
            await self._close_transport(writer)
            self._state = GatewayState.DISCONNECTED
            raise ConnectError(f"Connection lost during handshake: {e}")
        except Exception:
            await self._close_transport(writer)
            self._state = GatewayState.DISCONNECTED
            raise

        self._heartbeat_interval_ms = interval
        self._reader = reader
        self._writer = writer
        self._channel = OutboundChannel()
        self._outbound = OutboundHandle(self._channel)
        heartbeat = HeartbeatWriter(writer, self._channel, interval, timer=self._timer)
        self._writer_task = asyncio.create_task(heartbeat.run(), name="gateway-heartbeat")
        self._state = GatewayState.STEADY_STATE
        LOGGER.info("Gateway session established")

    async def run(self, on_frame: FrameHandler) -> CloseStatus:
        """Read frames until the stream ends or abort() is called."""
        if self._state is not GatewayState.STEADY_STATE:
            raise GatewayStateError(f"Cannot run from state {self._state.value}")
        status: Optional[CloseStatus] = None
        try:
            while status is None:
                if self._aborted:
                    status = CloseStatus(CloseReason.ABORTED)
                    break
                self._read_task = asyncio.ensure_future(self._reader.next_frame())
                try:
                    frame = await self._read_task
                except asyncio.CancelledError:
                    if not self._aborted:
                        raise
                    status = CloseStatus(CloseReason.ABORTED)
                    break
                except RecvError as e:
                    status = CloseStatus(CloseReason.ERROR, e)
                    break
                finally:
                    self._read_task = None

                if frame is None:
                    status = CloseStatus(CloseReason.CLOSED)
                elif isinstance(frame, str):
                    reconnect = self._track(frame)
                    await self._dispatch(on_frame, frame)
                    if reconnect:
                        status = CloseStatus(CloseReason.RECONNECT)
        finally:
            await self._shutdown()
        LOGGER.info("Gateway read loop ended: %s", status.reason.value)
        return status

    def abort(self) -> None:
        """Stop both halves. Idempotent; safe to call from the consumer callback."""
        if self._aborted:
            return
        self._aborted = True
        self._abort_event.set()
        if self._outbound is not None:
            self._outbound.abort()
        if self._read_task is not None and not self._read_task.done():
            self._read_task.cancel()

    async def run_forever(self, on_frame: FrameHandler, *, max_attempts: Optional[int] = None) -> CloseStatus:
        """Keep a session alive, resuming or re-identifying after each loss.

        Returns when aborted. Raises ConnectError once ``max_attempts``
        consecutive connection attempts failed; NegotiationError is never retried.
        """
        attempt = 0
        while True:
            if self._aborted:
                return CloseStatus(CloseReason.ABORTED)
            try:
                await self.start(resume=self.resume_state)
            except ConnectError as e:
                attempt += 1
                if max_attempts is not None and attempt >= max_attempts:
                    raise
                delay = self._reconnect_policy.delay(attempt)
                LOGGER.warning("Gateway connect failed (attempt %d): %s; retrying in %.2fs", attempt, e, delay)
                await self._backoff(delay)
                continue

            attempt = 0
            status = await self.run(on_frame)
            if status.reason is CloseReason.ABORTED:
                return status
            if status.reason is not CloseReason.RECONNECT:
                attempt = 1
                delay = self._reconnect_policy.delay(attempt)
                LOGGER.warning("Gateway session lost (%s); reconnecting in %.2fs", status.reason.value, delay)
                await self._backoff(delay)

    async def _backoff(self, delay: float) -> None:
        try:
            await asyncio.wait_for(self._abort_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass

    async def _dispatch(self, on_frame: FrameHandler, frame: str) -> None:
        try:
            result = on_frame(frame)
            if inspect.isawaitable(result):
                await result
        except Exception:
            LOGGER.exception("Gateway frame handler failed")

    def _track(self, frame: str) -> bool:
        """Record sequence/session bookkeeping. True if the server wants a reconnect."""
        peeked = peek_frame(frame)
        if peeked is None:
            return False
        if peeked.s is not None:
            self._last_sequence = peeked.s
        if peeked.op == Opcode.DISPATCH and peeked.t == "READY":
            data = frame_data(peeked)
            session_id = data.get("session_id")
            resume_url = data.get("resume_gateway_url")
            self._session_id = session_id if isinstance(session_id, str) else None
            if isinstance(resume_url, str) and resume_url:
                self._resume_url = f"{resume_url.rstrip('/')}/{GATEWAY_QUERY}"
            else:
                self._resume_url = None
        elif peeked.op == Opcode.INVALID_SESSION:
            if not peeked.d:
                self._session_id = None
                self._last_sequence = None
                self._resume_url = None
            return True
        elif peeked.op == Opcode.RECONNECT:
            return True
        return False

    async def _shutdown(self) -> None:
        self._state = GatewayState.CLOSING
        try:
            if self._outbound is not None:
                self._outbound.abort()
            if self._channel is not None:
                self._channel.close()
            await self._close_transport(self._writer)
            if self._writer_task is not None:
                try:
                    await self._writer_task
                except Exception:
                    LOGGER.exception("Heartbeat writer failed")
        finally:
            self._reader = None
            self._writer = None
            self._writer_task = None
            self._state = GatewayState.DISCONNECTED

    @staticmethod
    async def _close_transport(writer: Any) -> None:
        if writer is None:
            return
        try:
            await writer.close()
        except Exception as e:
            LOGGER.debug("Ignoring error while closing gateway socket: %s", e)
