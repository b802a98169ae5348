"""
Envelope construction and parsing for the gateway socket.
"""

import json
from typing import Any, Optional, Union

from pydantic import ValidationError

from cordlink.errors import InvalidInterval, UnexpectedFirstFrame
from cordlink.models.envelope import (
    GatewayFrame,
    HeartbeatEnvelope,
    HelloEnvelope,
    IdentifyData,
    IdentifyEnvelope,
    IdentifyProperties,
    Opcode,
    ResumeData,
    ResumeEnvelope,
)

HEARTBEAT_FRAME = HeartbeatEnvelope().model_dump_json()


def build_identify(token: str, intents: int, properties: dict[str, str]) -> str:
    """Build the op 2 Identify frame. ``properties`` holds os/browser/device."""
    envelope = IdentifyEnvelope(
        d=IdentifyData(
            token=token,
            intents=intents,
            properties=IdentifyProperties(**properties),
        ),
    )
    return envelope.model_dump_json(by_alias=True)


def build_resume(token: str, session_id: str, seq: int) -> str:
    return ResumeEnvelope(d=ResumeData(token=token, session_id=session_id, seq=seq)).model_dump_json()


def parse_hello(frame: Union[str, bytes, None]) -> int:
    """Parse the first gateway frame and return the heartbeat interval in ms.

    Raises UnexpectedFirstFrame when the frame is absent, binary, not JSON or
    not an op 10 Hello, and InvalidInterval when the interval is not a
    positive integer.
    """
    if frame is None:
        raise UnexpectedFirstFrame("Connection closed before Hello")
    if not isinstance(frame, str):
        raise UnexpectedFirstFrame("Expected a text Hello frame, got binary")
    try:
        raw = json.loads(frame)
    except json.JSONDecodeError as e:
        raise UnexpectedFirstFrame(f"Hello frame is not JSON: {e}")
    if not isinstance(raw, dict) or raw.get("op") != Opcode.HELLO:
        op = raw.get("op") if isinstance(raw, dict) else None
        raise UnexpectedFirstFrame(f"Expected Hello (op 10), got op {op!r}", details={"frame": frame[:200]})

    data = raw.get("d")
    interval = data.get("heartbeat_interval") if isinstance(data, dict) else None
    # bool is an int subclass; reject it along with floats and strings
    if type(interval) is not int or interval <= 0:
        raise InvalidInterval(f"Invalid heartbeat interval: {interval!r}")
    try:
        hello = HelloEnvelope.model_validate(raw)
    except ValidationError as e:
        raise UnexpectedFirstFrame(f"Malformed Hello: {e}")
    return hello.d.heartbeat_interval


def peek_frame(frame: str) -> Optional[GatewayFrame]:
    """Parse an inbound frame for bookkeeping. Returns None if invalid."""
    try:
        return GatewayFrame.model_validate_json(frame)
    except ValidationError:
        return None


def frame_data(frame: GatewayFrame) -> dict[str, Any]:
    return frame.d if isinstance(frame.d, dict) else {}
