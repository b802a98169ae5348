"""
Gateway envelopes — the JSON payloads exchanged on the gateway socket.
"""

from enum import IntEnum
from typing import Any, Optional
from pydantic import BaseModel, Field


class Opcode(IntEnum):
    DISPATCH = 0
    HEARTBEAT = 1
    IDENTIFY = 2
    PRESENCE_UPDATE = 3
    VOICE_STATE_UPDATE = 4
    RESUME = 6
    RECONNECT = 7
    REQUEST_GUILD_MEMBERS = 8
    INVALID_SESSION = 9
    HELLO = 10
    HEARTBEAT_ACK = 11


class HelloData(BaseModel):
    heartbeat_interval: int


class HelloEnvelope(BaseModel):
    """First frame after connect. op == 10"""
    op: int
    d: HelloData


class IdentifyProperties(BaseModel):
    os: str = Field(alias="$os")
    browser: str = Field(alias="$browser")
    device: str = Field(alias="$device")

    model_config = {"populate_by_name": True}


class IdentifyData(BaseModel):
    token: str
    intents: int
    properties: IdentifyProperties


class IdentifyEnvelope(BaseModel):
    op: int = Opcode.IDENTIFY.value
    d: IdentifyData


class ResumeData(BaseModel):
    token: str
    session_id: str
    seq: int


class ResumeEnvelope(BaseModel):
    op: int = Opcode.RESUME.value
    d: ResumeData


class HeartbeatEnvelope(BaseModel):
    op: int = Opcode.HEARTBEAT.value
    d: None = None


class GatewayFrame(BaseModel):
    """Loose view of any inbound frame, used for session bookkeeping only."""
    op: int
    d: Optional[Any] = None
    s: Optional[int] = None
    t: Optional[str] = None
