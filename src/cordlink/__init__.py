"""
cordlink — Discord gateway and REST client for Python.

Keeps a gateway session alive with a background heartbeat writer while the
foreground reads and dispatches inbound frames.
"""

from cordlink.client import Cordlink
from cordlink.cache import ResponseCache
from cordlink.rest import RestAPI
from cordlink.gateway.client import CloseReason, CloseStatus, GatewayClient, GatewayState, ReconnectPolicy
from cordlink.gateway.channel import Abort, OutboundHandle, SendMessage
from cordlink.gateway.negotiator import ResumeState, negotiate
from cordlink.gateway.threaded import ThreadedGateway
from cordlink.errors import (
    CordlinkError,
    ConnectError,
    NegotiationError,
    UnexpectedFirstFrame,
    InvalidInterval,
    SendError,
    RecvError,
    GatewayStateError,
    HTTPError,
)
from cordlink.models.envelope import Opcode

__version__ = "0.1.0"
__all__ = [
    "Cordlink",
    "ResponseCache",
    "RestAPI",
    "GatewayClient",
    "GatewayState",
    "CloseReason",
    "CloseStatus",
    "ReconnectPolicy",
    "ThreadedGateway",
    "OutboundHandle",
    "SendMessage",
    "Abort",
    "ResumeState",
    "negotiate",
    "CordlinkError",
    "ConnectError",
    "NegotiationError",
    "UnexpectedFirstFrame",
    "InvalidInterval",
    "SendError",
    "RecvError",
    "GatewayStateError",
    "HTTPError",
    "Opcode",
]
