"""
cordlink error types.

Handshake failures surface synchronously from ``GatewayClient.start()``;
steady-state failures end the read loop and are reported in its
``CloseStatus``.
"""

from typing import Any, Optional


class CordlinkError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ConnectError(CordlinkError):
    """DNS, TLS or HTTP upgrade failure while opening the gateway socket."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("connect_error", message, details)


class NegotiationError(CordlinkError):
    """The Hello/Identify handshake could not be completed."""

    def __init__(self, message: str, code: str = "negotiation_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class UnexpectedFirstFrame(NegotiationError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code="unexpected_first_frame", details=details)


class InvalidInterval(NegotiationError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code="invalid_interval", details=details)


class SendError(CordlinkError):
    def __init__(self, message: str):
        super().__init__("send_error", message)


class RecvError(CordlinkError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("recv_error", message, details)


class GatewayStateError(CordlinkError):
    def __init__(self, message: str):
        super().__init__("gateway_state_error", message)


class HTTPError(CordlinkError):
    def __init__(self, status_code: int, message: str):
        super().__init__("http_error", message, {"status_code": status_code})
        self.status_code = status_code
