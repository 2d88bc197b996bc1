"""Custom exceptions raised by the transfer client."""

from __future__ import annotations

from typing import Any

# libcurl error codes used by the classification table.
CURLE_UNSUPPORTED_PROTOCOL = 1
CURLE_COULDNT_RESOLVE_PROXY = 5
CURLE_COULDNT_RESOLVE_HOST = 6
CURLE_COULDNT_CONNECT = 7
CURLE_OPERATION_TIMEDOUT = 28
CURLE_SSL_CONNECT_ERROR = 35
CURLE_TOO_MANY_REDIRECTS = 47
CURLE_PEER_FAILED_VERIFICATION = 60
CURLE_SEND_ERROR = 55
CURLE_RECV_ERROR = 56

_TLS_CODES = frozenset({35, 51, 53, 54, 58, 59, 60, 64, 66, 77, 80, 82, 83, 90, 91})


class XferError(Exception):
    """Base error for all client failures."""

    def __init__(self, message: str, *, context: Any | None = None) -> None:
        super().__init__(message)
        self.context = context


class InvalidArgumentError(XferError, ValueError):
    """Raised when malformed input is given at construction time."""


class HeaderFormatError(InvalidArgumentError):
    """Raised when a literal header line cannot be split into name and value."""


class RuntimeStateError(XferError):
    """Raised when an operation is attempted in the wrong lifecycle state."""


class UnknownProtocolError(XferError):
    """Raised when a URL scheme has no registered request variant."""


class ParseError(XferError):
    """Raised when a raw transfer outcome cannot be parsed."""


class TransferError(XferError):
    """Base class for classified failures reported by the transfer engine."""

    def __init__(self, message: str, *, code: int, context: Any | None = None) -> None:
        super().__init__(f"[{code}] {message}", context=context)
        self.code = code
        self.native_message = message


class TransferTimeoutError(TransferError):
    """Raised when the engine gives up after its configured timeout."""


class ConnectionRefusedError(TransferError):
    """Raised when nothing listens on the remote port."""


class HostUnreachableError(TransferError):
    """Raised when the host (or proxy) name cannot be resolved or reached."""


class TlsVerifyError(TransferError):
    """Raised for TLS handshake and certificate verification failures."""


class UnsupportedProtocolError(TransferError, UnknownProtocolError):
    """Raised when the engine itself does not speak the requested protocol."""


class CurlError(TransferError):
    """Raised for every other engine failure."""


class ResetUnsupportedWarning(UserWarning):
    """Emitted when a handle cannot reset its native resource."""


def classify_transfer_error(code: int, message: str, *, context: Any | None = None) -> TransferError:
    """Map a native error code and message onto the typed error family."""
    if code == CURLE_OPERATION_TIMEDOUT:
        error_cls: type[TransferError] = TransferTimeoutError
    elif code == CURLE_COULDNT_CONNECT:
        error_cls = ConnectionRefusedError
    elif code in {CURLE_COULDNT_RESOLVE_HOST, CURLE_COULDNT_RESOLVE_PROXY}:
        error_cls = HostUnreachableError
    elif code in _TLS_CODES:
        error_cls = TlsVerifyError
    elif code == CURLE_UNSUPPORTED_PROTOCOL:
        error_cls = UnsupportedProtocolError
    else:
        error_cls = CurlError
    return error_cls(message or "Transfer failed", code=code, context=context)


__all__ = [
    "ConnectionRefusedError",
    "CurlError",
    "HeaderFormatError",
    "HostUnreachableError",
    "InvalidArgumentError",
    "ParseError",
    "ResetUnsupportedWarning",
    "RuntimeStateError",
    "TlsVerifyError",
    "TransferError",
    "TransferTimeoutError",
    "UnknownProtocolError",
    "UnsupportedProtocolError",
    "XferError",
    "classify_transfer_error",
]
