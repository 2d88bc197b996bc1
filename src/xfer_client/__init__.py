"""Public surface for the xfer_client package."""

from .body import BytesBody, EmptyBody, StreamBody
from .client import ClientOptions, TransferClient
from .config import Configuration, FtpConfiguration, HttpConfiguration, SshConfiguration
from .errors import (
    ConnectionRefusedError,
    CurlError,
    HeaderFormatError,
    HostUnreachableError,
    InvalidArgumentError,
    ParseError,
    ResetUnsupportedWarning,
    RuntimeStateError,
    TlsVerifyError,
    TransferError,
    TransferTimeoutError,
    UnknownProtocolError,
    UnsupportedProtocolError,
    XferError,
)
from .events import ErrorEvent, EventDispatcher, RequestEvent, ResponseEvent
from .handle import CurlHandle, HandleState, HttpxHandle, TransferHandle
from .headers import HeaderCollection
from .plan import ExecutionInfos, RawOutcome, TransferPlan, Transmission, Verb
from .request import FtpRequest, HttpRequest, Request, SshRequest
from .response import Response
from .types import SendResult
from .version import __version__

__all__ = [
    "__version__",
    "BytesBody",
    "ClientOptions",
    "Configuration",
    "ConnectionRefusedError",
    "CurlError",
    "CurlHandle",
    "EmptyBody",
    "ErrorEvent",
    "EventDispatcher",
    "ExecutionInfos",
    "FtpConfiguration",
    "FtpRequest",
    "HandleState",
    "HeaderCollection",
    "HeaderFormatError",
    "HostUnreachableError",
    "HttpConfiguration",
    "HttpRequest",
    "HttpxHandle",
    "InvalidArgumentError",
    "ParseError",
    "RawOutcome",
    "Request",
    "RequestEvent",
    "ResetUnsupportedWarning",
    "Response",
    "ResponseEvent",
    "RuntimeStateError",
    "SendResult",
    "SshConfiguration",
    "SshRequest",
    "StreamBody",
    "TlsVerifyError",
    "TransferClient",
    "TransferError",
    "TransferHandle",
    "TransferPlan",
    "TransferTimeoutError",
    "Transmission",
    "UnknownProtocolError",
    "UnsupportedProtocolError",
    "Verb",
    "XferError",
]
