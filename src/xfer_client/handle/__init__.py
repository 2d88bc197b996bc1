"""Transfer handles wrapping the native engines."""

from .base import HandleState, TransferHandle
from .curl import CurlHandle
from .http import HttpxHandle

__all__ = [
    "CurlHandle",
    "HandleState",
    "HttpxHandle",
    "TransferHandle",
]
