"""Request variants grouped by protocol (``http.Get``, ``ftp.Put``...)."""

from . import ftp, http, ssh
from .base import Request
from .ftp import FtpRequest
from .http import HttpRequest
from .ssh import SshRequest

__all__ = [
    "FtpRequest",
    "HttpRequest",
    "Request",
    "SshRequest",
    "ftp",
    "http",
    "ssh",
]
