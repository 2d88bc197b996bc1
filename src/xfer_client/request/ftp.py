"""FTP request variants."""

from __future__ import annotations

from typing import Any

from ..config import FtpConfiguration
from ..plan import TransferPlan, Transmission, Verb
from .base import Request


class FtpRequest(Request):
    configuration_class = FtpConfiguration

    @property
    def configuration(self) -> FtpConfiguration:
        return self._configuration  # type: ignore[return-value]

    def passive(self, enabled: bool = True) -> "FtpRequest":
        self.configure(passive=enabled)
        return self

    def pre_commands(self, *commands: str) -> "FtpRequest":
        """Raw FTP commands sent before the transfer (e.g. ``CWD incoming``)."""
        self.configure(pre_commands=commands)
        return self

    def post_commands(self, *commands: str) -> "FtpRequest":
        self.configure(post_commands=commands)
        return self


class Get(FtpRequest):
    def prepare(self) -> TransferPlan:
        return self._build_plan(Verb.DEFAULT)


class Put(FtpRequest):
    default_method = "PUT"

    def __init__(self, url: str, **kwargs: Any) -> None:
        kwargs.setdefault("upload", True)
        super().__init__(url, **kwargs)

    def prepare(self) -> TransferPlan:
        return self._build_plan(Verb.DEFAULT, Transmission.UPLOAD)


__all__ = ["FtpRequest", "Get", "Put"]
