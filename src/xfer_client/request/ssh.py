"""SFTP/SCP request variants."""

from __future__ import annotations

from typing import Any

from ..config import SshConfiguration
from ..plan import TransferPlan, Transmission, Verb
from .base import Request


class SshRequest(Request):
    configuration_class = SshConfiguration

    @property
    def configuration(self) -> SshConfiguration:
        return self._configuration  # type: ignore[return-value]

    def post_commands(self, *commands: str) -> "SshRequest":
        """SFTP commands run once the transfer finished (e.g. ``rename a b``)."""
        self.configure(post_commands=commands)
        return self


class Get(SshRequest):
    def prepare(self) -> TransferPlan:
        return self._build_plan(Verb.DEFAULT)


class Put(SshRequest):
    default_method = "PUT"

    def __init__(self, url: str, **kwargs: Any) -> None:
        kwargs.setdefault("upload", True)
        super().__init__(url, **kwargs)

    def prepare(self) -> TransferPlan:
        return self._build_plan(Verb.DEFAULT, Transmission.UPLOAD)


__all__ = ["Get", "Put", "SshRequest"]
