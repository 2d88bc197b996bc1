"""Per-protocol configuration variants."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterable

from .body import EMPTY_BODY, Body, coerce_body
from .errors import InvalidArgumentError


@dataclass(frozen=True)
class Configuration:
    """Options shared by every protocol.

    ``None`` means "leave the engine default alone"; ``False`` and ``0`` are
    real values and are always forwarded.
    """

    url: str
    method: str = "GET"
    body: Body = EMPTY_BODY
    upload: bool = False
    timeout: float | None = None
    connect_timeout: float | None = None
    user_agent: str | None = None

    protocol: ClassVar[str] = "generic"
    recognized_methods: ClassVar[frozenset[str]] = frozenset({"GET", "PUT"})
    payload_methods: ClassVar[frozenset[str]] = frozenset({"PUT"})

    def __post_init__(self) -> None:
        if not isinstance(self.url, str):
            raise InvalidArgumentError(
                f"URL must be a string, got {type(self.url).__name__}", context=self.url
            )
        if not self.url.strip():
            raise InvalidArgumentError("URL cannot be empty", context=self.url)
        if not isinstance(self.method, str) or not self.method.strip():
            raise InvalidArgumentError("Method must be a non-empty string", context=self.method)
        object.__setattr__(self, "url", self.url.strip())
        object.__setattr__(self, "method", self.method.strip().upper())
        object.__setattr__(self, "body", coerce_body(self.body))
        for name in ("timeout", "connect_timeout"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise InvalidArgumentError(f"{name} cannot be negative", context=value)

    @property
    def is_custom_method(self) -> bool:
        return self.method not in self.recognized_methods

    def carries_payload(self) -> bool:
        if self.upload:
            return True
        return self.method in self.payload_methods or self.is_custom_method

    def has_body(self) -> bool:
        return bool(self.body) and self.carries_payload()

    def commands_request(self) -> tuple[str, ...]:
        return ()

    def commands_post(self) -> tuple[str, ...]:
        return ()

    def replace(self, **changes: Any) -> "Configuration":
        """Return a copy with ``changes`` applied and validated again."""
        known = {f.name for f in dataclasses.fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise InvalidArgumentError(
                f"Unknown {self.protocol} option(s): {', '.join(unknown)}", context=unknown
            )
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class HttpConfiguration(Configuration):
    allow_redirects: bool = True
    max_redirects: int | None = None
    referer_on_redirect: bool | None = None
    accept_encoding: str | None = None
    verify_tls: bool = True

    protocol: ClassVar[str] = "http"
    recognized_methods: ClassVar[frozenset[str]] = frozenset(
        {"GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "TRACE", "CONNECT"}
    )
    payload_methods: ClassVar[frozenset[str]] = frozenset({"POST", "PUT", "DELETE", "PATCH"})

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.max_redirects is not None and self.max_redirects < 0:
            raise InvalidArgumentError("max_redirects cannot be negative", context=self.max_redirects)


@dataclass(frozen=True)
class FtpConfiguration(Configuration):
    passive: bool = True
    pre_commands: tuple[str, ...] = field(default_factory=tuple)
    post_commands: tuple[str, ...] = field(default_factory=tuple)

    protocol: ClassVar[str] = "ftp"

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "pre_commands", _command_tuple(self.pre_commands))
        object.__setattr__(self, "post_commands", _command_tuple(self.post_commands))

    def commands_request(self) -> tuple[str, ...]:
        return self.pre_commands

    def commands_post(self) -> tuple[str, ...]:
        return self.post_commands


@dataclass(frozen=True)
class SshConfiguration(Configuration):
    post_commands: tuple[str, ...] = field(default_factory=tuple)

    protocol: ClassVar[str] = "ssh"

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "post_commands", _command_tuple(self.post_commands))

    def commands_post(self) -> tuple[str, ...]:
        return self.post_commands


def _command_tuple(commands: Iterable[str] | str) -> tuple[str, ...]:
    if isinstance(commands, str):
        commands = (commands,)
    result = tuple(commands)
    for command in result:
        if not isinstance(command, str) or not command.strip():
            raise InvalidArgumentError("Commands must be non-empty strings", context=command)
    return result


__all__ = ["Configuration", "FtpConfiguration", "HttpConfiguration", "SshConfiguration"]
