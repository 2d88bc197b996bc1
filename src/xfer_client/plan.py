"""Execution plans handed to transfer handles, and what comes back."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

from .body import EMPTY_BODY, Body
from .config import Configuration


class Verb(str, Enum):
    """How the engine should select the request method."""

    GET = "get"
    POST = "post"
    HEAD = "head"
    CUSTOM = "custom"
    DEFAULT = "default"


class Transmission(str, Enum):
    """How the body travels to the engine."""

    NONE = "none"
    FIELDS = "fields"
    UPLOAD = "upload"


@dataclass(frozen=True)
class TransferPlan:
    url: str
    method: str
    verb: Verb
    configuration: Configuration
    headers: tuple[str, ...] = ()
    body: Body = EMPTY_BODY
    transmission: Transmission = Transmission.NONE

    @property
    def scheme(self) -> str:
        return urlsplit(self.url).scheme.lower()


@dataclass(frozen=True)
class ExecutionInfos:
    """Metadata captured right after the engine returned."""

    status: int = 0
    effective_url: str = ""
    total_time: float = 0.0
    header_size: int = 0
    headers_out: str = ""
    content_type: str | None = None


@dataclass(frozen=True)
class RawOutcome:
    content: bytes
    infos: ExecutionInfos


__all__ = ["ExecutionInfos", "RawOutcome", "TransferPlan", "Transmission", "Verb"]
