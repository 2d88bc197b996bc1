"""Shared typing helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import XferError

if TYPE_CHECKING:  # pragma: no cover
    from .response import Response


@dataclass
class SendResult:
    ok: bool
    response: "Response | None" = None
    error: XferError | None = None


__all__ = ["SendResult"]
