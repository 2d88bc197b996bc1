"""Immutable response objects built from raw transfer outcomes."""

from __future__ import annotations

import codecs
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .headers import HeaderCollection
from .parser import charset_from_content_type, parse_header_block, split_raw_response
from .plan import ExecutionInfos, RawOutcome

if TYPE_CHECKING:  # pragma: no cover
    from .request import Request


@dataclass(frozen=True)
class Response:
    status: int
    body: bytes
    infos: ExecutionInfos
    header_lines: tuple[str, ...] = ()
    reason: str = ""
    version: str = ""
    request: "Request | None" = field(default=None, repr=False, compare=False)

    @classmethod
    def from_outcome(cls, outcome: RawOutcome, request: "Request | None" = None) -> "Response":
        raw_headers, body = split_raw_response(outcome.content, outcome.infos.header_size)
        status_line, lines = parse_header_block(raw_headers)
        if status_line is not None:
            status, reason, version = status_line.status, status_line.reason, status_line.version
        else:
            status, reason, version = outcome.infos.status, "", ""
        return cls(
            status=status,
            body=body,
            infos=outcome.infos,
            header_lines=tuple(lines),
            reason=reason,
            version=version,
            request=request,
        )

    @property
    def headers(self) -> HeaderCollection:
        return HeaderCollection.parse("\n".join(self.header_lines))

    @property
    def is_success(self) -> bool:
        if self.version:
            return 200 <= self.status < 300
        return 100 <= self.status < 400

    @property
    def text(self) -> str:
        charset = charset_from_content_type(self.get_header("content-type")) or "utf-8"
        try:
            codecs.lookup(charset)
        except LookupError:
            charset = "utf-8"
        return self.body.decode(charset, errors="replace")

    def get_header(self, name: str) -> str | None:
        return self.headers.get(name)

    def has_header(self, name: str) -> bool:
        return self.headers.has(name)

    def get_body(self) -> bytes:
        return self.body

    def get_request(self) -> "Request | None":
        return self.request


__all__ = ["Response"]
