"""Helpers turning raw engine output into status, headers and body."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import ParseError

_BLOCK_SEPARATOR = re.compile(r"\r?\n\r?\n")
_CHARSET = re.compile(r"charset\s*=\s*\"?([\w.:-]+)\"?", re.IGNORECASE)


@dataclass(frozen=True)
class StatusLine:
    version: str
    status: int
    reason: str


def split_raw_response(content: bytes, header_size: int) -> tuple[bytes, bytes]:
    """Cut the engine output at the declared header length."""
    if header_size < 0:
        raise ParseError(f"Invalid header size {header_size}", context=header_size)
    if header_size > len(content):
        raise ParseError(
            f"Header size {header_size} exceeds response length {len(content)}",
            context=header_size,
        )
    return content[:header_size], content[header_size:]


def last_header_block(raw_headers: bytes) -> list[str]:
    """Return the lines of the final header block.

    Redirects and interim ``1xx`` answers make the engine emit several
    blocks back to back; only the last one describes the body.
    """
    text = raw_headers.decode("iso-8859-1")
    blocks = [block for block in _BLOCK_SEPARATOR.split(text) if block.strip()]
    if not blocks:
        return []
    return [line for line in blocks[-1].splitlines() if line.strip()]


def parse_status_line(line: str) -> StatusLine | None:
    """Parse ``HTTP/1.1 200 OK``; returns ``None`` for non HTTP blocks."""
    if not line.startswith("HTTP/"):
        return None
    parts = line.split(None, 2)
    if len(parts) < 2 or not parts[1].isdigit():
        raise ParseError(f"Malformed status line: {line!r}", context=line)
    reason = parts[2].strip() if len(parts) > 2 else ""
    return StatusLine(version=parts[0][len("HTTP/"):], status=int(parts[1]), reason=reason)


def parse_header_block(raw_headers: bytes) -> tuple[StatusLine | None, list[str]]:
    lines = last_header_block(raw_headers)
    if not lines:
        return None, []
    status_line = parse_status_line(lines[0])
    if status_line is not None:
        lines = lines[1:]
    return status_line, lines


def charset_from_content_type(content_type: str | None) -> str | None:
    if not content_type:
        return None
    match = _CHARSET.search(content_type)
    return match.group(1) if match else None


__all__ = [
    "StatusLine",
    "charset_from_content_type",
    "last_header_block",
    "parse_header_block",
    "parse_status_line",
    "split_raw_response",
]
