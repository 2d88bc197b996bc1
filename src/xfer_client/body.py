"""Request body variants."""

from __future__ import annotations

import io
import os
from dataclasses import dataclass
from typing import Any, BinaryIO, Union

from .errors import InvalidArgumentError


@dataclass(frozen=True)
class EmptyBody:
    kind = "empty"

    @property
    def length(self) -> int:
        return 0

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class BytesBody:
    data: bytes
    kind = "bytes"

    @property
    def length(self) -> int:
        return len(self.data)

    def __bool__(self) -> bool:
        return bool(self.data)


@dataclass(frozen=True)
class StreamBody:
    """A local, seekable binary stream together with its declared length."""

    stream: BinaryIO
    length: int
    kind = "stream"

    def rewind(self) -> None:
        self.stream.seek(0, os.SEEK_SET)

    def read(self, size: int = -1) -> bytes:
        return self.stream.read(size)

    def __bool__(self) -> bool:
        return self.length > 0


Body = Union[EmptyBody, BytesBody, StreamBody]

EMPTY_BODY = EmptyBody()


def coerce_body(value: Any) -> Body:
    """Turn a caller supplied value into a body variant.

    Streams must be local: readable, seekable and opened in binary mode.
    The stream is rewound to offset 0 as a side effect.
    """
    if value is None:
        return EMPTY_BODY
    if isinstance(value, (EmptyBody, BytesBody, StreamBody)):
        return value
    if isinstance(value, str):
        return BytesBody(value.encode("utf-8")) if value else EMPTY_BODY
    if isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
        return BytesBody(data) if data else EMPTY_BODY
    if isinstance(value, io.TextIOBase):
        raise InvalidArgumentError("Body stream must be opened in binary mode", context=value)
    if not (hasattr(value, "read") and hasattr(value, "seek")):
        raise InvalidArgumentError(
            f"Body must be a string, bytes or a stream, got {type(value).__name__}",
            context=value,
        )
    if getattr(value, "closed", False):
        raise InvalidArgumentError("Body stream is closed", context=value)
    if not _is_local_stream(value):
        raise InvalidArgumentError("Body must be a local stream", context=value)

    value.seek(0, os.SEEK_END)
    length = value.tell()
    value.seek(0, os.SEEK_SET)
    return StreamBody(value, length)


def _is_local_stream(stream: Any) -> bool:
    seekable = getattr(stream, "seekable", None)
    if seekable is None:
        return False
    try:
        return bool(seekable())
    except (OSError, ValueError):
        return False


__all__ = ["Body", "BytesBody", "EMPTY_BODY", "EmptyBody", "StreamBody", "coerce_body"]
