"""Logging wrapper shared by the client, requests and handles."""

from __future__ import annotations

import logging
from typing import Any, Literal

from .errors import InvalidArgumentError

LogLevel = Literal["trace", "debug", "info", "warn", "error"]

ROOT_LOGGER_NAME = "xfer_client"

TRACE = 5
logging.addLevelName(TRACE, "TRACE")
logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())

# client level name -> (stdlib level, method looked up on duck-typed loggers)
_LEVELS: dict[str, tuple[int, str]] = {
    "trace": (TRACE, "trace"),
    "debug": (logging.DEBUG, "debug"),
    "info": (logging.INFO, "info"),
    "warn": (logging.WARNING, "warning"),
    "error": (logging.ERROR, "error"),
}


class BoundLogger:
    """Filters records by the client's log level before handing them on.

    The target is a ``logging.Logger``, a logger name, or any object with a
    ``log`` method or per-level methods (``debug``, ``warning``...).
    """

    def __init__(self, logger: Any | None = None, *, level: LogLevel = "info") -> None:
        if logger is None or isinstance(logger, str):
            logger = logging.getLogger(logger or ROOT_LOGGER_NAME)
        self._target = logger
        self._level = _check_level(level)
        self._threshold = _LEVELS[self._level][0]

    @property
    def level(self) -> LogLevel:
        return self._level

    @property
    def name(self) -> str:
        return getattr(self._target, "name", type(self._target).__name__)

    def is_enabled(self, level: LogLevel) -> bool:
        return _LEVELS[level][0] >= self._threshold

    def trace(self, msg: str, *args: Any) -> None:
        self._emit("trace", msg, args)

    def debug(self, msg: str, *args: Any) -> None:
        self._emit("debug", msg, args)

    def info(self, msg: str, *args: Any) -> None:
        self._emit("info", msg, args)

    def warn(self, msg: str, *args: Any) -> None:
        self._emit("warn", msg, args)

    def error(self, msg: str, *args: Any) -> None:
        self._emit("error", msg, args)

    def child(self, name: str) -> "BoundLogger":
        """Logger for a sub-component, e.g. ``xfer_client.curl``."""
        target = self._target
        if isinstance(target, logging.Logger):
            target = target.getChild(name)
        return BoundLogger(target, level=self._level)

    def _emit(self, level: str, msg: str, args: tuple[Any, ...]) -> None:
        stdlib_level, method = _LEVELS[level]
        if stdlib_level < self._threshold:
            return
        try:
            if hasattr(self._target, "log"):
                self._target.log(stdlib_level, msg, *args)
            else:
                handler = getattr(self._target, method, None) or getattr(self._target, level, None)
                if handler is not None:
                    handler(msg, *args)
        except Exception:
            # Logging must never break a transfer.
            pass


def _check_level(level: str) -> LogLevel:
    if level not in _LEVELS:
        raise InvalidArgumentError(
            f"Unknown log level {level!r}, expected one of {', '.join(_LEVELS)}", context=level
        )
    return level  # type: ignore[return-value]


def create_logger(*, logger: Any | None = None, level: LogLevel = "info") -> BoundLogger:
    if isinstance(logger, BoundLogger):
        return logger
    return BoundLogger(logger, level=level)


__all__ = ["BoundLogger", "LogLevel", "ROOT_LOGGER_NAME", "TRACE", "create_logger"]
