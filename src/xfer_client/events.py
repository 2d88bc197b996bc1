"""Typed lifecycle notifications delivered synchronously to listeners."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Generic, TypeVar

from .errors import XferError

if TYPE_CHECKING:  # pragma: no cover
    from .request import Request
    from .response import Response


@dataclass(frozen=True)
class RequestEvent:
    """Emitted before a transfer starts; a listener raising aborts the send."""

    request: "Request"


@dataclass(frozen=True)
class ResponseEvent:
    response: "Response"

    @property
    def request(self) -> "Request | None":
        return self.response.request


@dataclass(frozen=True)
class ErrorEvent:
    error: XferError
    request: "Request"


E = TypeVar("E")

RequestListener = Callable[[RequestEvent], None]
ResponseListener = Callable[[ResponseEvent], None]
ErrorListener = Callable[[ErrorEvent], None]


class _ListenerList(Generic[E]):
    def __init__(self) -> None:
        self._listeners: list[Callable[[E], None]] = []

    def add(self, listener: Callable[[E], None]) -> Callable[[], None]:
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got {type(listener).__name__}")
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, event: E) -> None:
        for listener in list(self._listeners):
            listener(event)

    def __len__(self) -> int:
        return len(self._listeners)


class EventDispatcher:
    """Registers listeners per notification kind and calls them in order."""

    def __init__(self) -> None:
        self._request = _ListenerList[RequestEvent]()
        self._response = _ListenerList[ResponseEvent]()
        self._error = _ListenerList[ErrorEvent]()

    def on_request(self, listener: RequestListener) -> Callable[[], None]:
        return self._request.add(listener)

    def on_response(self, listener: ResponseListener) -> Callable[[], None]:
        return self._response.add(listener)

    def on_error(self, listener: ErrorListener) -> Callable[[], None]:
        return self._error.add(listener)

    def dispatch_request(self, event: RequestEvent) -> None:
        self._request.dispatch(event)

    def dispatch_response(self, event: ResponseEvent) -> None:
        self._response.dispatch(event)

    def dispatch_error(self, event: ErrorEvent) -> None:
        self._error.dispatch(event)

    def listener_count(self) -> dict[str, int]:
        return {
            "request": len(self._request),
            "response": len(self._response),
            "error": len(self._error),
        }


__all__ = [
    "ErrorEvent",
    "ErrorListener",
    "EventDispatcher",
    "RequestEvent",
    "RequestListener",
    "ResponseEvent",
    "ResponseListener",
]
