"""High-level client: scheme dispatch, execution and notifications."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping
from urllib.parse import urlsplit

from .errors import InvalidArgumentError, UnknownProtocolError, XferError
from .events import (
    ErrorEvent,
    ErrorListener,
    EventDispatcher,
    RequestEvent,
    RequestListener,
    ResponseEvent,
    ResponseListener,
)
from .handle import CurlHandle, TransferHandle
from .headers import HeaderCollection, HeaderItem
from .logger import LogLevel, create_logger
from .request import Request, ftp, http, ssh
from .response import Response
from .types import SendResult

HandleFactory = Callable[[], TransferHandle]
RequestFactory = Callable[..., Request]

_ABSOLUTE_URL = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


@dataclass(frozen=True)
class ProtocolRoute:
    """Request classes for one scheme, keyed by upper-case method.

    ``fallback`` receives ``(method, url, **kwargs)`` for verbs missing from
    ``methods``; without it such verbs are rejected.
    """

    methods: Mapping[str, type[Request]]
    fallback: RequestFactory | None = None

    def build(self, method: str, url: str, **kwargs: Any) -> Request | None:
        request_cls = self.methods.get(method)
        if request_cls is not None:
            return request_cls(url, **kwargs)
        if self.fallback is not None:
            return self.fallback(method, url, **kwargs)
        return None


_HTTP_ROUTE = ProtocolRoute(
    methods={
        "GET": http.Get,
        "HEAD": http.Head,
        "POST": http.Post,
        "PUT": http.Put,
        "DELETE": http.Delete,
    },
    fallback=http.Custom,
)
_FTP_ROUTE = ProtocolRoute(methods={"GET": ftp.Get, "PUT": ftp.Put})
_SSH_ROUTE = ProtocolRoute(methods={"GET": ssh.Get, "PUT": ssh.Put})

DEFAULT_ROUTES: dict[str, ProtocolRoute] = {
    "http": _HTTP_ROUTE,
    "https": _HTTP_ROUTE,
    "ftp": _FTP_ROUTE,
    "ftps": _FTP_ROUTE,
    "sftp": _SSH_ROUTE,
    "scp": _SSH_ROUTE,
    "ssh": _SSH_ROUTE,
}


@dataclass
class ClientOptions:
    base_url: str = ""
    handle_factory: HandleFactory | None = None
    dispatcher: EventDispatcher | None = None
    default_headers: Mapping[str, Any] | Iterable[HeaderItem] | None = None
    logger: object | None = None
    log_level: LogLevel = "info"
    routes: dict[str, ProtocolRoute] = field(default_factory=lambda: dict(DEFAULT_ROUTES))


class TransferClient:
    """Primary entry point: builds requests from URLs and sends them."""

    def __init__(
        self,
        base_url: str = "",
        *,
        handle_factory: HandleFactory | None = None,
        dispatcher: EventDispatcher | None = None,
        default_headers: Mapping[str, Any] | Iterable[HeaderItem] | None = None,
        logger: object | None = None,
        log_level: LogLevel = "info",
    ) -> None:
        options = ClientOptions(
            base_url=base_url,
            handle_factory=handle_factory,
            dispatcher=dispatcher,
            default_headers=default_headers,
            logger=logger,
            log_level=log_level,
        )
        if not isinstance(options.base_url, str):
            raise InvalidArgumentError(
                f"Base URL must be a string, got {type(options.base_url).__name__}",
                context=options.base_url,
            )
        self.base_url = options.base_url.strip().rstrip("/")
        self._logger = create_logger(logger=options.logger, level=options.log_level)
        self._logger.info("Initializing TransferClient for %s", self.base_url or "<no base url>")
        self._handle_factory = options.handle_factory or self._default_handle
        self._dispatcher = options.dispatcher or EventDispatcher()
        self._default_headers = HeaderCollection(options.default_headers)
        self._routes = options.routes

    @property
    def dispatcher(self) -> EventDispatcher:
        return self._dispatcher

    def set_dispatcher(self, dispatcher: EventDispatcher) -> "TransferClient":
        self._dispatcher = dispatcher
        return self

    def on_request(self, listener: RequestListener) -> Callable[[], None]:
        return self._dispatcher.on_request(listener)

    def on_response(self, listener: ResponseListener) -> Callable[[], None]:
        return self._dispatcher.on_response(listener)

    def on_error(self, listener: ErrorListener) -> Callable[[], None]:
        return self._dispatcher.on_error(listener)

    def register_protocol(
        self,
        scheme: str,
        methods: Mapping[str, type[Request]],
        fallback: RequestFactory | None = None,
    ) -> "TransferClient":
        key = scheme.strip().lower()
        if not key:
            raise InvalidArgumentError("Scheme cannot be empty", context=scheme)
        self._routes[key] = ProtocolRoute(
            methods={name.upper(): cls for name, cls in methods.items()},
            fallback=fallback,
        )
        return self

    def create_request(self, method: str = "GET", url: str = "", **options: Any) -> Request:
        if not isinstance(method, str) or not method.strip():
            raise InvalidArgumentError("Method must be a non-empty string", context=method)
        if not isinstance(url, str):
            raise InvalidArgumentError(f"URL must be a string, got {type(url).__name__}", context=url)

        full_url = self._resolve_url(url)
        if not full_url:
            raise InvalidArgumentError("URL cannot be empty", context=url)

        scheme = urlsplit(full_url).scheme.lower()
        route = self._routes.get(scheme)
        if route is None:
            raise UnknownProtocolError(
                f"No request variant registered for scheme {scheme or '<none>'!r}",
                context=full_url,
            )

        verb = method.strip().upper()
        headers = self._default_headers.copy()
        extra_headers = options.pop("headers", None)
        if extra_headers:
            headers.add_all(extra_headers)
        request = route.build(
            verb,
            full_url,
            headers=list(headers.items()),
            client=self,
            logger=self._logger,
            **options,
        )
        if request is None:
            raise InvalidArgumentError(f"{scheme} requests do not support {verb}", context=verb)
        self._logger.debug("Created %r", request)
        return request

    def get(self, url: str = "", **options: Any) -> Request:
        return self.create_request("GET", url, **options)

    def head(self, url: str = "", **options: Any) -> Request:
        return self.create_request("HEAD", url, **options)

    def post(self, url: str = "", **options: Any) -> Request:
        return self.create_request("POST", url, **options)

    def put(self, url: str = "", **options: Any) -> Request:
        return self.create_request("PUT", url, **options)

    def delete(self, url: str = "", **options: Any) -> Request:
        return self.create_request("DELETE", url, **options)

    def send(self, request: Request) -> Response:
        self._dispatcher.dispatch_request(RequestEvent(request))
        self._logger.debug("Sending %s %s", request.method, request.url)
        try:
            with self._handle_factory() as handle:
                response = request.execute(handle)
        except XferError as exc:
            self._logger.warn("%s %s failed: %s", request.method, request.url, exc)
            self._dispatcher.dispatch_error(ErrorEvent(exc, request))
            raise
        self._logger.debug("%s %s -> %s", request.method, request.url, response.status)
        self._dispatcher.dispatch_response(ResponseEvent(response))
        return response

    def send_safe(self, request: Request) -> SendResult:
        try:
            return SendResult(ok=True, response=self.send(request))
        except XferError as exc:
            return SendResult(ok=False, error=exc)

    def _default_handle(self) -> TransferHandle:
        return CurlHandle(logger=self._logger)

    def _resolve_url(self, url: str) -> str:
        url = url.strip()
        if not url:
            return self.base_url
        if _ABSOLUTE_URL.match(url) or not self.base_url:
            return url
        return f"{self.base_url}/{url.lstrip('/')}"


__all__ = ["ClientOptions", "DEFAULT_ROUTES", "ProtocolRoute", "TransferClient"]
