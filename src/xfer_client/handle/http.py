"""HTTP handle built on top of httpx."""

from __future__ import annotations

import time
from typing import Any, Hashable, Iterator, Mapping

import httpx

from ..body import BytesBody, StreamBody
from ..config import HttpConfiguration
from ..errors import (
    CURLE_COULDNT_CONNECT,
    CURLE_COULDNT_RESOLVE_HOST,
    CURLE_OPERATION_TIMEDOUT,
    CURLE_PEER_FAILED_VERIFICATION,
    CURLE_RECV_ERROR,
    CURLE_SEND_ERROR,
    CURLE_TOO_MANY_REDIRECTS,
    CURLE_UNSUPPORTED_PROTOCOL,
    InvalidArgumentError,
    RuntimeStateError,
    classify_transfer_error,
)
from ..headers import HeaderCollection
from ..logger import BoundLogger
from ..plan import ExecutionInfos, RawOutcome, TransferPlan, Transmission
from .base import TransferHandle

_STREAM_CHUNK = 64 * 1024
_DEFAULT_MAX_REDIRECTS = 20
_RESOLVE_MARKERS = ("name or service not known", "nodename nor servname", "getaddrinfo failed", "no address")
_TLS_MARKERS = ("certificate_verify_failed", "certificate verify failed", "ssl")


class HttpxHandle(TransferHandle):
    """Runs HTTP/HTTPS plans with an ``httpx.Client``.

    Options are plain strings (``follow_redirects``, ``max_redirects``,
    ``verify``, ``timeout``). An injected client is used as-is and never
    closed or rebuilt by the handle.
    """

    name = "http"
    schemes = frozenset({"http", "https"})

    def __init__(
        self,
        *,
        client: httpx.Client | None = None,
        timeout: float = 60.0,
        options: Mapping[Hashable, Any] | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self._default_timeout = timeout
        super().__init__(options=options, logger=logger)
        self._client = client
        self._owns_client = client is None
        self._client_key: tuple[Any, ...] | None = None

    def default_options(self) -> Mapping[Hashable, Any]:
        return {
            "follow_redirects": True,
            "max_redirects": _DEFAULT_MAX_REDIRECTS,
            "verify": True,
            "timeout": self._default_timeout,
        }

    def _acquire(self) -> None:
        if self._owns_client and self._client is None:
            self._client = self._build_client(self._options)

    def _release(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None
            self._client_key = None

    def _reset_engine(self) -> bool:
        if self._client is None:
            return False
        self._client.cookies.clear()
        if self._owns_client:
            self._client.close()
            self._client = self._build_client(self._options)
        return True

    def _translate(self, plan: TransferPlan) -> dict[Hashable, Any]:
        config = plan.configuration
        options: dict[Hashable, Any] = {
            "timeout": config.timeout,
            "connect_timeout": config.connect_timeout,
            "user_agent": config.user_agent,
        }
        if isinstance(config, HttpConfiguration):
            options["follow_redirects"] = config.allow_redirects
            options["max_redirects"] = config.max_redirects
            options["verify"] = config.verify_tls
            options["accept_encoding"] = config.accept_encoding
        return options

    def _perform(self, plan: TransferPlan, options: Mapping[Hashable, Any]) -> RawOutcome:
        if plan.scheme not in self.schemes:
            raise classify_transfer_error(
                CURLE_UNSUPPORTED_PROTOCOL,
                f"Protocol {plan.scheme or '<none>'!r} not supported by httpx",
                context=plan.url,
            )

        client = self._client_for(options)
        headers = HeaderCollection(plan.headers)
        if options.get("user_agent") and not headers.has("user-agent"):
            headers.add("User-Agent", options["user_agent"])
        if options.get("accept_encoding") and not headers.has("accept-encoding"):
            headers.add("Accept-Encoding", options["accept_encoding"])

        content: bytes | Iterator[bytes] | None = None
        if plan.transmission is not Transmission.NONE:
            if isinstance(plan.body, StreamBody):
                content = _iter_stream(plan.body)
                headers.add("Content-Length", plan.body.length)
            else:
                content = plan.body.data if isinstance(plan.body, BytesBody) else b""

        total = options.get("timeout")
        timeout = httpx.Timeout(total, connect=options.get("connect_timeout", total))
        try:
            request = client.build_request(
                plan.method,
                plan.url,
                headers=list(_header_pairs(headers)),
                content=content,
                timeout=timeout,
            )
        except UnicodeEncodeError as exc:
            raise InvalidArgumentError(
                f"Cannot send non-ASCII header text: {exc.object!r}", context=plan.url
            ) from exc

        started = time.monotonic()
        try:
            response = client.send(request, follow_redirects=bool(options.get("follow_redirects")))
            body = response.read()
        except httpx.HTTPError as exc:
            code = _native_code(exc)
            infos = ExecutionInfos(
                effective_url=plan.url,
                total_time=time.monotonic() - started,
                headers_out=_request_head(request),
            )
            self._logger.debug("httpx error %s on %s: %s", code, plan.url, exc)
            raise classify_transfer_error(code, str(exc) or type(exc).__name__, context=infos) from exc
        elapsed = time.monotonic() - started

        head = _response_head(response)
        infos = ExecutionInfos(
            status=response.status_code,
            effective_url=str(response.url),
            total_time=elapsed,
            header_size=len(head),
            headers_out=_request_head(response.request),
            content_type=response.headers.get("content-type"),
        )
        self._logger.debug(
            "HTTP <- %s status=%s bytes=%d",
            infos.effective_url,
            response.status_code,
            len(body),
        )
        return RawOutcome(content=head + body, infos=infos)

    def _client_for(self, options: Mapping[Hashable, Any]) -> httpx.Client:
        key = (options.get("verify"), options.get("max_redirects"))
        if self._owns_client and (self._client is None or key != self._client_key):
            if self._client is not None:
                self._client.close()
            self._client = self._build_client(options)
        if self._client is None:
            raise RuntimeStateError("httpx handle has no client, open it first")
        return self._client

    def _build_client(self, options: Mapping[Hashable, Any]) -> httpx.Client:
        verify = options.get("verify", True)
        max_redirects = options.get("max_redirects")
        if max_redirects is None:
            max_redirects = _DEFAULT_MAX_REDIRECTS
        self._client_key = (verify, options.get("max_redirects"))
        return httpx.Client(
            verify=bool(verify),
            max_redirects=max_redirects,
            timeout=httpx.Timeout(self._default_timeout),
        )


def _iter_stream(body: StreamBody) -> Iterator[bytes]:
    body.rewind()
    while True:
        chunk = body.read(_STREAM_CHUNK)
        if not chunk:
            break
        yield chunk


def _header_pairs(headers: HeaderCollection) -> Iterator[tuple[str, str]]:
    for line in headers.to_lines():
        name, _, value = line.partition(":")
        yield name, value.strip()


def _request_head(request: httpx.Request) -> str:
    target = request.url.raw_path.decode("ascii", errors="replace")
    lines = [f"{request.method} {target} HTTP/1.1"]
    lines.extend(f"{name}: {value}" for name, value in request.headers.items())
    return "\r\n".join(lines) + "\r\n\r\n"


def _response_head(response: httpx.Response) -> bytes:
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}".rstrip()]
    lines.extend(f"{name}: {value}" for name, value in response.headers.multi_items())
    return ("\r\n".join(lines) + "\r\n\r\n").encode("iso-8859-1", errors="replace")


def _native_code(exc: httpx.HTTPError) -> int:
    if isinstance(exc, httpx.TimeoutException):
        return CURLE_OPERATION_TIMEDOUT
    if isinstance(exc, httpx.TooManyRedirects):
        return CURLE_TOO_MANY_REDIRECTS
    if isinstance(exc, httpx.UnsupportedProtocol):
        return CURLE_UNSUPPORTED_PROTOCOL
    if isinstance(exc, httpx.ConnectError):
        message = str(exc).lower()
        if any(marker in message for marker in _RESOLVE_MARKERS):
            return CURLE_COULDNT_RESOLVE_HOST
        if any(marker in message for marker in _TLS_MARKERS):
            return CURLE_PEER_FAILED_VERIFICATION
        return CURLE_COULDNT_CONNECT
    if isinstance(exc, httpx.WriteError):
        return CURLE_SEND_ERROR
    return CURLE_RECV_ERROR


__all__ = ["HttpxHandle"]
