"""libcurl handle built on top of pycurl."""

from __future__ import annotations

import io
from typing import Any, Hashable, Mapping

import pycurl

from ..body import BytesBody, StreamBody
from ..config import FtpConfiguration, HttpConfiguration, SshConfiguration
from ..errors import InvalidArgumentError, RuntimeStateError, classify_transfer_error
from ..logger import BoundLogger
from ..plan import ExecutionInfos, RawOutcome, TransferPlan, Transmission, Verb
from .base import TransferHandle


class CurlHandle(TransferHandle):
    """Runs plans through a single ``pycurl.Curl`` object."""

    name = "curl"

    def __init__(
        self,
        *,
        options: Mapping[Hashable, Any] | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        super().__init__(options=options, logger=logger)
        self._curl: pycurl.Curl | None = None

    def default_options(self) -> Mapping[Hashable, Any]:
        return {
            pycurl.FOLLOWLOCATION: True,
            pycurl.HEADER: True,
        }

    def _acquire(self) -> None:
        if self._curl is None:
            self._curl = pycurl.Curl()

    def _release(self) -> None:
        if self._curl is not None:
            self._curl.close()
        self._curl = None

    def _native(self) -> pycurl.Curl:
        if self._curl is None:
            raise RuntimeStateError("curl handle has no native resource, open it first")
        return self._curl

    def _reset_engine(self) -> bool:
        if self._curl is None or not hasattr(self._curl, "reset"):
            return False
        self._curl.reset()
        return True

    def _translate(self, plan: TransferPlan) -> dict[Hashable, Any]:
        config = plan.configuration
        options: dict[Hashable, Any] = {
            pycurl.URL: plan.url,
            pycurl.HTTPHEADER: list(plan.headers),
            pycurl.TIMEOUT_MS: _millis(config.timeout),
            pycurl.CONNECTTIMEOUT_MS: _millis(config.connect_timeout),
            pycurl.USERAGENT: config.user_agent,
        }

        if plan.verb is Verb.GET:
            options[pycurl.HTTPGET] = True
        elif plan.verb is Verb.HEAD:
            options[pycurl.NOBODY] = True
        elif plan.verb is Verb.POST:
            options[pycurl.POST] = True
        elif plan.verb is Verb.CUSTOM:
            options[pycurl.CUSTOMREQUEST] = plan.method

        options.update(self._body_options(plan))

        if isinstance(config, HttpConfiguration):
            options[pycurl.FOLLOWLOCATION] = config.allow_redirects
            options[pycurl.MAXREDIRS] = config.max_redirects
            options[pycurl.AUTOREFERER] = config.referer_on_redirect
            options[pycurl.ACCEPT_ENCODING] = config.accept_encoding
            options[pycurl.SSL_VERIFYPEER] = 1 if config.verify_tls else 0
            options[pycurl.SSL_VERIFYHOST] = 2 if config.verify_tls else 0
        elif isinstance(config, FtpConfiguration):
            # libcurl is passive by default; "-" selects active mode on the default interface.
            options[pycurl.FTPPORT] = None if config.passive else "-"
            options[pycurl.QUOTE] = list(config.commands_request()) or None
            options[pycurl.POSTQUOTE] = list(config.commands_post()) or None
        elif isinstance(config, SshConfiguration):
            options[pycurl.POSTQUOTE] = list(config.commands_post()) or None
        return options

    def _body_options(self, plan: TransferPlan) -> dict[Hashable, Any]:
        body = plan.body
        if plan.transmission is Transmission.NONE:
            return {}

        if plan.transmission is Transmission.FIELDS:
            if isinstance(body, StreamBody):
                return {
                    pycurl.POST: True,
                    pycurl.READFUNCTION: body.read,
                    pycurl.POSTFIELDSIZE_LARGE: body.length,
                }
            data = body.data if isinstance(body, BytesBody) else b""
            return {
                pycurl.POSTFIELDS: data,
                pycurl.POSTFIELDSIZE_LARGE: len(data),
            }

        if isinstance(body, StreamBody):
            reader, length = body.read, body.length
        else:
            data = body.data if isinstance(body, BytesBody) else b""
            reader, length = io.BytesIO(data).read, len(data)
        return {
            pycurl.UPLOAD: True,
            pycurl.READFUNCTION: reader,
            pycurl.INFILESIZE_LARGE: length,
        }

    def _perform(self, plan: TransferPlan, options: Mapping[Hashable, Any]) -> RawOutcome:
        curl = self._native()
        buffer = io.BytesIO()
        headers_out: list[bytes] = []

        def _debug(debug_type: int, message: bytes) -> None:
            if debug_type == pycurl.INFOTYPE_HEADER_OUT:
                headers_out.append(message)

        # Options absent from this plan must not survive from the previous one.
        curl.reset()
        try:
            curl.setopt(pycurl.WRITEDATA, buffer)
            curl.setopt(pycurl.VERBOSE, True)
            curl.setopt(pycurl.DEBUGFUNCTION, _debug)
            for key, value in options.items():
                curl.setopt(key, value)
        except UnicodeEncodeError as exc:
            raise InvalidArgumentError(
                f"Cannot hand non-ASCII text to libcurl: {exc.object!r}", context=plan.url
            ) from exc
        except pycurl.error as exc:
            code, message = _error_args(exc)
            raise classify_transfer_error(code, message, context=plan.url) from exc

        try:
            curl.perform()
        except pycurl.error as exc:
            code, message = _error_args(exc)
            infos = self._collect_infos(headers_out)
            self._logger.debug("curl error %s on %s: %s", code, plan.url, message)
            raise classify_transfer_error(code, message, context=infos) from exc

        infos = self._collect_infos(headers_out)
        content = buffer.getvalue()
        self._logger.debug(
            "curl <- %s status=%s bytes=%d time=%.3fs",
            infos.effective_url,
            infos.status,
            len(content),
            infos.total_time,
        )
        return RawOutcome(content=content, infos=infos)

    def _collect_infos(self, headers_out: list[bytes]) -> ExecutionInfos:
        curl = self._native()
        return ExecutionInfos(
            status=int(curl.getinfo(pycurl.RESPONSE_CODE) or 0),
            effective_url=_text(curl.getinfo(pycurl.EFFECTIVE_URL)),
            total_time=float(curl.getinfo(pycurl.TOTAL_TIME) or 0.0),
            header_size=int(curl.getinfo(pycurl.HEADER_SIZE) or 0),
            headers_out=b"".join(headers_out).decode("iso-8859-1"),
            content_type=_text(curl.getinfo(pycurl.CONTENT_TYPE)) or None,
        )


def _error_args(exc: pycurl.error) -> tuple[int, str]:
    code = exc.args[0] if exc.args else 0
    message = exc.args[1] if len(exc.args) > 1 else str(exc)
    return code, message


def _millis(seconds: float | None) -> int | None:
    if seconds is None:
        return None
    return int(seconds * 1000)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("iso-8859-1")
    return str(value)


__all__ = ["CurlHandle"]
