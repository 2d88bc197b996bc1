"""HTTP request variants."""

from __future__ import annotations

from typing import Any

from ..body import StreamBody
from ..config import HttpConfiguration
from ..plan import TransferPlan, Transmission, Verb
from .base import Request


class HttpRequest(Request):
    configuration_class = HttpConfiguration

    @property
    def configuration(self) -> HttpConfiguration:
        return self._configuration  # type: ignore[return-value]

    def follow_redirects(self, enabled: bool = True, max_redirects: int | None = None) -> "HttpRequest":
        self.configure(allow_redirects=enabled, max_redirects=max_redirects)
        return self

    def referer_on_redirect(self, enabled: bool = True) -> "HttpRequest":
        self.configure(referer_on_redirect=enabled)
        return self

    def verify_tls(self, enabled: bool = True) -> "HttpRequest":
        self.configure(verify_tls=enabled)
        return self

    def accept_encoding(self, value: str | None) -> "HttpRequest":
        self.configure(accept_encoding=value)
        return self

    def _payload_transmission(self) -> Transmission:
        config = self._configuration
        if isinstance(config.body, StreamBody) or config.upload:
            return Transmission.UPLOAD
        return Transmission.FIELDS


class Get(HttpRequest):
    default_method = "GET"

    def prepare(self) -> TransferPlan:
        return self._build_plan(Verb.GET)


class Head(HttpRequest):
    default_method = "HEAD"

    def prepare(self) -> TransferPlan:
        return self._build_plan(Verb.HEAD)


class Post(HttpRequest):
    """POST always sends post fields, empty ones when there is no body."""

    default_method = "POST"

    def prepare(self) -> TransferPlan:
        return self._build_plan(Verb.POST, Transmission.FIELDS)


class Put(HttpRequest):
    default_method = "PUT"

    def prepare(self) -> TransferPlan:
        return self._build_plan(Verb.CUSTOM, self._payload_transmission())


class Delete(HttpRequest):
    default_method = "DELETE"

    def prepare(self) -> TransferPlan:
        if not self._configuration.has_body():
            return self._build_plan(Verb.CUSTOM)
        return self._build_plan(Verb.CUSTOM, Transmission.FIELDS)


class Custom(HttpRequest):
    """Extension verbs (PATCH, OPTIONS, PROPFIND...) passed through untouched."""

    def __init__(self, method: str, url: str, **kwargs: Any) -> None:
        super().__init__(url, method=method, **kwargs)

    def prepare(self) -> TransferPlan:
        if not self._configuration.has_body():
            return self._build_plan(Verb.CUSTOM)
        return self._build_plan(Verb.CUSTOM, self._payload_transmission())


__all__ = ["Custom", "Delete", "Get", "Head", "HttpRequest", "Post", "Put"]
