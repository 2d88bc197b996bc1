"""Protocol independent request behavior."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, ClassVar, Iterable, Mapping

from ..body import EMPTY_BODY, Body, StreamBody, coerce_body
from ..config import Configuration
from ..errors import InvalidArgumentError, RuntimeStateError
from ..handle.base import TransferHandle
from ..handle.curl import CurlHandle
from ..headers import HeaderCollection, HeaderItem
from ..logger import BoundLogger, create_logger
from ..plan import TransferPlan, Transmission, Verb
from ..response import Response

if TYPE_CHECKING:  # pragma: no cover
    from ..client import TransferClient


class Request(abc.ABC):
    """Owns one configuration and one header collection.

    Setters return the request so calls can be chained. Once execution has
    started the request is frozen until ``reset()`` is called.
    """

    configuration_class: ClassVar[type[Configuration]] = Configuration
    default_method: ClassVar[str] = "GET"

    def __init__(
        self,
        url: str,
        *,
        headers: Mapping[str, Any] | Iterable[HeaderItem] | None = None,
        body: Any = None,
        client: "TransferClient | None" = None,
        logger: BoundLogger | None = None,
        **options: Any,
    ) -> None:
        options.setdefault("method", self.default_method)
        if body is not None:
            options["body"] = coerce_body(body)
        try:
            self._configuration = self.configuration_class(url=url, **options)
        except TypeError as exc:
            raise InvalidArgumentError(f"Invalid {type(self).__name__} option: {exc}") from exc
        self._headers = HeaderCollection(headers)
        self._client = client
        self._logger = (logger or create_logger()).child("request")
        self._plan: TransferPlan | None = None
        self._sent = False

    @property
    def url(self) -> str:
        return self._configuration.url

    @property
    def method(self) -> str:
        return self._configuration.method

    @property
    def body(self) -> Body:
        return self._configuration.body

    @property
    def configuration(self) -> Configuration:
        return self._configuration

    @property
    def headers(self) -> HeaderCollection:
        return self._headers

    @property
    def plan(self) -> TransferPlan | None:
        """The plan prepared by the last execution, if any."""
        return self._plan

    @property
    def client(self) -> "TransferClient | None":
        return self._client

    @property
    def is_sent(self) -> bool:
        return self._sent

    def bind(self, client: "TransferClient | None") -> "Request":
        self._client = client
        return self

    def set_url(self, url: str) -> "Request":
        return self.configure(url=url)

    def set_body(self, value: Any) -> "Request":
        """Accept a string, bytes or a local binary stream (rewound to offset 0)."""
        return self.configure(body=coerce_body(value))

    def configure(self, **changes: Any) -> "Request":
        self._ensure_mutable()
        if "method" in changes and str(changes["method"]).strip().upper() != self.method:
            raise InvalidArgumentError(
                f"{type(self).__name__} always uses {self.method}", context=changes["method"]
            )
        try:
            self._configuration = self._configuration.replace(**changes)
        except TypeError as exc:
            raise InvalidArgumentError(f"Invalid {type(self).__name__} option: {exc}") from exc
        return self

    def add_header(self, name: str, value: Any) -> "Request":
        self._ensure_mutable()
        self._headers.add(name, value)
        return self

    def add_headers(self, headers: Mapping[str, Any] | Iterable[HeaderItem]) -> "Request":
        self._ensure_mutable()
        self._headers.add_all(headers)
        return self

    def remove_header(self, name: str) -> "Request":
        self._ensure_mutable()
        self._headers.remove(name)
        return self

    def remove_headers(self) -> "Request":
        self._ensure_mutable()
        self._headers.remove_all()
        return self

    def get_header(self, name: str) -> str | None:
        return self._headers.get(name)

    def has_header(self, name: str) -> bool:
        return self._headers.has(name)

    def get_header_lines(self) -> list[str]:
        return self._headers.to_lines()

    @abc.abstractmethod
    def prepare(self) -> TransferPlan:
        """Translate the configuration into the plan handed to a transfer handle."""

    def execute(self, handle: TransferHandle) -> Response:
        if self._sent:
            raise RuntimeStateError(
                f"{type(self).__name__} to {self.url} was already sent, call reset() first"
            )
        plan = self.prepare()
        self._plan = plan
        self._sent = True
        self._logger.trace(
            "Prepared %s plan verb=%s transmission=%s body=%d",
            plan.method,
            plan.verb.value,
            plan.transmission.value,
            plan.body.length,
        )
        outcome = handle.execute(plan)
        return Response.from_outcome(outcome, self)

    def send(self) -> Response:
        if self._client is not None:
            return self._client.send(self)
        with CurlHandle(logger=self._logger) as handle:
            return self.execute(handle)

    def reset(self) -> "Request":
        self._plan = None
        self._sent = False
        return self

    def _build_plan(self, verb: Verb, transmission: Transmission = Transmission.NONE) -> TransferPlan:
        body = self._configuration.body if transmission is not Transmission.NONE else EMPTY_BODY
        if isinstance(body, StreamBody):
            body.rewind()
        return TransferPlan(
            url=self.url,
            method=self.method,
            verb=verb,
            configuration=self._configuration,
            headers=tuple(self._headers.to_lines()),
            body=body,
            transmission=transmission,
        )

    def _ensure_mutable(self) -> None:
        if self._sent:
            raise RuntimeStateError(
                f"{type(self).__name__} cannot be modified after it was sent, call reset() first"
            )

    def __repr__(self) -> str:
        return f"<{type(self).__module__.rsplit('.', 1)[-1]}.{type(self).__name__} {self.method} {self.url}>"


__all__ = ["Request"]
