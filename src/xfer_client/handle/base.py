"""Transfer handle lifecycle shared by every engine adapter."""

from __future__ import annotations

import abc
import warnings
from enum import Enum
from types import TracebackType
from typing import Any, Hashable, Mapping

from ..errors import ResetUnsupportedWarning, RuntimeStateError
from ..logger import BoundLogger, create_logger
from ..plan import RawOutcome, TransferPlan


class HandleState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    EXECUTING = "executing"


class TransferHandle(abc.ABC):
    """Owns one native transfer resource.

    ``CLOSED -> OPEN -> EXECUTING -> OPEN``; ``close()`` returns to ``CLOSED``
    from any state. Use the handle as a context manager so the resource is
    released on every exit path.
    """

    name = "handle"

    def __init__(
        self,
        *,
        options: Mapping[Hashable, Any] | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self._logger = (logger or create_logger()).child(self.name)
        self._options: dict[Hashable, Any] = dict(self.default_options())
        if options:
            self._options.update(options)
        self._state = HandleState.CLOSED

    @property
    def state(self) -> HandleState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is not HandleState.CLOSED

    @property
    def options(self) -> dict[Hashable, Any]:
        return dict(self._options)

    def default_options(self) -> Mapping[Hashable, Any]:
        return {}

    def set_option(self, key: Hashable, value: Any) -> "TransferHandle":
        self._options[key] = value
        return self

    def open(self) -> "TransferHandle":
        if self._state is HandleState.CLOSED:
            self._acquire()
            self._state = HandleState.OPEN
            self._logger.trace("Handle opened")
        return self

    def close(self) -> "TransferHandle":
        if self._state is not HandleState.CLOSED:
            try:
                self._release()
            finally:
                self._state = HandleState.CLOSED
                self._logger.trace("Handle closed")
        return self

    def execute(self, plan: TransferPlan) -> RawOutcome:
        if self._state is HandleState.CLOSED:
            raise RuntimeStateError("Handle has been closed, open it before execute")
        if self._state is HandleState.EXECUTING:
            raise RuntimeStateError("Handle is already executing a transfer")

        options = self.merge_options(self._translate(plan))
        self._state = HandleState.EXECUTING
        self._logger.debug("%s %s", plan.method, plan.url)
        try:
            return self._perform(plan, options)
        finally:
            if self._state is HandleState.EXECUTING:
                self._state = HandleState.OPEN

    def reset(self) -> bool:
        """Restore default options; returns ``False`` when the engine cannot reset."""
        self._options = dict(self.default_options())
        if self._state is not HandleState.CLOSED and self._reset_engine():
            return True
        message = f"{type(self).__name__} cannot reset its native resource"
        self._logger.warn(message)
        warnings.warn(message, ResetUnsupportedWarning, stacklevel=2)
        return False

    def merge_options(self, overrides: Mapping[Hashable, Any]) -> dict[Hashable, Any]:
        """Plan values win over defaults; ``None`` means absent and is dropped."""
        merged = {**self._options, **overrides}
        return {key: value for key, value in merged.items() if value is not None}

    @abc.abstractmethod
    def _acquire(self) -> None: ...

    @abc.abstractmethod
    def _release(self) -> None: ...

    @abc.abstractmethod
    def _translate(self, plan: TransferPlan) -> dict[Hashable, Any]: ...

    @abc.abstractmethod
    def _perform(self, plan: TransferPlan, options: Mapping[Hashable, Any]) -> RawOutcome: ...

    def _reset_engine(self) -> bool:
        return False

    def __enter__(self) -> "TransferHandle":
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = ["HandleState", "TransferHandle"]
