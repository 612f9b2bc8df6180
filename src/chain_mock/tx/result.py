"""Transaction results and the dispatch-boundary combinator."""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from ..errors import ReturnCode, TxPanic

__all__ = ["AsyncCallResult", "Failure", "Success", "TxResult", "catch_tx_panic"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class TxResult:
    result_status: int = 0
    result_message: str = ""
    result_values: tuple[Any, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> TxResult:
        return cls()

    def is_success(self) -> bool:
        return self.result_status == ReturnCode.OK

    def assert_ok(self) -> None:
        if not self.is_success():
            raise AssertionError(f"tx failed with status {self.result_status}: {self.result_message}")

    def assert_error(self, status: int, message: str) -> None:
        if self.result_status != status:
            raise AssertionError(f"expected status {status}, got {self.result_status}")
        if self.result_message != message:
            raise AssertionError(f"expected message {message!r}, got {self.result_message!r}")

    def assert_user_error(self, message: str) -> None:
        self.assert_error(ReturnCode.USER_ERROR, message)


@dataclass(slots=True, frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(slots=True, frozen=True)
class Failure:
    status: int
    message: str

    def to_tx_result(self) -> TxResult:
        return TxResult(result_status=self.status, result_message=self.message)


def catch_tx_panic(body: Callable[[], T]) -> Success[T] | Failure:
    """Run ``body`` and turn a ``TxPanic`` into a ``Failure``.

    This is the single place a call-level failure stops unwinding. Any other
    exception is a harness or programming error and propagates unchanged.
    """
    try:
        return Success(body())
    except TxPanic as panic:
        logger.debug("call aborted with status %d: %s", panic.status, panic.message)
        return Failure(status=panic.status, message=panic.message)


@dataclass(slots=True, frozen=True)
class AsyncCallResult:
    """Outcome handed to an async-call callback."""

    status: int = 0
    message: str = ""
    values: tuple[Any, ...] = ()

    @classmethod
    def ok(cls, values: tuple[Any, ...] = ()) -> AsyncCallResult:
        return cls(values=tuple(values))

    @classmethod
    def err(cls, status: int, message: str) -> AsyncCallResult:
        return cls(status=status, message=message)

    def is_ok(self) -> bool:
        return self.status == ReturnCode.OK
