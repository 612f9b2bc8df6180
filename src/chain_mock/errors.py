"""Failure taxonomy for the ledger and the execution harness."""
from __future__ import annotations

from enum import IntEnum

__all__ = [
    "AccountNotFoundError",
    "AttributeDecodeError",
    "BalanceMismatchError",
    "CacheStateError",
    "ContractRegistrationError",
    "HarnessUsageError",
    "ReturnCode",
    "TokenAlreadyIssuedError",
    "TxPanic",
    "INSUFFICIENT_FUNDS_MESSAGE",
    "GAS_UPFRONT_MESSAGE",
]

INSUFFICIENT_FUNDS_MESSAGE = "insufficient funds"
GAS_UPFRONT_MESSAGE = "not enough balance to pay gas upfront"


class ReturnCode(IntEnum):
    OK = 0
    FUNCTION_NOT_FOUND = 1
    FUNCTION_WRONG_SIGNATURE = 2
    CONTRACT_NOT_FOUND = 3
    USER_ERROR = 4
    OUT_OF_GAS = 5
    ACCOUNT_COLLISION = 6
    OUT_OF_FUNDS = 7
    CALL_STACK_OVERFLOW = 8
    CONTRACT_INVALID = 9
    EXECUTION_FAILED = 10


class TxPanic(Exception):
    """Abnormal termination of a dispatched call.

    Raised at the point of violation and caught exactly once, at the dispatch
    boundary, where it becomes a failed ``TxResult``.
    """

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"[{status}] {message}")
        self.status = int(status)
        self.message = message

    @classmethod
    def insufficient_funds(cls) -> TxPanic:
        return cls(ReturnCode.EXECUTION_FAILED, INSUFFICIENT_FUNDS_MESSAGE)

    @classmethod
    def gas_upfront(cls) -> TxPanic:
        return cls(ReturnCode.EXECUTION_FAILED, GAS_UPFRONT_MESSAGE)

    @classmethod
    def user_error(cls, message: str) -> TxPanic:
        return cls(ReturnCode.USER_ERROR, message)


class HarnessUsageError(Exception):
    """The test itself is malformed. Never converted into a ``TxResult``."""


class AccountNotFoundError(HarnessUsageError):
    def __init__(self, operation: str, address_hex: str) -> None:
        super().__init__(f"{operation}: account {address_hex} does not exist")
        self.operation = operation
        self.address_hex = address_hex


class TokenAlreadyIssuedError(HarnessUsageError):
    pass


class AttributeDecodeError(HarnessUsageError):
    pass


class CacheStateError(HarnessUsageError):
    pass


class ContractRegistrationError(HarnessUsageError):
    pass


class BalanceMismatchError(HarnessUsageError, AssertionError):
    pass
