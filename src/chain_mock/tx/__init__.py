"""Transaction cache, call contexts and dispatch primitives."""

from __future__ import annotations

from .cache import AccountSource, TxCache
from .context import BlockchainUpdates, FrameHandle, TxContext, TxContextStack
from .execution import (
    CallableContract,
    ContractInstantiator,
    apply_tx_payments,
    execute_async_call,
    execute_on_dest_context,
    normalize_results,
    prepay_gas,
)
from .input import MAX_GAS_LIMIT, TokenPayment, TxInput
from .result import AsyncCallResult, Failure, Success, TxResult, catch_tx_panic

__all__ = [
    "MAX_GAS_LIMIT",
    "AccountSource",
    "AsyncCallResult",
    "BlockchainUpdates",
    "CallableContract",
    "ContractInstantiator",
    "Failure",
    "FrameHandle",
    "Success",
    "TokenPayment",
    "TxCache",
    "TxContext",
    "TxContextStack",
    "TxInput",
    "TxResult",
    "apply_tx_payments",
    "catch_tx_panic",
    "execute_async_call",
    "execute_on_dest_context",
    "normalize_results",
    "prepay_gas",
]
