"""Dispatch primitives shared by top-level transactions and nested calls."""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

from .cache import TxCache
from .context import TxContext
from .input import TxInput
from .result import AsyncCallResult, Failure, Success, catch_tx_panic

__all__ = [
    "CallableContract",
    "ContractInstantiator",
    "apply_tx_payments",
    "execute_async_call",
    "execute_on_dest_context",
    "normalize_results",
    "prepay_gas",
]

logger = logging.getLogger(__name__)


class CallableContract(Protocol):
    def call_endpoint(self, name: str, args: tuple[Any, ...]) -> Any: ...


ContractInstantiator = Callable[[TxContext], CallableContract]


def prepay_gas(cache: TxCache, tx_input: TxInput) -> None:
    if tx_input.gas_price > 0:
        cache.subtract_gas(tx_input.from_address, tx_input.gas_limit, tx_input.gas_price)


def apply_tx_payments(cache: TxCache, tx_input: TxInput) -> None:
    """Move the call value from caller to destination.

    Native value first, then token payments in listed order. The first
    unaffordable payment raises before anything after it is attempted.
    """
    sender = tx_input.from_address
    dest = tx_input.to
    if tx_input.native_value > 0:
        cache.subtract_native(sender, tx_input.native_value)
        cache.increase_native(dest, tx_input.native_value)

    for payment in tx_input.token_payments:
        if payment.amount == 0:
            continue
        metadata = cache.subtract_token(sender, payment.token_identifier, payment.nonce, payment.amount)
        cache.increase_token(dest, payment.token_identifier, payment.nonce, payment.amount, metadata)


def normalize_results(value: Any) -> tuple[Any, ...]:
    if value is None:
        return ()
    if isinstance(value, tuple):
        return value
    return (value,)


def execute_on_dest_context(
    parent: TxContext,
    tx_input: TxInput,
    instantiate: ContractInstantiator,
) -> tuple[Any, ...]:
    """Synchronous nested call.

    The callee runs in a child frame whose cache overlays the caller's cache.
    Its effects are merged into the caller only when it returns normally; a
    ``TxPanic`` leaves the caller's cache untouched and keeps unwinding.
    """
    child = parent.new_child(tx_input)
    with parent.stack.frame(child):
        apply_tx_payments(child.tx_cache, tx_input)
        contract = instantiate(child)
        results = normalize_results(contract.call_endpoint(tx_input.func_name, tuple(tx_input.args)))
    parent.merge_child(child)
    return results


def execute_async_call(
    parent: TxContext,
    tx_input: TxInput,
    instantiate: ContractInstantiator,
    callback: Callable[[AsyncCallResult], Any] | None = None,
) -> AsyncCallResult:
    """Dispatch the destination, then run ``callback`` in the caller's frame.

    A failing destination does not abort the caller; the failure reaches the
    callback as an error result and the destination's effects (payments
    included) are dropped.
    """
    outcome: Success[tuple[Any, ...]] | Failure = catch_tx_panic(
        lambda: execute_on_dest_context(parent, tx_input, instantiate)
    )
    if isinstance(outcome, Success):
        result = AsyncCallResult.ok(outcome.value)
    else:
        logger.debug("async call to %s failed: %s", tx_input.to, outcome.message)
        result = AsyncCallResult.err(outcome.status, outcome.message)

    if callback is not None:
        callback(result)
    return result
