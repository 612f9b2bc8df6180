"""Forwards calls and payments to other contracts, synchronously or async."""
from __future__ import annotations

from typing import Any

from ..contract.base import ContractBase, endpoint
from ..tx.input import TokenPayment
from ..tx.result import AsyncCallResult
from ..world.address import Address

__all__ = ["CALLBACK_MESSAGE_KEY", "CALLBACK_STATUS_KEY", "Forwarder"]

CALLBACK_STATUS_KEY = b"lastCallbackStatus"
CALLBACK_MESSAGE_KEY = b"lastCallbackMessage"


class Forwarder(ContractBase):
    @endpoint("forwardSync")
    def forward_sync(self, to: Address, function: str, *args: Any) -> tuple[Any, ...]:
        return self.send.execute_on_dest_context(to, function, args)

    @endpoint("forwardSyncWithNative")
    def forward_sync_with_native(self, to: Address, function: str, amount: int) -> tuple[Any, ...]:
        return self.send.execute_on_dest_context(to, function, native_value=amount)

    @endpoint("forwardSyncWithDct")
    def forward_sync_with_dct(self, to: Address, function: str, payment: TokenPayment) -> tuple[Any, ...]:
        return self.send.execute_on_dest_context(to, function, payments=[payment])

    @endpoint("forwardAsync")
    def forward_async(self, to: Address, function: str, *args: Any) -> AsyncCallResult:
        return self.send.async_call(to, function, args, callback=self.callback)

    @endpoint("forwardAsyncWithNative")
    def forward_async_with_native(self, to: Address, function: str, amount: int) -> AsyncCallResult:
        return self.send.async_call(to, function, native_value=amount, callback=self.callback)

    def callback(self, result: AsyncCallResult) -> None:
        self.storage.set(CALLBACK_STATUS_KEY, result.status)
        self.storage.set(CALLBACK_MESSAGE_KEY, result.message)

    def last_callback_status(self) -> int:
        return self.storage.get_as(CALLBACK_STATUS_KEY, int)

    def last_callback_message(self) -> str:
        return self.storage.get_as(CALLBACK_MESSAGE_KEY, str)
