"""Wraps the native coin into a fungible token one-to-one and back."""
from __future__ import annotations

from ..contract.base import ContractBase, endpoint, view
from ..world.account_tokens import NATIVE_TOKEN_ID

__all__ = ["WRAPPED_TOKEN_KEY", "WrappedNative"]

WRAPPED_TOKEN_KEY = b"wrappedTokenId"


class WrappedNative(ContractBase):
    @endpoint
    def init(self, wrapped_token_id: bytes) -> None:
        self.storage.set(WRAPPED_TOKEN_KEY, wrapped_token_id)

    @view("getWrappedTokenId")
    def wrapped_token_id(self) -> bytes:
        return self.storage.get(WRAPPED_TOKEN_KEY)

    @endpoint("wrapNative")
    def wrap_native(self) -> tuple[bytes, int]:
        amount = self.call_value.native_value()
        self.require(amount > 0, "Payment must be more than 0")

        token_id = self.wrapped_token_id()
        self.send.local_mint(token_id, 0, amount)
        caller = self.blockchain.get_caller()
        self.send.direct_dct(caller, token_id, 0, amount)
        self.api.emit_event("wrap", caller, amount)
        return token_id, amount

    @endpoint("unwrapNative")
    def unwrap_native(self) -> None:
        token_id, amount = self.call_value.payment_token_pair()
        self.require(token_id != NATIVE_TOKEN_ID, "Only DCT accepted")
        self.require(amount > 0, "Must pay more than 0 tokens!")
        self.require(token_id == self.wrapped_token_id(), "Wrong DCT")

        self.send.local_burn(token_id, 0, amount)
        caller = self.blockchain.get_caller()
        self.send.direct_native(caller, amount)
        self.api.emit_event("unwrap", caller, amount)

    @view("getLockedNativeBalance")
    def locked_native_balance(self) -> int:
        return self.blockchain.get_sc_balance()
