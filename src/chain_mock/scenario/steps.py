"""Builders for call, query and expectation records."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..codec import top_encode
from ..errors import ReturnCode
from ..tx.input import MAX_GAS_LIMIT, TokenPayment
from ..world.address import Address

__all__ = ["ScCallStep", "ScQueryStep", "TxExpect"]


@dataclass(slots=True)
class ScCallStep:
    from_address: Address
    to: Address
    function: str
    native_value: int = 0
    token_transfers: list[TokenPayment] = field(default_factory=list)
    arguments: list[bytes] = field(default_factory=list)
    gas_limit: int = MAX_GAS_LIMIT
    gas_price: int = 0

    def add_native_value(self, value: int) -> ScCallStep:
        self.native_value = value
        return self

    def add_dct_transfer(self, token_identifier: bytes, nonce: int, value: int) -> ScCallStep:
        self.token_transfers.append(TokenPayment(token_identifier, nonce, value))
        return self

    def add_argument(self, arg: Any) -> ScCallStep:
        self.arguments.append(top_encode(arg))
        return self

    def set_gas_limit(self, gas_limit: int) -> ScCallStep:
        self.gas_limit = gas_limit
        return self

    def set_gas_price(self, gas_price: int) -> ScCallStep:
        self.gas_price = gas_price
        return self


@dataclass(slots=True)
class ScQueryStep:
    to: Address
    function: str
    arguments: list[bytes] = field(default_factory=list)

    def add_argument(self, arg: Any) -> ScQueryStep:
        self.arguments.append(top_encode(arg))
        return self


@dataclass(slots=True)
class TxExpect:
    status: int = 0
    message: str = ""
    out: list[bytes] = field(default_factory=list)

    @classmethod
    def ok(cls) -> TxExpect:
        return cls()

    @classmethod
    def user_error(cls, message: str) -> TxExpect:
        return cls(status=int(ReturnCode.USER_ERROR), message=message)

    def add_out_value(self, value: Any) -> TxExpect:
        self.out.append(top_encode(value))
        return self

    def set_message(self, message: str) -> TxExpect:
        self.message = message
        return self
