"""Transaction input structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..world.address import Address

__all__ = ["MAX_GAS_LIMIT", "TokenPayment", "TxInput"]

MAX_GAS_LIMIT = 2**64 - 1


@dataclass(slots=True, frozen=True)
class TokenPayment:
    token_identifier: bytes
    nonce: int
    amount: int

    def __post_init__(self) -> None:
        if self.nonce < 0:
            raise ValueError(f"token nonce must be non-negative, got {self.nonce}")
        if self.amount < 0:
            raise ValueError(f"token amount must be non-negative, got {self.amount}")


@dataclass(slots=True)
class TxInput:
    from_address: Address
    to: Address
    native_value: int = 0
    token_payments: list[TokenPayment] = field(default_factory=list)
    func_name: str = ""
    args: list[Any] = field(default_factory=list)
    gas_limit: int = MAX_GAS_LIMIT
    gas_price: int = 0
    tx_hash: bytes = field(default_factory=lambda: bytes(32))

    def __post_init__(self) -> None:
        if self.native_value < 0:
            raise ValueError(f"native value must be non-negative, got {self.native_value}")
        if self.gas_limit < 0 or self.gas_price < 0:
            raise ValueError(f"gas limit and price must be non-negative ({self.gas_limit}, {self.gas_price})")
