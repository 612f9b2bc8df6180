"""Per-token store of nonce-indexed instances."""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from .address import Address

__all__ = ["TokenInstance", "TokenInstanceMetadata", "TokenInstances"]


@dataclass(slots=True, frozen=True)
class TokenInstanceMetadata:
    creator: Address | None = None
    royalties: int = 0
    attributes: bytes = b""
    name: bytes = b""
    hash: bytes | None = None
    uri: bytes | None = None


@dataclass(slots=True)
class TokenInstance:
    nonce: int
    balance: int = 0
    metadata: TokenInstanceMetadata = field(default_factory=TokenInstanceMetadata)

    def clone(self) -> TokenInstance:
        return TokenInstance(nonce=self.nonce, balance=self.balance, metadata=self.metadata)


@dataclass(slots=True)
class TokenInstances:
    """Nonce -> instance map.

    Balance updates never touch the metadata of an instance that already
    exists. Affordability is the caller's concern.
    """

    _instances: dict[int, TokenInstance] = field(default_factory=dict)

    def get_by_nonce(self, nonce: int) -> TokenInstance | None:
        return self._instances.get(nonce)

    def set_balance(self, nonce: int, balance: int, metadata: TokenInstanceMetadata) -> None:
        if balance < 0:
            raise ValueError(f"negative balance {balance} for nonce {nonce}")
        instance = self._instances.get(nonce)
        if instance is None:
            self._instances[nonce] = TokenInstance(nonce=nonce, balance=balance, metadata=metadata)
        else:
            instance.balance = balance

    def increase_balance(self, nonce: int, delta: int, metadata: TokenInstanceMetadata) -> None:
        if delta < 0:
            raise ValueError(f"negative increase {delta} for nonce {nonce}")
        instance = self._instances.get(nonce)
        if instance is None:
            self._instances[nonce] = TokenInstance(nonce=nonce, balance=delta, metadata=metadata)
        else:
            instance.balance += delta

    def is_empty(self) -> bool:
        return not self._instances

    def nonces(self) -> list[int]:
        return sorted(self._instances)

    def __iter__(self) -> Iterator[TokenInstance]:
        for nonce in sorted(self._instances):
            yield self._instances[nonce]

    def __len__(self) -> int:
        return len(self._instances)

    def clone(self) -> TokenInstances:
        return TokenInstances({nonce: inst.clone() for nonce, inst in self._instances.items()})
