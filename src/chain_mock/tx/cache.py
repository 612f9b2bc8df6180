"""Copy-on-write transaction cache and its balance operations."""
from __future__ import annotations

import logging
from enum import StrEnum
from typing import Protocol

from ..errors import CacheStateError, TxPanic
from ..world.account import AccountData
from ..world.account_tokens import NATIVE_TOKEN_ID
from ..world.address import Address
from ..world.token_instances import TokenInstanceMetadata

__all__ = ["AccountSource", "TxCache"]

logger = logging.getLogger(__name__)


class AccountSource(Protocol):
    def get_account(self, address: Address) -> AccountData | None: ...

    def add_account(self, account: AccountData) -> None: ...


class _CacheStatus(StrEnum):
    OPEN = "open"
    FOLDED = "folded"
    DISCARDED = "discarded"


class TxCache:
    """Private account overlay on top of a read-only source.

    The source is the world state for a top-level transaction, or the
    caller's cache for a nested call. Reads fall through to the source when
    the overlay has no copy of the account; the first write to an account
    copies it into the overlay. The source is never written before
    ``fold_into`` runs, and a cache folds at most once.
    """

    def __init__(self, source: AccountSource) -> None:
        self._source = source
        self._overlay: dict[Address, AccountData] = {}
        self._status = _CacheStatus.OPEN

    @property
    def source(self) -> AccountSource:
        return self._source

    @property
    def is_open(self) -> bool:
        return self._status is _CacheStatus.OPEN

    def _ensure_open(self, operation: str) -> None:
        if self._status is not _CacheStatus.OPEN:
            raise CacheStateError(f"cannot {operation}: transaction cache is already {self._status.value}")

    # reads

    def get_account(self, address: Address) -> AccountData | None:
        account = self._overlay.get(address)
        if account is not None:
            return account
        return self._source.get_account(address)

    def native_balance(self, address: Address) -> int:
        account = self.get_account(address)
        return account.native_balance if account is not None else 0

    def token_balance(self, address: Address, identifier: bytes, nonce: int) -> int:
        if identifier == NATIVE_TOKEN_ID:
            return self.native_balance(address)
        account = self.get_account(address)
        return account.tokens.get_balance(identifier, nonce) if account is not None else 0

    def storage_get(self, address: Address, key: bytes) -> bytes:
        account = self.get_account(address)
        if account is None:
            return b""
        return account.storage.get(key, b"")

    def modified_addresses(self) -> list[Address]:
        return sorted(self._overlay)

    # writes

    def account_for_write(self, address: Address) -> AccountData:
        """Return the overlay copy of an account, creating it on first reference."""
        self._ensure_open("write")
        account = self._overlay.get(address)
        if account is None:
            base = self._source.get_account(address)
            account = base.clone() if base is not None else AccountData(address=address)
            self._overlay[address] = account
        return account

    def add_account(self, account: AccountData) -> None:
        self._ensure_open("write")
        self._overlay[account.address] = account

    def storage_set(self, address: Address, key: bytes, value: bytes) -> None:
        storage = self.account_for_write(address).storage
        if value:
            storage[key] = bytes(value)
        else:
            storage.pop(key, None)

    def subtract_native(self, address: Address, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"cannot subtract a negative amount ({amount})")
        if self.native_balance(address) < amount:
            raise TxPanic.insufficient_funds()
        self.account_for_write(address).native_balance -= amount

    def increase_native(self, address: Address, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"cannot increase by a negative amount ({amount})")
        self.account_for_write(address).native_balance += amount

    def transfer_native(self, from_address: Address, to: Address, amount: int) -> None:
        self.subtract_native(from_address, amount)
        self.increase_native(to, amount)

    def subtract_gas(self, address: Address, gas_limit: int, gas_price: int) -> None:
        if gas_limit < 0 or gas_price < 0:
            raise ValueError(f"gas limit and price must be non-negative ({gas_limit}, {gas_price})")
        gas_cost = gas_limit * gas_price
        if self.native_balance(address) < gas_cost:
            raise TxPanic.gas_upfront()
        self.account_for_write(address).native_balance -= gas_cost

    def subtract_token(self, address: Address, identifier: bytes, nonce: int, amount: int) -> TokenInstanceMetadata:
        """Debit a token instance and return its metadata for re-crediting elsewhere."""
        if amount < 0:
            raise ValueError(f"cannot subtract a negative amount ({amount})")
        account = self.get_account(address)
        if account is None:
            raise TxPanic.insufficient_funds()
        instance = account.tokens.get_instance(identifier, nonce)
        if instance is None or instance.balance < amount:
            raise TxPanic.insufficient_funds()

        writable = self.account_for_write(address).tokens.get_instance(identifier, nonce)
        if writable is None:
            raise CacheStateError(f"instance {identifier!r}/{nonce} vanished from the overlay")
        writable.balance -= amount
        return writable.metadata

    def increase_token(
        self,
        address: Address,
        identifier: bytes,
        nonce: int,
        amount: int,
        metadata: TokenInstanceMetadata,
    ) -> None:
        self.account_for_write(address).tokens.increase_balance(identifier, nonce, amount, metadata)

    def transfer_token(self, from_address: Address, to: Address, identifier: bytes, nonce: int, amount: int) -> None:
        metadata = self.subtract_token(from_address, identifier, nonce, amount)
        self.increase_token(to, identifier, nonce, amount, metadata)

    def transfer_value(self, from_address: Address, to: Address, identifier: bytes, nonce: int, amount: int) -> None:
        """Move native coin or a token instance depending on ``identifier``."""
        if identifier == NATIVE_TOKEN_ID:
            self.transfer_native(from_address, to, amount)
        else:
            self.transfer_token(from_address, to, identifier, nonce, amount)

    # lifecycle

    def fold_into(self, target: AccountSource) -> None:
        """Apply every overlay account to ``target``. Allowed exactly once."""
        self._ensure_open("fold")
        for address in sorted(self._overlay):
            target.add_account(self._overlay[address])
        self._status = _CacheStatus.FOLDED
        logger.debug("folded %d account(s)", len(self._overlay))

    def fold_into_source(self) -> None:
        self.fold_into(self._source)

    def discard(self) -> None:
        self._ensure_open("discard")
        self._overlay.clear()
        self._status = _CacheStatus.DISCARDED
