"""Canonical in-memory world state."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..errors import AccountNotFoundError, TokenAlreadyIssuedError
from .account import AccountData
from .address import Address
from .block_info import BlockInfo
from .contracts import ContractRegistry
from .logs import TxLog

__all__ = ["WorldState"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WorldState:
    """Address -> account map plus block metadata and loaded contracts.

    Owned by a single harness. Transaction caches read it through
    ``get_account`` and only the harness teardown writes to it, by folding a
    cache's overlay back in.
    """

    accounts: dict[Address, AccountData] = field(default_factory=dict)
    current_block_info: BlockInfo = field(default_factory=BlockInfo)
    previous_block_info: BlockInfo = field(default_factory=BlockInfo)
    issued_tokens: dict[bytes, Address] = field(default_factory=dict)
    logs: list[TxLog] = field(default_factory=list)
    contracts: ContractRegistry = field(default_factory=ContractRegistry, compare=False, repr=False)

    def add_account(self, account: AccountData) -> None:
        self.accounts[account.address] = account
        logger.debug("account %s added", account.address)

    def get_account(self, address: Address) -> AccountData | None:
        return self.accounts.get(address)

    def require_account(self, address: Address, operation: str) -> AccountData:
        account = self.accounts.get(address)
        if account is None:
            raise AccountNotFoundError(operation, address.to_hex())
        return account

    def contains_contract(self, code: bytes) -> bool:
        return self.contracts.contains(code)

    def issue_token(self, identifier: bytes, owner: Address) -> None:
        if identifier in self.issued_tokens:
            raise TokenAlreadyIssuedError(f"token {identifier.decode(errors='replace')} was already issued")
        self.issued_tokens[identifier] = owner
