"""Account records held by the world state."""
from __future__ import annotations

from dataclasses import dataclass, field

from .account_tokens import AccountTokens
from .address import Address

__all__ = ["AccountData"]


@dataclass(slots=True)
class AccountData:
    address: Address
    nonce: int = 0
    native_balance: int = 0
    tokens: AccountTokens = field(default_factory=AccountTokens)
    storage: dict[bytes, bytes] = field(default_factory=dict)
    username: bytes = b""
    contract_path: bytes | None = None
    contract_owner: Address | None = None

    def is_contract(self) -> bool:
        return self.contract_path is not None

    def clone(self) -> AccountData:
        return AccountData(
            address=self.address,
            nonce=self.nonce,
            native_balance=self.native_balance,
            tokens=self.tokens.clone(),
            storage=dict(self.storage),
            username=self.username,
            contract_path=self.contract_path,
            contract_owner=self.contract_owner,
        )
