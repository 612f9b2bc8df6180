"""Account token ledger: identifier -> instances, roles and freeze state."""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import StrEnum

from .token_instances import TokenInstance, TokenInstanceMetadata, TokenInstances

__all__ = ["NATIVE_TOKEN_ID", "AccountTokens", "TokenData", "TokenRole", "TokenType"]

# Reserved identifier of the native coin. Never stored in an ``AccountTokens`` map.
NATIVE_TOKEN_ID = b"NATIVE"


class TokenRole(StrEnum):
    LOCAL_MINT = "DCTRoleLocalMint"
    LOCAL_BURN = "DCTRoleLocalBurn"
    NFT_CREATE = "DCTRoleNFTCreate"
    NFT_ADD_QUANTITY = "DCTRoleNFTAddQuantity"
    NFT_BURN = "DCTRoleNFTBurn"


class TokenType(StrEnum):
    FUNGIBLE = "fungible"
    NON_FUNGIBLE = "non-fungible"
    SEMI_FUNGIBLE = "semi-fungible"
    META = "meta"

    @classmethod
    def classify(cls, nonce: int, balance: int) -> TokenType:
        if nonce == 0:
            return cls.FUNGIBLE
        if balance > 1:
            return cls.SEMI_FUNGIBLE
        return cls.NON_FUNGIBLE


@dataclass(slots=True)
class TokenData:
    token_identifier: bytes
    instances: TokenInstances = field(default_factory=TokenInstances)
    last_nonce: int = 0
    roles: set[str] = field(default_factory=set)
    frozen: bool = False

    def is_empty(self) -> bool:
        return self.instances.is_empty() and self.last_nonce == 0 and not self.roles and not self.frozen

    def get_roles(self) -> list[str]:
        return sorted(self.roles)

    def has_role(self, role: str) -> bool:
        return str(role) in self.roles

    def clone(self) -> TokenData:
        return TokenData(
            token_identifier=self.token_identifier,
            instances=self.instances.clone(),
            last_nonce=self.last_nonce,
            roles=set(self.roles),
            frozen=self.frozen,
        )


@dataclass(slots=True)
class AccountTokens:
    _tokens: dict[bytes, TokenData] = field(default_factory=dict)

    def get_by_identifier(self, identifier: bytes) -> TokenData | None:
        return self._tokens.get(identifier)

    def get_by_identifier_or_default(self, identifier: bytes) -> TokenData:
        """Return a copy, or an empty entry when the identifier is unknown."""
        existing = self._tokens.get(identifier)
        if existing is None:
            return TokenData(token_identifier=identifier)
        return existing.clone()

    def _entry(self, identifier: bytes) -> TokenData:
        if identifier == NATIVE_TOKEN_ID:
            raise ValueError("the native coin is not stored in the token ledger")
        data = self._tokens.get(identifier)
        if data is None:
            data = TokenData(token_identifier=identifier)
            self._tokens[identifier] = data
        return data

    def get_roles(self, identifier: bytes) -> list[str]:
        data = self._tokens.get(identifier)
        return data.get_roles() if data is not None else []

    def set_roles(self, identifier: bytes, roles: Iterable[str]) -> None:
        self._entry(identifier).roles = {str(role) for role in roles}

    def set_frozen(self, identifier: bytes, frozen: bool) -> None:
        self._entry(identifier).frozen = frozen

    def get_balance(self, identifier: bytes, nonce: int) -> int:
        data = self._tokens.get(identifier)
        if data is None:
            return 0
        instance = data.instances.get_by_nonce(nonce)
        return instance.balance if instance is not None else 0

    def get_instance(self, identifier: bytes, nonce: int) -> TokenInstance | None:
        data = self._tokens.get(identifier)
        if data is None:
            return None
        return data.instances.get_by_nonce(nonce)

    def set_balance(self, identifier: bytes, nonce: int, balance: int, metadata: TokenInstanceMetadata) -> None:
        data = self._entry(identifier)
        data.instances.set_balance(nonce, balance, metadata)
        data.last_nonce = max(data.last_nonce, nonce)

    def increase_balance(self, identifier: bytes, nonce: int, delta: int, metadata: TokenInstanceMetadata) -> None:
        data = self._entry(identifier)
        data.instances.increase_balance(nonce, delta, metadata)
        data.last_nonce = max(data.last_nonce, nonce)

    def __iter__(self) -> Iterator[TokenData]:
        for identifier in sorted(self._tokens):
            yield self._tokens[identifier]

    def __len__(self) -> int:
        return len(self._tokens)

    def clone(self) -> AccountTokens:
        return AccountTokens({identifier: data.clone() for identifier, data in self._tokens.items()})
