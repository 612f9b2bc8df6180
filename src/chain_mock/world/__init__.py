"""World state model: addresses, accounts, token ledgers and block metadata."""

from __future__ import annotations

from .account import AccountData
from .account_tokens import NATIVE_TOKEN_ID, AccountTokens, TokenData, TokenRole, TokenType
from .address import ADDRESS_LENGTH, Address, AddressFactory
from .block_info import RANDOM_SEED_LENGTH, BlockInfo
from .contracts import ContractFactory, ContractRegistry
from .logs import TxLog
from .state import WorldState
from .token_instances import TokenInstance, TokenInstanceMetadata, TokenInstances

__all__ = [
    "ADDRESS_LENGTH",
    "NATIVE_TOKEN_ID",
    "RANDOM_SEED_LENGTH",
    "AccountData",
    "AccountTokens",
    "Address",
    "AddressFactory",
    "BlockInfo",
    "ContractFactory",
    "ContractRegistry",
    "TokenData",
    "TokenInstance",
    "TokenInstanceMetadata",
    "TokenInstances",
    "TokenRole",
    "TokenType",
    "TxLog",
    "WorldState",
]
