"""Contract base class and the API contracts use to reach the ledger."""

from __future__ import annotations

from .api import BlockchainApi, CallValueApi, ContractApi, SendApi, StorageApi, instantiate_contract
from .base import ContractBase, endpoint, view
from .token_data import DECODE_ATTRIBUTE_ERROR_PREFIX, DctTokenData

__all__ = [
    "DECODE_ATTRIBUTE_ERROR_PREFIX",
    "BlockchainApi",
    "CallValueApi",
    "ContractApi",
    "ContractBase",
    "DctTokenData",
    "SendApi",
    "StorageApi",
    "endpoint",
    "instantiate_contract",
    "view",
]
