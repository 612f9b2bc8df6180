"""Transactional world-state mock and contract execution harness."""

from __future__ import annotations

__version__ = "0.3.0"

from .config import HarnessConfig
from .errors import HarnessUsageError, ReturnCode, TxPanic
from .testing import BlockchainStateWrapper, ContractObjWrapper, StateChange
from .tx import TokenPayment, TxResult
from .world import Address, WorldState

__all__ = [
    "Address",
    "BlockchainStateWrapper",
    "ContractObjWrapper",
    "HarnessConfig",
    "HarnessUsageError",
    "ReturnCode",
    "StateChange",
    "TokenPayment",
    "TxPanic",
    "TxResult",
    "WorldState",
    "__version__",
]
