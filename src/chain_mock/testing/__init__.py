"""Test-driver facade."""
from .wrapper import BlockchainStateWrapper, ContractObjWrapper, StateChange

__all__ = ["BlockchainStateWrapper", "ContractObjWrapper", "StateChange"]
