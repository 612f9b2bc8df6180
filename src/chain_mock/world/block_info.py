"""Block metadata visible to contracts."""
from __future__ import annotations

from dataclasses import dataclass, field

__all__ = ["RANDOM_SEED_LENGTH", "BlockInfo"]

RANDOM_SEED_LENGTH = 48


@dataclass(slots=True)
class BlockInfo:
    block_timestamp: int = 0
    block_nonce: int = 0
    block_round: int = 0
    block_epoch: int = 0
    block_random_seed: bytes = field(default_factory=lambda: bytes(RANDOM_SEED_LENGTH))

    def __post_init__(self) -> None:
        if len(self.block_random_seed) != RANDOM_SEED_LENGTH:
            raise ValueError(f"block random seed must be {RANDOM_SEED_LENGTH} bytes")

    def clone(self) -> BlockInfo:
        return BlockInfo(
            block_timestamp=self.block_timestamp,
            block_nonce=self.block_nonce,
            block_round=self.block_round,
            block_epoch=self.block_epoch,
            block_random_seed=self.block_random_seed,
        )
