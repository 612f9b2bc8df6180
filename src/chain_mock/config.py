"""Harness configuration."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .tx.input import MAX_GAS_LIMIT

__all__ = ["HarnessConfig"]


@dataclass(slots=True)
class HarnessConfig:
    scenario_dir: Path = field(default_factory=lambda: Path.cwd() / "scenarios")
    default_gas_limit: int = MAX_GAS_LIMIT
    default_gas_price: int = 0
    max_call_depth: int = 64
    gas_schedule: str = "v4"

    def __post_init__(self) -> None:
        self.scenario_dir = Path(self.scenario_dir)
        if self.default_gas_limit < 0 or self.default_gas_price < 0:
            raise ValueError("gas limit and gas price must be non-negative")
        if self.max_call_depth < 1:
            raise ValueError("max_call_depth must be at least 1")
