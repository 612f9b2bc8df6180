"""Scenario file generation for regression replay."""

from __future__ import annotations

from .generator import STEP_KINDS, ScenarioGenerator, account_to_dict, load_scenario
from .steps import ScCallStep, ScQueryStep, TxExpect

__all__ = [
    "STEP_KINDS",
    "ScCallStep",
    "ScQueryStep",
    "ScenarioGenerator",
    "TxExpect",
    "account_to_dict",
    "load_scenario",
]
