"""Scenario reporting."""

from __future__ import annotations

from .summary import ScenarioSummary

__all__ = ["ScenarioSummary"]
