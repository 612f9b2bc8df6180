"""Minimal stateful contract: keeps a running sum in storage."""
from __future__ import annotations

from ..contract.base import ContractBase, endpoint, view

__all__ = ["Adder"]

SUM_KEY = b"sum"


class Adder(ContractBase):
    @endpoint
    def init(self, initial_value: int) -> None:
        self.storage.set(SUM_KEY, initial_value)

    @endpoint
    def add(self, value: int) -> None:
        self.require(value >= 0, "negative value")
        self.storage.set(SUM_KEY, self.get_sum() + value)

    @view("getSum")
    def get_sum(self) -> int:
        return self.storage.get_as(SUM_KEY, int)
