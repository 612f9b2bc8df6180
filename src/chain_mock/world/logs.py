"""Event logs emitted by contracts."""
from __future__ import annotations

from dataclasses import dataclass, field

from .address import Address

__all__ = ["TxLog"]


@dataclass(slots=True, frozen=True)
class TxLog:
    address: Address
    endpoint: str
    identifier: bytes
    topics: tuple[bytes, ...] = field(default_factory=tuple)
    data: bytes = b""
