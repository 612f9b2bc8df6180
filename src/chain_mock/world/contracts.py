"""Registry of loaded contract implementations keyed by code identifier."""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

from ..errors import ContractRegistrationError

if TYPE_CHECKING:
    from ..contract.api import ContractApi

__all__ = ["ContractFactory", "ContractRegistry"]

logger = logging.getLogger(__name__)

ContractFactory = Callable[["ContractApi"], Any]


class ContractRegistry:
    def __init__(self) -> None:
        self._factories: dict[bytes, ContractFactory] = {}

    def register(self, code: bytes, factory: ContractFactory, *, replace: bool = False) -> None:
        if not callable(factory):
            raise ContractRegistrationError(f"factory for {code!r} is not callable")
        if code in self._factories and not replace:
            raise ContractRegistrationError(f"contract code {code!r} is already registered")
        self._factories[code] = factory
        logger.debug("registered contract code %r", code)

    def contains(self, code: bytes) -> bool:
        return code in self._factories

    def get(self, code: bytes) -> ContractFactory | None:
        return self._factories.get(code)

    def __iter__(self) -> Iterator[bytes]:
        return iter(sorted(self._factories))

    def __len__(self) -> int:
        return len(self._factories)
