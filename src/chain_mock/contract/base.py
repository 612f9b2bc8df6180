"""Base class for Python contracts run by the harness."""
from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any, ClassVar, TypeVar

from ..errors import ReturnCode, TxPanic
from .api import BlockchainApi, CallValueApi, ContractApi, SendApi, StorageApi

__all__ = ["ContractBase", "endpoint", "view"]

F = TypeVar("F", bound=Callable[..., Any])


def endpoint(name: str | Callable[..., Any] | None = None) -> Any:
    """Expose a method to nested calls, optionally under an external name.

    Usable bare (``@endpoint``) or with a name (``@endpoint("wrapMoax")``).
    """
    if callable(name):
        name.__endpoint_name__ = name.__name__  # type: ignore[attr-defined]
        return name

    def decorate(func: F) -> F:
        func.__endpoint_name__ = name or func.__name__  # type: ignore[attr-defined]
        return func

    return decorate


def view(name: str | Callable[..., Any] | None = None) -> Any:
    if callable(name):
        endpoint(name)
        name.__is_view__ = True  # type: ignore[attr-defined]
        return name

    def decorate(func: F) -> F:
        endpoint(name)(func)
        func.__is_view__ = True  # type: ignore[attr-defined]
        return func

    return decorate


class ContractBase:
    """Contracts subclass this and receive the frame's ``ContractApi``.

    Test drivers call methods directly inside ``execute_tx``; nested calls
    reach only methods marked with ``@endpoint`` or ``@view``.
    """

    _endpoints: ClassVar[dict[str, str]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        endpoints: dict[str, str] = {}
        for klass in reversed(cls.__mro__):
            for attr_name, attr in vars(klass).items():
                external = getattr(attr, "__endpoint_name__", None)
                if external is not None:
                    endpoints[external] = attr_name
        cls._endpoints = endpoints

    def __init__(self, api: ContractApi) -> None:
        self.api = api

    @property
    def blockchain(self) -> BlockchainApi:
        return self.api.blockchain

    @property
    def call_value(self) -> CallValueApi:
        return self.api.call_value

    @property
    def storage(self) -> StorageApi:
        return self.api.storage

    @property
    def send(self) -> SendApi:
        return self.api.send

    def require(self, condition: bool, message: str) -> None:
        self.api.require(condition, message)

    def sc_panic(self, message: str) -> None:
        self.api.sc_panic(message)

    @classmethod
    def endpoint_names(cls) -> list[str]:
        return sorted(cls._endpoints)

    def call_endpoint(self, name: str, args: tuple[Any, ...]) -> Any:
        attr_name = self._endpoints.get(name)
        if attr_name is None:
            raise TxPanic(ReturnCode.FUNCTION_NOT_FOUND, "invalid function (not found)")
        method = getattr(self, attr_name)
        try:
            inspect.signature(method).bind(*args)
        except TypeError as exc:
            raise TxPanic(ReturnCode.FUNCTION_WRONG_SIGNATURE, "wrong number of arguments") from exc
        return method(*args)
