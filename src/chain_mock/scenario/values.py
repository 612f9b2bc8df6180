"""Value expressions of the scenario format."""
from __future__ import annotations

from ..world.address import Address

__all__ = ["address_expr", "biguint_expr", "bool_expr", "bytes_expr", "str_expr"]


def biguint_expr(value: int) -> str:
    if value < 0:
        raise ValueError(f"unsigned value expected, got {value}")
    return str(value)


def bytes_expr(value: bytes) -> str:
    return "0x" + value.hex() if value else ""


def str_expr(value: bytes) -> str:
    """``str:`` form for printable ASCII, hex otherwise."""
    if value and all(0x20 <= byte < 0x7F for byte in value):
        return "str:" + value.decode("ascii")
    return bytes_expr(value)


def address_expr(address: Address) -> str:
    return address.to_hex()


def bool_expr(value: bool) -> str:
    return "true" if value else "false"
