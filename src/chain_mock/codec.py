"""Top-level value encoding used for call arguments and token attributes.

Only the primitive shapes a test needs are covered: unsigned and signed
integers in minimal big-endian form, booleans, byte strings, text and
addresses.
"""
from __future__ import annotations

from typing import Any

from .world.address import ADDRESS_LENGTH, Address

__all__ = ["top_decode", "top_encode"]


def _encode_signed(value: int) -> bytes:
    if value == 0:
        return b""
    length = 1
    while True:
        try:
            return value.to_bytes(length, "big", signed=True)
        except OverflowError:
            length += 1


def top_encode(value: Any) -> bytes:
    if isinstance(value, bool):
        return b"\x01" if value else b""
    if isinstance(value, int):
        if value < 0:
            return _encode_signed(value)
        return value.to_bytes((value.bit_length() + 7) // 8, "big") if value else b""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode()
    if isinstance(value, Address):
        return value.raw
    raise TypeError(f"cannot top-encode value of type {type(value).__name__}")


def top_decode(data: bytes, kind: type) -> Any:
    """Decode ``data`` as ``kind`` (``int``, ``bool``, ``bytes``, ``str`` or ``Address``)."""
    if kind is bool:
        if data == b"":
            return False
        if data == b"\x01":
            return True
        raise ValueError(f"invalid bool encoding 0x{data.hex()}")
    if kind is int:
        return int.from_bytes(data, "big", signed=False)
    if kind is bytes:
        return bytes(data)
    if kind is str:
        try:
            return data.decode()
        except UnicodeDecodeError as exc:
            raise ValueError(f"invalid utf-8 payload: {exc}") from exc
    if kind is Address:
        if len(data) != ADDRESS_LENGTH:
            raise ValueError(f"address payload must be {ADDRESS_LENGTH} bytes, got {len(data)}")
        return Address(data)
    raise TypeError(f"cannot top-decode into {kind!r}")
