"""Fixed-width account addresses."""
from __future__ import annotations

from dataclasses import dataclass

__all__ = ["ADDRESS_LENGTH", "Address", "AddressFactory"]

ADDRESS_LENGTH = 32

# Contract addresses carry a leading run of zero bytes, like the VM allocates them.
_SC_ADDRESS_ZERO_PREFIX = 8


@dataclass(slots=True, frozen=True, order=True)
class Address:
    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray)):
            raise TypeError("address must be bytes")
        if len(self.raw) != ADDRESS_LENGTH:
            raise ValueError(f"address must be {ADDRESS_LENGTH} bytes, got {len(self.raw)}")
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def zero(cls) -> Address:
        return cls(bytes(ADDRESS_LENGTH))

    @classmethod
    def from_hex(cls, text: str) -> Address:
        cleaned = text[2:] if text.startswith("0x") else text
        try:
            return cls(bytes.fromhex(cleaned))
        except ValueError as exc:
            raise ValueError(f"Invalid address hex '{text}': {exc}") from exc

    @classmethod
    def from_name(cls, name: str) -> Address:
        """Right-pad a readable name with ``_`` into a full address."""
        encoded = name.encode()
        if len(encoded) > ADDRESS_LENGTH:
            raise ValueError(f"address name '{name}' is longer than {ADDRESS_LENGTH} bytes")
        return cls(encoded.ljust(ADDRESS_LENGTH, b"_"))

    def to_hex(self) -> str:
        return "0x" + self.raw.hex()

    def is_smart_contract(self) -> bool:
        return self.raw[:_SC_ADDRESS_ZERO_PREFIX] == bytes(_SC_ADDRESS_ZERO_PREFIX)

    def __str__(self) -> str:
        return self.to_hex()


class AddressFactory:
    """Hands out unique user and contract addresses from two counters."""

    def __init__(self) -> None:
        self._last_user = 0
        self._last_sc = 0

    def new_address(self) -> Address:
        self._last_user += 1
        # user addresses never start with the contract zero prefix
        raw = b"\x01" + self._last_user.to_bytes(ADDRESS_LENGTH - 1, "big")
        return Address(raw)

    def new_sc_address(self) -> Address:
        self._last_sc += 1
        counter = self._last_sc.to_bytes(ADDRESS_LENGTH - _SC_ADDRESS_ZERO_PREFIX, "big")
        return Address(bytes(_SC_ADDRESS_ZERO_PREFIX) + counter)
