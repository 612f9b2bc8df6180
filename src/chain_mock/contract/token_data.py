"""Read model of a single token instance as seen by a contract."""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..codec import top_decode
from ..errors import TxPanic
from ..world.account_tokens import TokenData, TokenType
from ..world.address import Address

__all__ = ["DECODE_ATTRIBUTE_ERROR_PREFIX", "DctTokenData"]

DECODE_ATTRIBUTE_ERROR_PREFIX = "error decoding DCT attributes: "


@dataclass(slots=True, frozen=True)
class DctTokenData:
    token_type: TokenType
    amount: int = 0
    frozen: bool = False
    hash: bytes = b""
    name: bytes = b""
    attributes: bytes = b""
    creator: Address | None = None
    royalties: int = 0
    uris: tuple[bytes, ...] = field(default_factory=tuple)

    @classmethod
    def from_ledger(cls, data: TokenData | None, nonce: int) -> DctTokenData:
        instance = data.instances.get_by_nonce(nonce) if data is not None else None
        if instance is None:
            return cls(token_type=TokenType.classify(nonce, 0), frozen=bool(data and data.frozen))
        metadata = instance.metadata
        return cls(
            token_type=TokenType.classify(nonce, instance.balance),
            amount=instance.balance,
            frozen=data.frozen,
            hash=metadata.hash or b"",
            name=metadata.name,
            attributes=metadata.attributes,
            creator=metadata.creator,
            royalties=metadata.royalties,
            uris=(metadata.uri,) if metadata.uri is not None else (),
        )

    def decode_attributes(self, decoder: type | Callable[[bytes], Any] = bytes) -> Any:
        """Decode the attribute payload, aborting the call when it is malformed."""
        try:
            if isinstance(decoder, type):
                return top_decode(self.attributes, decoder)
            return decoder(self.attributes)
        except (TypeError, ValueError) as exc:
            raise TxPanic.user_error(f"{DECODE_ATTRIBUTE_ERROR_PREFIX}{exc}") from exc
