"""Creates NFTs owned by the contract and hands them to buyers."""
from __future__ import annotations

from typing import Any

from ..contract.base import ContractBase, endpoint
from ..world.address import Address

__all__ = ["NftMinter"]


class NftMinter(ContractBase):
    @endpoint("createNft")
    def create_nft(self, token_id: bytes, amount: int, name: bytes, attributes: Any) -> int:
        self.require(self.blockchain.get_caller() == self.blockchain.get_owner_address(), "Only owner")
        return self.send.nft_create(token_id, amount, name=name, attributes=attributes)

    @endpoint("addQuantity")
    def add_quantity(self, token_id: bytes, nonce: int, amount: int) -> None:
        self.send.nft_add_quantity(token_id, nonce, amount)

    @endpoint("giveNft")
    def give_nft(self, to: Address, token_id: bytes, nonce: int, amount: int) -> None:
        self.send.direct_dct(to, token_id, nonce, amount)

    @endpoint("burnNft")
    def burn_nft(self, token_id: bytes, nonce: int, amount: int) -> None:
        self.send.nft_burn(token_id, nonce, amount)
