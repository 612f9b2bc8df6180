"""Sample contracts used by the test suite and the ``demo`` command."""

from __future__ import annotations

from .adder import Adder
from .forwarder import Forwarder
from .nft_minter import NftMinter
from .wrapped_native import WrappedNative

__all__ = ["Adder", "Forwarder", "NftMinter", "WrappedNative"]
