"""Tests for top-level value encoding."""
from __future__ import annotations

import pytest

from chain_mock.codec import top_decode, top_encode
from chain_mock.world.address import Address


def test_integers_use_minimal_big_endian():
    assert top_encode(0) == b""
    assert top_encode(255) == b"\xff"
    assert top_encode(256) == b"\x01\x00"
    assert top_encode(-1) == b"\xff"
    assert top_encode(-129) == b"\xff\x7f"


def test_bool_and_text():
    assert top_encode(True) == b"\x01"
    assert top_encode(False) == b""
    assert top_encode("abc") == b"abc"
    assert top_decode(b"", bool) is False
    assert top_decode(b"abc", str) == "abc"


def test_address_decoding_checks_length():
    address = Address.from_name("alice")
    assert top_decode(top_encode(address), Address) == address
    with pytest.raises(ValueError):
        top_decode(b"\x01", Address)


def test_unsupported_values():
    with pytest.raises(TypeError):
        top_encode(1.5)
    with pytest.raises(TypeError):
        top_decode(b"", float)
    with pytest.raises(ValueError):
        top_decode(b"\x02", bool)
