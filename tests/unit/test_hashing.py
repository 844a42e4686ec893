"""
Module 02 - Hashing Unit Tests
Tests for core/crypto/hashing.py

Tests:
- sha256 known values
- hash_pair commutativity and sorted-concatenation rule
- hash_canonical stability for dict key ordering differences
- to_hex/from_hex round trip and validation
"""
import hashlib
import pytest

from core.crypto.hashing import (
    HASH_SIZE,
    sha256,
    hash_pair,
    hash_canonical,
    to_hex,
    from_hex,
)


class TestSha256:
    """Tests for sha256() function."""

    def test_sha256_known_value(self):
        """Test sha256 produces correct hash for known input."""
        result = sha256(b"hello")

        assert result.hex() == "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
        assert len(result) == HASH_SIZE

    def test_sha256_empty_bytes(self):
        """Test sha256 of empty bytes."""
        assert sha256(b"") == hashlib.sha256(b"").digest()

    def test_sha256_different_inputs_different_outputs(self):
        assert sha256(b"input1") != sha256(b"input2")


class TestHashPair:
    """Tests for hash_pair() - the sorted parent hash."""

    def test_commutative(self):
        """hash_pair(a, b) == hash_pair(b, a)."""
        a = sha256(b"a")
        b = sha256(b"b")

        assert hash_pair(a, b) == hash_pair(b, a)

    def test_smaller_operand_first(self):
        """The byte-wise smaller node is hashed first."""
        low = b"\x00" * 31 + b"\x01"
        high = b"\xff" * 32

        assert hash_pair(high, low) == hashlib.sha256(low + high).digest()
        assert hash_pair(low, high) == hashlib.sha256(low + high).digest()

    def test_comparison_is_unsigned(self):
        """0x80 sorts after 0x7f (no signed byte comparison)."""
        a = b"\x80" + b"\x00" * 31
        b = b"\x7f" + b"\xff" * 31

        assert hash_pair(a, b) == hashlib.sha256(b + a).digest()

    def test_pair_with_itself(self):
        node = sha256(b"lonely")
        assert hash_pair(node, node) == hashlib.sha256(node + node).digest()


class TestHashCanonical:
    """Tests for hash_canonical() function."""

    def test_hash_canonical_stable_for_key_order(self):
        """Dicts with different key order hash identically."""
        obj1 = {"b": 2, "a": 1, "c": {"y": True, "x": None}}
        obj2 = {"c": {"x": None, "y": True}, "a": 1, "b": 2}

        assert hash_canonical(obj1) == hash_canonical(obj2)

    def test_hash_canonical_differs_on_value(self):
        assert hash_canonical({"a": 1}) != hash_canonical({"a": 2})


class TestHexConversion:
    """Tests for to_hex() and from_hex()."""

    def test_to_hex_has_no_prefix(self):
        assert to_hex(bytes.fromhex("deadbeef")) == "deadbeef"

    def test_round_trip(self):
        data = sha256(b"round trip")
        assert from_hex(to_hex(data)) == data

    def test_from_hex_accepts_prefix(self):
        assert from_hex("0xdeadbeef") == bytes.fromhex("deadbeef")
        assert from_hex("0XDEADBEEF") == bytes.fromhex("deadbeef")

    def test_from_hex_odd_length_raises(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("abc")

    def test_from_hex_invalid_characters_raises(self):
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("zz")

    def test_from_hex_expected_length(self):
        assert len(from_hex("00" * 32, expected_length=32)) == 32
        with pytest.raises(ValueError, match="Expected 32 bytes"):
            from_hex("00" * 31, expected_length=32)
