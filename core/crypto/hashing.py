"""
Module 02 - Hashing Utilities
Hashing primitives shared by the leaf encoder and the Merkle tree.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- SHA-256 hashing for raw bytes
- Commutative pair hashing (sorted concatenation)
- Canonical hashing for objects (via dumps_canonical)
- Hex encoding/decoding for 32-byte node values

Verifier Compatibility Notes:
- The on-chain verifier uses SHA-256 over the raw concatenation of its
  inputs; nothing here may add a domain prefix or length framing.
- Pair ordering is unsigned byte-wise comparison, smaller operand first.
"""
from __future__ import annotations

import hashlib
from typing import Any

from core.schemas.canonical import dumps_canonical


# Width of every leaf, node and root
HASH_SIZE: int = 32


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_pair(a: bytes, b: bytes) -> bytes:
    """
    Hash two nodes in sorted order.

    The smaller operand (unsigned lexicographic comparison) is placed first,
    so hash_pair(a, b) == hash_pair(b, a).

    Args:
        a: First node hash
        b: Second node hash

    Returns:
        32-byte SHA-256 digest of min(a, b) + max(a, b)
    """
    if a <= b:
        return sha256(a + b)
    return sha256(b + a)


def hash_canonical(obj: Any) -> bytes:
    """
    Hash an object using canonical JSON serialization.

    Rule: digest = sha256(dumps_canonical(obj).encode("utf-8"))

    Used for payload digests, never for claim leaves.
    """
    canonical_json = dumps_canonical(obj)
    return sha256(canonical_json.encode("utf-8"))


def to_hex(data: bytes) -> str:
    """
    Convert bytes to a lowercase hex string without prefix.

    This is the form the reward program client decodes with
    ``Buffer.from(value, "hex")``.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        'deadbeef'
    """
    return data.hex()


def from_hex(hex_string: str, expected_length: int | None = None) -> bytes:
    """
    Convert a hex string (optionally 0x-prefixed) to bytes.

    Args:
        hex_string: Hex string
        expected_length: Required decoded length in bytes, if any

    Returns:
        Decoded bytes

    Raises:
        ValueError: If the string has odd length, invalid characters,
                    or decodes to the wrong length
    """
    hex_content = hex_string[2:] if hex_string.startswith(("0x", "0X")) else hex_string

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length, got length {len(hex_content)}"
        )

    try:
        decoded = bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e

    if expected_length is not None and len(decoded) != expected_length:
        raise ValueError(
            f"Expected {expected_length} bytes, got {len(decoded)}"
        )
    return decoded


__all__ = [
    "HASH_SIZE",
    "sha256",
    "hash_pair",
    "hash_canonical",
    "to_hex",
    "from_hex",
]
