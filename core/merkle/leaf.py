"""
Module 02 - Claim Leaf Encoding
Canonical byte encoding of a single (address, amount) claim.

Owner: Protocol/Crypto Engineer
Module ID: M02

Leaf Rule (Hard Contract, mirrored by the reward program):
    leaf = sha256(address_32 || amount.to_bytes(8, "little"))
"""
from __future__ import annotations

from typing import Any

from core.crypto.address import normalize_address
from core.crypto.hashing import sha256
from core.schemas.errors import AmountOutOfRangeException


AMOUNT_SIZE: int = 8
MAX_AMOUNT: int = 2**64 - 1


def check_amount(amount: Any) -> int:
    """
    Validate that an amount fits an unsigned 64-bit integer.

    Args:
        amount: Candidate amount

    Returns:
        The amount as int

    Raises:
        AmountOutOfRangeException: If amount is not an integer, is negative,
            or exceeds 2**64 - 1
    """
    # bool is an int subclass but never a token amount
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise AmountOutOfRangeException(
            f"Amount must be an integer, got {type(amount).__name__}",
            amount=amount,
        )
    if amount < 0 or amount > MAX_AMOUNT:
        raise AmountOutOfRangeException(
            f"Amount {amount} outside unsigned 64-bit range",
            amount=amount,
        )
    return amount


def encode_amount(amount: int) -> bytes:
    """Encode an amount as 8 little-endian bytes."""
    return check_amount(amount).to_bytes(AMOUNT_SIZE, "little")


def encode_leaf(address: str | bytes, amount: int) -> bytes:
    """
    Compute the Merkle leaf for a claim.

    Args:
        address: base58 address (or raw bytes of at most 32 bytes)
        amount: Claimed token amount (u64)

    Returns:
        32-byte leaf hash

    Raises:
        InvalidAddressException: If the address cannot be normalized
        AmountOutOfRangeException: If the amount does not fit in u64
    """
    return sha256(normalize_address(address) + encode_amount(amount))


__all__ = [
    "AMOUNT_SIZE",
    "MAX_AMOUNT",
    "check_amount",
    "encode_amount",
    "encode_leaf",
]
