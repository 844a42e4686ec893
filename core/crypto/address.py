"""
Module 02 - Claimant Address Codec
Normalization of base58 claimant addresses to fixed-width leaf input.

Owner: Protocol/Crypto Engineer
Module ID: M02

Rules:
1. External form: base58 (Bitcoin alphabet), as printed by wallet tooling
2. Internal form: exactly 32 bytes
3. Shorter decoded values are zero-left-padded to 32 bytes
4. Longer decoded values, empty strings and foreign characters are rejected
"""
from __future__ import annotations

import base58

from core.crypto.hashing import HASH_SIZE
from core.schemas.errors import InvalidAddressException


ADDRESS_SIZE: int = HASH_SIZE


def normalize_address(address: str | bytes) -> bytes:
    """
    Normalize a claimant address to its 32-byte leaf form.

    Args:
        address: base58 string, or raw bytes of at most 32 bytes

    Returns:
        32-byte normalized address

    Raises:
        InvalidAddressException: If the address cannot be decoded or
            does not fit in 32 bytes

    Example:
        >>> normalize_address("11111111111111111111111111111111") == bytes(32)
        True
    """
    if isinstance(address, (bytes, bytearray)):
        raw = bytes(address)
        label = raw.hex()
    elif isinstance(address, str):
        label = address
        if not address:
            raise InvalidAddressException("Address must not be empty", address=address)
        try:
            raw = base58.b58decode(address)
        except ValueError as e:
            raise InvalidAddressException(
                f"Address is not valid base58: {address!r}",
                address=address,
            ) from e
    else:
        raise InvalidAddressException(
            f"Address must be a base58 string, got {type(address).__name__}",
        )

    if len(raw) > ADDRESS_SIZE:
        raise InvalidAddressException(
            f"Address decodes to {len(raw)} bytes, expected at most {ADDRESS_SIZE}",
            address=label,
        )

    return raw.rjust(ADDRESS_SIZE, b"\x00")


def encode_address(raw: bytes) -> str:
    """
    Encode a 32-byte address as base58.

    Leading zero bytes are kept as leading '1' characters, so the result
    decodes back to the same 32 bytes.
    """
    if len(raw) != ADDRESS_SIZE:
        raise InvalidAddressException(
            f"Address must be {ADDRESS_SIZE} bytes, got {len(raw)}",
            address=raw.hex(),
        )
    return base58.b58encode(raw).decode("ascii")


def canonical_address(address: str | bytes) -> str:
    """
    Return the canonical base58 spelling of an address.

    Distinct spellings of the same 32 bytes (for instance a short value and
    its zero-padded form) map to one string, which keys the scoreboard.
    """
    return encode_address(normalize_address(address))


def is_valid_address(address: str | bytes) -> bool:
    """Check whether an address normalizes without error."""
    try:
        normalize_address(address)
    except InvalidAddressException:
        return False
    return True


__all__ = [
    "ADDRESS_SIZE",
    "normalize_address",
    "encode_address",
    "canonical_address",
    "is_valid_address",
]
