"""
Core cryptographic utilities.

Module 02 provides hashing and the claimant address codec.
"""
from .hashing import (
    HASH_SIZE,
    sha256,
    hash_pair,
    hash_canonical,
    to_hex,
    from_hex,
)
from .address import (
    ADDRESS_SIZE,
    normalize_address,
    encode_address,
    canonical_address,
    is_valid_address,
)

__all__ = [
    "HASH_SIZE",
    "sha256",
    "hash_pair",
    "hash_canonical",
    "to_hex",
    "from_hex",
    "ADDRESS_SIZE",
    "normalize_address",
    "encode_address",
    "canonical_address",
    "is_valid_address",
]
