"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    ensure_utc,
    format_datetime_canonical,
)

# Error models and exceptions
from .errors import (
    AmountOutOfRangeException,
    BatchMissingException,
    CanonicalizationException,
    ClaimNotFoundException,
    ErrorCodes,
    IndexOutOfRangeException,
    InsufficientRewardPoolException,
    InvalidAddressException,
    RewardsError,
    RewardsException,
)

# Reward schemas
from .rewards import (
    Claim,
    ClaimProof,
    LabelEvent,
    PraiseEvent,
    PraiseInput,
    RewardBatch,
    StructuredEvent,
    parse_event,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    "ensure_utc",
    "format_datetime_canonical",
    # Errors
    "AmountOutOfRangeException",
    "BatchMissingException",
    "CanonicalizationException",
    "ClaimNotFoundException",
    "ErrorCodes",
    "IndexOutOfRangeException",
    "InsufficientRewardPoolException",
    "InvalidAddressException",
    "RewardsError",
    "RewardsException",
    # Rewards
    "Claim",
    "ClaimProof",
    "LabelEvent",
    "PraiseEvent",
    "PraiseInput",
    "RewardBatch",
    "StructuredEvent",
    "parse_event",
]
