"""
Common test fixtures shared by all modules.

Provides factory functions for core reward engine data structures:
- Claimant addresses (deterministic base58 strings)
- RewardsConfig / RuntimeConfig
- Leaves and claim lists
- Praise events

These are the foundational building blocks used by higher-level fixtures.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from core.config.runtime import (
    HttpConfig,
    RewardsConfig,
    RuntimeConfig,
    SimulationConfig,
    TokenlogConfig,
)
from core.crypto.address import encode_address
from core.crypto.hashing import sha256
from core.merkle.leaf import encode_leaf


# Fixed instant for reproducible timestamps
FIXED_NOW = datetime(2026, 1, 27, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Address Factories
# =============================================================================

def make_address(seed: int | str = 0) -> str:
    """
    Create a deterministic 32-byte base58 address.

    Args:
        seed: Any int or string; equal seeds give equal addresses.

    Returns:
        Canonical base58 address string.
    """
    return encode_address(sha256(f"claimant:{seed}".encode("utf-8")))


def make_addresses(count: int) -> list[str]:
    """Create `count` distinct addresses."""
    return [make_address(i) for i in range(count)]


# =============================================================================
# Config Factories
# =============================================================================

def make_rewards_config(
    default_reward_pool: int = 100,
    default_address: Optional[str] = None,
    default_event_amount: int = 1,
) -> RewardsConfig:
    """
    Create a RewardsConfig for testing.

    The default pool is 100 so split results read as percentages.
    """
    return RewardsConfig(
        default_reward_pool=default_reward_pool,
        default_address=default_address or make_address("default"),
        default_event_amount=default_event_amount,
    )


def make_runtime_config(
    rewards: Optional[RewardsConfig] = None,
    repo: Optional[str] = None,
) -> RuntimeConfig:
    """
    Create a RuntimeConfig that never touches the network.

    Args:
        rewards: Reward defaults (make_rewards_config() when None).
        repo: Tokenlog repo; None keeps the mock issue list.
    """
    return RuntimeConfig(
        rewards=rewards or make_rewards_config(),
        tokenlog=TokenlogConfig(repo=repo, max_issues=4),
        simulation=SimulationConfig(),
        http=HttpConfig(timeout=1.0, max_retries=0),
    )


# =============================================================================
# Leaf & Event Factories
# =============================================================================

def make_leaf(seed: int | str = 0, amount: int = 1) -> bytes:
    """Leaf for (make_address(seed), amount)."""
    return encode_leaf(make_address(seed), amount)


def make_leaves(count: int) -> list[bytes]:
    """`count` distinct leaves, amounts 1..count."""
    return [make_leaf(i, i + 1) for i in range(count)]


def make_event(
    address: Optional[str] = None,
    amount: Optional[int] = 1,
    **metadata: Any,
) -> dict[str, Any]:
    """Create a structured praise event record."""
    event: dict[str, Any] = {"address": address or make_address(0)}
    if amount is not None:
        event["amount"] = amount
    event.update(metadata)
    return event
