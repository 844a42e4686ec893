"""
Test fixtures package for reward engine tests.

This package provides factory functions for creating test objects:
- common.py: Addresses, configs, leaves and events

Usage:
    from fixtures.common import make_address, make_rewards_config

    def test_something():
        config = make_rewards_config(default_reward_pool=1000)
"""

from .common import (
    FIXED_NOW,
    make_address,
    make_addresses,
    make_rewards_config,
    make_runtime_config,
    make_leaf,
    make_leaves,
    make_event,
)

__all__ = [
    "FIXED_NOW",
    "make_address",
    "make_addresses",
    "make_rewards_config",
    "make_runtime_config",
    "make_leaf",
    "make_leaves",
    "make_event",
]
