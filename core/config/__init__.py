"""
Runtime Configuration Module

Provides configuration loading and management for the reward engine.
"""

from .runtime import (
    DEFAULT_CLAIMANT,
    HttpConfig,
    RewardsConfig,
    RuntimeConfig,
    SimulationConfig,
    TokenlogConfig,
    get_default_config,
    load_runtime_config,
    set_default_config,
)

__all__ = [
    "DEFAULT_CLAIMANT",
    "HttpConfig",
    "RewardsConfig",
    "RuntimeConfig",
    "SimulationConfig",
    "TokenlogConfig",
    "get_default_config",
    "load_runtime_config",
    "set_default_config",
]
