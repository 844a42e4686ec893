"""
Pytest configuration and shared fixtures for reward engine tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_address = _common.make_address
make_addresses = _common.make_addresses
make_rewards_config = _common.make_rewards_config
make_runtime_config = _common.make_runtime_config


# Environment variables read by the config layer
_COMMONS_ENV_VARS = (
    "COMMONS_REWARD_POOL",
    "COMMONS_DEFAULT_ADDRESS",
    "COMMONS_DEFAULT_EVENT_AMOUNT",
    "COMMONS_TOKENLOG_REPO",
    "COMMONS_TOKENLOG_MAX_ISSUES",
    "COMMONS_SIMULATION_SCENARIO",
    "COMMONS_LOG_LEVEL",
    "COMMONS_LOG_FILE",
    "COMMONS_PIPELINE_SILENT",
    "OFFCHAIN_PIPELINE_PAYLOAD",
)


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """
    Run every test without COMMONS_* variables, config files or caches.

    The working directory is a fresh temp dir so no commons.json is found.
    """
    from core.config.runtime import set_default_config
    from orchestrator.artifacts.io import clear_payload_cache

    for name in _COMMONS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    set_default_config(None)
    clear_payload_cache()
    yield
    set_default_config(None)
    clear_payload_cache()


@pytest.fixture
def addr_a():
    """First claimant address."""
    return make_address("A")


@pytest.fixture
def addr_b():
    """Second claimant address."""
    return make_address("B")


@pytest.fixture
def rewards_config():
    """RewardsConfig with a pool of 100."""
    return make_rewards_config()


@pytest.fixture
def runtime_config(rewards_config):
    """Offline RuntimeConfig (mock issues, no network)."""
    return make_runtime_config(rewards=rewards_config)


@pytest.fixture
def praise_service(rewards_config):
    """Fresh, silent PraiseService."""
    from core.rewards.service import PraiseService
    return PraiseService(rewards_config)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
