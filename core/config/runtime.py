"""
Runtime Configuration

Central configuration for the reward engine and its off-chain collaborators.
Every default lives here; nothing reads process-wide state at scoring time.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


# System program id: decodes to 32 zero bytes
DEFAULT_CLAIMANT = "11111111111111111111111111111111"


@dataclass
class RewardsConfig:
    """Defaults consumed by the scoreboard."""
    default_reward_pool: int = 1000
    default_address: str = DEFAULT_CLAIMANT
    default_event_amount: int = 1

    def __post_init__(self):
        if self.default_reward_pool < 0:
            raise ValueError(
                f"default_reward_pool must be non-negative, got {self.default_reward_pool}"
            )

    @property
    def event_amount(self) -> int:
        """Amount credited for events that carry none (never below 1)."""
        return max(self.default_event_amount, 1)


def _default_mock_issues() -> list[dict[str, Any]]:
    return [
        {
            "id": 1,
            "title": "Document the reward claim flow",
            "url": "https://github.com/commons/rewards/issues/1",
            "createdAt": "2024-01-01T00:00:00Z",
            "author": "commons-steward",
            "comments": 0,
        },
        {
            "id": 2,
            "title": "Add conviction voting dashboard",
            "url": "https://github.com/commons/rewards/issues/2",
            "createdAt": "2024-01-02T00:00:00Z",
            "author": "commons-steward",
            "comments": 3,
        },
    ]


def _default_mock_balances() -> list[dict[str, Any]]:
    return [
        {"address": DEFAULT_CLAIMANT, "balance": 0},
    ]


@dataclass
class TokenlogConfig:
    """Configuration for the issue fetcher and balance sampler."""
    repo: Optional[str] = None  # "owner/name"; mock issues when unset
    max_issues: int = 4
    api_base: str = "https://api.github.com"
    mock_issues: list[dict[str, Any]] = field(default_factory=_default_mock_issues)
    mock_balances: list[dict[str, Any]] = field(default_factory=_default_mock_balances)


@dataclass
class SimulationConfig:
    """Configuration for the scenario simulator."""
    scenario: str = "baseline"
    params: dict[str, Any] = field(
        default_factory=lambda: {"fundingRatio": 0.6, "convictionDecay": 0.5}
    )
    metrics: dict[str, Any] = field(
        default_factory=lambda: {"confidence": 0.8, "projectedPayout": 1000}
    )


@dataclass
class HttpConfig:
    """Configuration for HTTP client."""
    timeout: float = 10.0
    max_retries: int = 1
    retry_backoff: float = 0.0
    user_agent: str = "sol-commons-tokenlog"


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML or JSON file
    - Programmatic construction
    """
    rewards: RewardsConfig = field(default_factory=RewardsConfig)
    tokenlog: TokenlogConfig = field(default_factory=TokenlogConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - COMMONS_REWARD_POOL: Reward pool split per batch
        - COMMONS_DEFAULT_ADDRESS: Claimant for events without an address
        - COMMONS_DEFAULT_EVENT_AMOUNT: Score for events without an amount
        - COMMONS_TOKENLOG_REPO: GitHub repo ("owner/name") for issues
        - COMMONS_TOKENLOG_MAX_ISSUES: Issues per fetch
        - COMMONS_SIMULATION_SCENARIO: Scenario label
        """
        overrides: dict[str, Any] = {}

        # Reward settings
        if os.getenv("COMMONS_REWARD_POOL"):
            overrides.setdefault("rewards", {})["default_reward_pool"] = int(
                os.getenv("COMMONS_REWARD_POOL", "0")
            )
        if os.getenv("COMMONS_DEFAULT_ADDRESS"):
            overrides.setdefault("rewards", {})["default_address"] = os.getenv(
                "COMMONS_DEFAULT_ADDRESS"
            )
        if os.getenv("COMMONS_DEFAULT_EVENT_AMOUNT"):
            overrides.setdefault("rewards", {})["default_event_amount"] = int(
                os.getenv("COMMONS_DEFAULT_EVENT_AMOUNT", "1")
            )

        # Tokenlog settings
        if os.getenv("COMMONS_TOKENLOG_REPO"):
            overrides.setdefault("tokenlog", {})["repo"] = os.getenv("COMMONS_TOKENLOG_REPO")
        if os.getenv("COMMONS_TOKENLOG_MAX_ISSUES"):
            overrides.setdefault("tokenlog", {})["max_issues"] = int(
                os.getenv("COMMONS_TOKENLOG_MAX_ISSUES", "4")
            )

        # Simulation
        if os.getenv("COMMONS_SIMULATION_SCENARIO"):
            overrides.setdefault("simulation", {})["scenario"] = os.getenv(
                "COMMONS_SIMULATION_SCENARIO"
            )

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration from environment variables over defaults."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_json(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        rewards_data = data.get("rewards", {})
        tokenlog_data = data.get("tokenlog", {})
        simulation_data = data.get("simulation", {})
        http_data = data.get("http", {})

        rewards = RewardsConfig(**rewards_data) if rewards_data else RewardsConfig()
        tokenlog = TokenlogConfig(**tokenlog_data) if tokenlog_data else TokenlogConfig()
        simulation = SimulationConfig(**simulation_data) if simulation_data else SimulationConfig()
        http = HttpConfig(**http_data) if http_data else HttpConfig()

        return cls(
            rewards=rewards,
            tokenlog=tokenlog,
            simulation=simulation,
            http=http,
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section, values in overrides.items():
            target = getattr(new_config, section)
            for key, value in values.items():
                setattr(target, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "rewards": {
                "default_reward_pool": self.rewards.default_reward_pool,
                "default_address": self.rewards.default_address,
                "default_event_amount": self.rewards.default_event_amount,
            },
            "tokenlog": {
                "repo": self.tokenlog.repo,
                "max_issues": self.tokenlog.max_issues,
                "api_base": self.tokenlog.api_base,
            },
            "simulation": {
                "scenario": self.simulation.scenario,
                "params": dict(self.simulation.params),
                "metrics": dict(self.simulation.metrics),
            },
            "http": {
                "timeout": self.http.timeout,
                "max_retries": self.http.max_retries,
                "retry_backoff": self.http.retry_backoff,
                "user_agent": self.http.user_agent,
            },
            "extra": self.extra,
        }


CONFIG_SEARCH_PATHS = (
    Path("commons.json"),
    Path(".commons.json"),
    Path.home() / ".config" / "commons" / "config.json",
)


def load_runtime_config(path: str | Path | None = None) -> RuntimeConfig:
    """
    Load RuntimeConfig from a config file, then overlay environment variables.

    With no explicit path, the first existing file of CONFIG_SEARCH_PATHS
    is used (relative entries resolve against the working directory).
    YAML is selected by a .yaml/.yml suffix, JSON otherwise.

    Environment variables ALWAYS override config file values.
    """
    if path is not None:
        candidates = [Path(path)]
    else:
        candidates = [p if p.is_absolute() else Path.cwd() / p for p in CONFIG_SEARCH_PATHS]

    config: RuntimeConfig | None = None
    for candidate in candidates:
        if not candidate.exists():
            if path is not None:
                raise FileNotFoundError(f"Config file not found: {candidate}")
            continue
        if candidate.suffix in (".yaml", ".yml"):
            config = RuntimeConfig.from_yaml(candidate)
        else:
            config = RuntimeConfig.from_json(candidate)
        logger.info(f"Loaded config from {candidate}")
        break

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set (or clear, with None) the default runtime configuration."""
    global _default_config
    _default_config = config
