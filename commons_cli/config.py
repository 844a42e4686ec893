"""
CLI Configuration

Configuration for the commons CLI itself (logging, output format).
Reward and collaborator settings live in core.config.runtime and are read
from the same file.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path


# Environment variable prefix
ENV_PREFIX = "COMMONS_"

DEFAULT_CONFIG_PATHS = (
    Path("commons.json"),
    Path(".commons.json"),
    Path.home() / ".config" / "commons" / "config.json",
)


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    # Batch defaults
    default_epoch: int = 1

    # File the runtime config was read from, if any
    source_path: str | None = None


def load_config_from_file(path: Path) -> CLIConfig:
    """Load CLI configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = CLIConfig()
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    config.default_output_format = data.get("default_output_format", config.default_output_format)
    config.default_epoch = int(data.get("default_epoch", config.default_epoch))
    config.source_path = str(path)
    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        for default_path in DEFAULT_CONFIG_PATHS:
            candidate = default_path if default_path.is_absolute() else Path.cwd() / default_path
            if candidate.exists():
                config = load_config_from_file(candidate)
                break

    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO")
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "log_level": "INFO",
  "log_file": null,
  "default_output_format": "human",
  "default_epoch": 1,
  "rewards": {
    "default_reward_pool": 1000,
    "default_address": "11111111111111111111111111111111",
    "default_event_amount": 1
  },
  "tokenlog": {
    "repo": null,
    "max_issues": 4
  },
  "simulation": {
    "scenario": "baseline",
    "params": {"fundingRatio": 0.6, "convictionDecay": 0.5},
    "metrics": {"confidence": 0.8, "projectedPayout": 1000}
  },
  "http": {
    "timeout": 10.0,
    "max_retries": 1
  }
}
"""
