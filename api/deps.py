"""
API Dependencies

Dependency injection for the API.
Provides the process-wide praise service the reward routes share.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from core.config.runtime import RuntimeConfig, load_runtime_config
from core.rewards.service import PraiseService, start_praise_service

logger = logging.getLogger(__name__)


_service: Optional[PraiseService] = None
_service_lock = threading.Lock()


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from the config file search path, then env vars.

    Search order for config file:
      1. ./commons.json
      2. ./.commons.json
      3. ~/.config/commons/config.json

    A config file that cannot be parsed is logged and ignored.
    """
    try:
        return load_runtime_config()
    except (OSError, ValueError, TypeError) as e:
        logger.warning(f"Failed to load config file, using defaults: {e}")
        return RuntimeConfig().with_env_overrides()


def get_praise_service() -> PraiseService:
    """
    Return the shared praise service, creating it on first use.

    The service keeps the scoreboard and the current batch in memory for
    the lifetime of the process.
    """
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                config = _load_runtime_config()
                _service = start_praise_service(config.rewards)
                logger.info(
                    f"Praise service started (reward_pool={config.rewards.default_reward_pool})"
                )
    return _service


def reset_praise_service(service: Optional[PraiseService] = None) -> None:
    """Replace (or drop, with None) the shared praise service."""
    global _service
    with _service_lock:
        _service = service
