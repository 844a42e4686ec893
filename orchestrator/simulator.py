"""
Scenario Simulator

Produces the parameter/metric record attached to every off-chain payload.
"""
from __future__ import annotations

import time
from typing import Any, Optional

from core.config.runtime import SimulationConfig


def run_simulation(
    config: SimulationConfig,
    overrides: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """
    Run the configured scenario.

    Args:
        config: Scenario label, base params and metrics
        overrides: Params merged over the configured ones

    Returns:
        {scenario, timestamp (ms), params, metrics}
    """
    params = dict(config.params)
    if overrides:
        params.update(overrides)
    return {
        "scenario": config.scenario,
        "timestamp": int(time.time() * 1000),
        "params": params,
        "metrics": dict(config.metrics),
    }


__all__ = ["run_simulation"]
