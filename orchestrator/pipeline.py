"""
Off-chain Payload Pipeline

Runs the praise service over a list of events and assembles the payload
consumed by the reward program tooling: the reward batch, one proof per
claim, and the collaborator records (issues, balances, simulation).

Key features:
- Explicit configuration (no hidden globals once a RuntimeConfig is passed)
- Quiet mode for scripted use (option or COMMONS_PIPELINE_SILENT=1)
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from core.config.runtime import RuntimeConfig, get_default_config
from core.rewards.service import PraiseService, start_praise_service
from core.schemas.rewards import ClaimProof, PraiseInput, RewardBatch

from orchestrator.simulator import run_simulation
from orchestrator.tokenlog import fetch_github_issues, sample_balances


logger = logging.getLogger(__name__)


SILENT_ENV_VAR = "COMMONS_PIPELINE_SILENT"


# =============================================================================
# Options & Result
# =============================================================================

@dataclass
class PayloadOptions:
    """Inputs for one pipeline run."""
    praise_events: list[PraiseInput] = field(default_factory=list)
    silent: bool = False
    reward_pool: Optional[int] = None
    simulation: Optional[dict[str, Any]] = None

    @property
    def quiet(self) -> bool:
        return self.silent or os.getenv(SILENT_ENV_VAR) == "1"


@dataclass
class OffchainPayload:
    """Everything one pipeline run produces."""
    batch: RewardBatch
    proofs: dict[str, ClaimProof]
    issues: list[dict[str, Any]]
    balances: list[dict[str, Any]]
    simulation: dict[str, Any]
    praise_events: list[Any] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """JSON document with camelCase batch keys and hex proof nodes."""
        return {
            "batch": self.batch.to_wire(),
            "proofs": {
                address: proof.model_dump(mode="json")
                for address, proof in self.proofs.items()
            },
            "issues": self.issues,
            "balances": self.balances,
            "simulation": self.simulation,
            "praiseEvents": [_event_to_json(event) for event in self.praise_events],
        }


def _event_to_json(event: Any) -> Any:
    if hasattr(event, "model_dump"):
        return event.model_dump(mode="json")
    return event


# =============================================================================
# Assembly
# =============================================================================

def assemble_offchain_payload(
    options: Optional[PayloadOptions] = None,
    config: Optional[RuntimeConfig] = None,
    *,
    service: Optional[PraiseService] = None,
) -> OffchainPayload:
    """
    Run the full off-chain pipeline.

    Steps:
    1. Start a praise service and collect every event
    2. Generate the reward batch
    3. Fetch issues, sample balances, run the simulation
    4. Compute a proof for every claim of the batch

    Args:
        options: Events and run flags
        config: Runtime configuration; process default when None
        service: Optional pre-built service (its config wins for scoring)

    Returns:
        OffchainPayload

    Raises:
        InvalidAddressException / AmountOutOfRangeException: On a bad event
        InsufficientRewardPoolException: If the pool is too small
    """
    options = options or PayloadOptions()
    config = config or get_default_config()

    if service is None:
        service = start_praise_service(config.rewards, silent=options.quiet)

    for event in options.praise_events:
        service.collect(event)

    batch = service.generate_reward_batch(options.reward_pool)
    issues = fetch_github_issues(config.tokenlog, config.http)
    balances = sample_balances(config.tokenlog)
    simulation = run_simulation(config.simulation, options.simulation)

    proofs = {claim.address: service.proof_for(claim.address) for claim in batch.claims}

    if not options.quiet:
        logger.info(
            f"Assembled payload: {len(batch.claims)} claims, "
            f"{len(issues)} issues, {len(balances)} balances"
        )

    return OffchainPayload(
        batch=batch,
        proofs=proofs,
        issues=issues,
        balances=balances,
        simulation=simulation,
        praise_events=list(options.praise_events),
    )


def assemble_from_events(
    events: Sequence[PraiseInput],
    config: Optional[RuntimeConfig] = None,
    *,
    silent: bool = False,
) -> OffchainPayload:
    """Convenience wrapper: assemble a payload from a plain event list."""
    return assemble_offchain_payload(
        PayloadOptions(praise_events=list(events), silent=silent),
        config,
    )


__all__ = [
    "SILENT_ENV_VAR",
    "PayloadOptions",
    "OffchainPayload",
    "assemble_offchain_payload",
    "assemble_from_events",
]
