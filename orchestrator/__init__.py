"""
Off-chain Orchestration

Wires the praise service to its collaborators and assembles the payload
handed to the reward program tooling.

Public API:
- assemble_offchain_payload: Run the full pipeline
- PayloadOptions: Events and run flags
- OffchainPayload: Batch, proofs and collaborator records
- fetch_github_issues / sample_balances: Tokenlog collaborators
- run_simulation: Scenario simulator
"""

from orchestrator.pipeline import (
    OffchainPayload,
    PayloadOptions,
    assemble_from_events,
    assemble_offchain_payload,
)
from orchestrator.simulator import run_simulation
from orchestrator.tokenlog import fetch_github_issues, sample_balances

__all__ = [
    "OffchainPayload",
    "PayloadOptions",
    "assemble_from_events",
    "assemble_offchain_payload",
    "run_simulation",
    "fetch_github_issues",
    "sample_balances",
]
