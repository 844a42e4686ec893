"""
CLI Batch Command

Collect praise events, generate the reward batch and emit the epoch
payload (root, total, per-claim proofs, collaborator records).

Usage:
    commons batch [--events-file PATH] [--epoch N] [--out PATH] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from core.config.runtime import load_runtime_config
from core.schemas.errors import RewardsException
from orchestrator.artifacts.io import PayloadIOError, payload_digest, save_payload
from orchestrator.pipeline import OffchainPayload, PayloadOptions, assemble_offchain_payload


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def load_events(path: Path) -> list[Any]:
    """
    Read a JSON list of praise events.

    Raises:
        PayloadIOError: If the file is missing, malformed, or not a list
    """
    if not path.exists():
        raise PayloadIOError(f"Events file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            events = json.load(f)
    except json.JSONDecodeError as e:
        raise PayloadIOError(f"Events file is not valid JSON: {path}: {e}") from e
    if not isinstance(events, list):
        raise PayloadIOError(f"Events file must hold a JSON list: {path}")
    return events


def build_epoch_document(payload: OffchainPayload, epoch_id: int) -> dict[str, Any]:
    """
    Shape a payload the way the claim tooling consumes it.

    Proof nodes are emitted as byte arrays, one per tree level.
    """
    batch = payload.batch
    return {
        "epochId": epoch_id,
        "totalTokens": batch.total_tokens,
        "merkleRoot": batch.merkle_root,
        "snapshotDate": batch.to_wire()["snapshotDate"],
        "proofs": [
            {
                "address": claim.address,
                "amount": claim.amount,
                "proof": payload.proofs[claim.address].proof_byte_arrays(),
            }
            for claim in batch.claims
        ],
        "issues": payload.issues,
        "balances": payload.balances,
        "simulation": payload.simulation,
    }


def print_summary_human(document: dict[str, Any], digest: str) -> None:
    """Print a short human-readable summary."""
    print(f"epoch: {document['epochId']}")
    print(f"merkle_root: {document['merkleRoot']}")
    print(f"total_tokens: {document['totalTokens']}")
    print(f"claims: {len(document['proofs'])}")
    for entry in document["proofs"][:20]:
        print(f"  - {entry['address']}: {entry['amount']} ({len(entry['proof'])} proof nodes)")
    print(f"payload_digest: {digest}")


def batch_cmd(args: Namespace) -> int:
    """
    Execute the batch command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    cli_config = getattr(args, "cli_config", None)
    epoch_id = args.epoch if args.epoch is not None else (
        cli_config.default_epoch if cli_config else 1
    )

    try:
        runtime_config = load_runtime_config(args.config)
        events = load_events(Path(args.events_file)) if args.events_file else []
        payload = assemble_offchain_payload(
            PayloadOptions(
                praise_events=events,
                silent=True,
                reward_pool=args.reward_pool,
            ),
            runtime_config,
        )
    except (RewardsException, PayloadIOError, FileNotFoundError) as e:
        if args.debug:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    document = build_epoch_document(payload, epoch_id)
    digest = payload_digest(document)

    if args.out:
        try:
            save_payload(document, args.out)
        except PayloadIOError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        print(f"wrote payload snapshot to {args.out}", file=sys.stderr)

    if args.json:
        print(json.dumps(document, indent=2))
    else:
        print_summary_human(document, digest)

    return EXIT_SUCCESS
