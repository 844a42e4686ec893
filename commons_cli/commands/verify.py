"""
CLI Verify Command

Verify a payload file offline: recompute every claim leaf, fold its proof
and compare against the published Merkle root.

Accepts both the payload document ({"batch": ..., "proofs": {addr: ...}})
and the epoch document emitted by `commons batch` (byte-array proofs).

Usage:
    commons verify payload.json [--address ADDR] [--json] [--debug]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from core.crypto.address import canonical_address
from core.merkle.merkle_proofs import MerkleVerifier
from core.merkle.merkle_tree import ZERO_LEAF
from core.schemas.errors import RewardsException
from core.schemas.rewards import ClaimProof
from orchestrator.artifacts.io import PayloadIOError, read_payload


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of payload verification for CLI output."""
    payload_path: str = ""
    merkle_root: str = ""
    total_tokens: int = 0
    claims_checked: int = 0
    claims_valid: int = 0
    totals_ok: bool = True
    empty_batch: bool = False
    checks: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["errors"]:
            del d["errors"]
        return d

    @property
    def all_ok(self) -> bool:
        """Check if every claim verified and the totals agree.

        A payload with no claims passes only as the empty batch (zero root).
        """
        return (
            (self.claims_checked > 0 or self.empty_batch)
            and self.claims_valid == self.claims_checked
            and self.totals_ok
            and not self.errors
        )


def extract_claims(document: dict[str, Any]) -> tuple[str, int | None, list[ClaimProof]]:
    """
    Pull the root, declared total and claim proofs out of a payload file.

    Returns:
        (merkle_root, total_tokens or None, proofs)

    Raises:
        PayloadIOError: If the document has neither known shape
    """
    if "batch" in document:
        batch = document["batch"]
        root = batch.get("merkleRoot")
        total = batch.get("totalTokens")
        raw_proofs = list((document.get("proofs") or {}).values())
    elif "merkleRoot" in document:
        root = document.get("merkleRoot")
        total = document.get("totalTokens")
        raw_proofs = list(document.get("proofs") or [])
    else:
        raise PayloadIOError("Payload has no merkle root (expected 'batch' or 'merkleRoot')")

    if not isinstance(root, str):
        raise PayloadIOError("Payload merkle root must be a hex string")

    try:
        proofs = [ClaimProof.model_validate(entry) for entry in raw_proofs]
    except ValidationError as e:
        raise PayloadIOError(f"Malformed proof entry: {e}") from e

    return root, total, proofs


def verify_claims(
    root: str,
    proofs: list[ClaimProof],
) -> list[dict[str, Any]]:
    """Check each claim proof against the root."""
    checks = []
    for claim in proofs:
        try:
            ok = MerkleVerifier.verify_claim_in_root(claim.address, claim.amount, claim.proof, root)
            message = "proof folds to root" if ok else "proof does not fold to root"
        except (RewardsException, ValueError) as e:
            ok = False
            message = str(e)
        checks.append({
            "address": claim.address,
            "amount": claim.amount,
            "ok": ok,
            "message": message,
        })
    return checks


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"payload: {summary.payload_path}")
    print(f"merkle_root: {summary.merkle_root}")
    print(f"total_tokens: {summary.total_tokens}")
    print(f"claims: {summary.claims_valid}/{summary.claims_checked} valid")
    print(f"totals_ok: {str(summary.totals_ok).lower()}")
    if summary.empty_batch:
        print("empty batch: zero root, no claims")

    failed = [c for c in summary.checks if not c["ok"]]
    if failed:
        print(f"\nfailed ({len(failed)}):")
        for check in failed[:20]:
            print(f"  ✗ {check['address']}: {check['message']}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors[:10]:
            print(f"  ✗ {err}")


def print_summary_json(summary: VerifySummary) -> None:
    """Print summary as JSON."""
    print(json.dumps(summary.to_dict(), indent=2))


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    payload_path = Path(args.payload_path)

    try:
        document = read_payload(payload_path)
        root, total, proofs = extract_claims(document)
    except PayloadIOError as e:
        if args.debug:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = VerifySummary(
        payload_path=str(payload_path),
        merkle_root=root,
        total_tokens=total or 0,
    )

    if args.address:
        try:
            wanted = canonical_address(args.address)
        except RewardsException as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        selected = [p for p in proofs if p.address == wanted]
        if not selected:
            summary.errors.append(f"No claim found for address {wanted}")
        proofs = selected
    elif not proofs:
        if root == ZERO_LEAF.hex() and total in (0, None):
            summary.empty_batch = True
        else:
            summary.errors.append(f"Payload has no claims but declares root {root} and total {total}")
    elif total is not None:
        summed = sum(p.amount for p in proofs)
        if summed != total:
            summary.totals_ok = False
            summary.errors.append(f"Claim amounts sum to {summed}, payload declares {total}")

    summary.checks = verify_claims(root, proofs)
    summary.claims_checked = len(summary.checks)
    summary.claims_valid = sum(1 for c in summary.checks if c["ok"])

    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    if summary.all_ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
