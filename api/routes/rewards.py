"""
Reward Routes

Collect praise events, publish reward batches and serve claim proofs.

Endpoints:
- POST /events - Record praise events on the shared scoreboard
- POST /batches - Generate a new batch from the scoreboard
- GET /batches/current - Return the most recent batch
- GET /proofs/{address} - Amount and inclusion proof for one claimant
- POST /verify - Check a claim proof against a root
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import ValidationError

from api.deps import get_praise_service
from api.errors import InvalidRequestError
from api.models.requests import CollectEventsRequest, GenerateBatchRequest, VerifyClaimRequest
from api.models.responses import (
    BatchResponse,
    CollectEventsResponse,
    ProofResponse,
    VerifyClaimResponse,
)
from core.merkle.merkle_proofs import MerkleVerifier
from core.rewards.service import PraiseService
from core.schemas.errors import BatchMissingException


logger = logging.getLogger(__name__)

router = APIRouter(tags=["rewards"])


@router.post("/events", response_model=CollectEventsResponse)
async def collect_events(
    request: CollectEventsRequest,
    service: PraiseService = Depends(get_praise_service),
) -> CollectEventsResponse:
    """
    Record praise events.

    Every event is validated before any is recorded, so a bad event
    rejects the whole request.
    """
    for i, raw in enumerate(request.events):
        try:
            service.scoreboard.normalize(raw)
        except ValidationError as e:
            raise InvalidRequestError(
                f"Malformed event at index {i}",
                details={"index": i, "error_count": e.error_count(), "error": str(e)},
            )

    collected = [service.collect(raw) for raw in request.events]
    return CollectEventsResponse(
        ok=True,
        collected=[event.model_dump(mode="json") for event in collected],
        claimants=len(service.scoreboard),
        total_score=service.scoreboard.total_score,
    )


@router.post("/batches", response_model=BatchResponse)
async def generate_batch(
    request: Optional[GenerateBatchRequest] = None,
    service: PraiseService = Depends(get_praise_service),
) -> BatchResponse:
    """Generate a reward batch from the current scoreboard."""
    reward_pool = request.reward_pool if request else None
    batch = service.generate_reward_batch(reward_pool)
    return BatchResponse(ok=True, batch=batch.to_wire())


@router.get("/batches/current", response_model=BatchResponse)
async def current_batch(
    service: PraiseService = Depends(get_praise_service),
) -> BatchResponse:
    """Return the most recently generated batch."""
    batch = service.current_batch
    if batch is None:
        raise BatchMissingException()
    return BatchResponse(ok=True, batch=batch.to_wire())


@router.get("/proofs/{address}", response_model=ProofResponse)
async def get_proof(
    address: str,
    service: PraiseService = Depends(get_praise_service),
) -> ProofResponse:
    """Return the amount and inclusion proof for an address."""
    claim_proof = service.proof_for(address)
    batch = service.current_batch
    data = claim_proof.model_dump(mode="json")
    return ProofResponse(
        ok=True,
        address=data["address"],
        amount=data["amount"],
        proof=data["proof"],
        merkle_root=batch.merkle_root if batch else "",
    )


@router.post("/verify", response_model=VerifyClaimResponse)
async def verify_claim(
    request: VerifyClaimRequest,
    service: PraiseService = Depends(get_praise_service),
) -> VerifyClaimResponse:
    """
    Verify a claim proof.

    Folds the proof over leaf(address, amount) and compares the result
    with the given root, or with the current batch root when none is given.
    """
    root = request.merkle_root
    if root is None:
        batch = service.current_batch
        if batch is None:
            raise BatchMissingException()
        root = batch.merkle_root

    try:
        valid = MerkleVerifier.verify_claim_in_root(
            request.address,
            request.amount,
            request.proof,
            root,
        )
    except ValueError as e:
        raise InvalidRequestError(f"Malformed proof or root: {e}")

    logger.debug(f"verify {request.address} amount={request.amount} -> {valid}")
    return VerifyClaimResponse(ok=True, valid=valid, merkle_root=root)
