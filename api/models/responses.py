"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "commons-rewards-api"
    version: str = "v1"


class CollectEventsResponse(BaseModel):
    """Response for POST /events endpoint."""

    ok: bool = True
    collected: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Normalized events as they were scored",
    )
    claimants: int = Field(default=0, description="Distinct addresses on the scoreboard")
    total_score: int = Field(default=0, description="Sum of all recorded scores")


class BatchResponse(BaseModel):
    """Response for POST /batches and GET /batches/current."""

    ok: bool = True
    batch: dict[str, Any] = Field(
        ...,
        description="Reward batch (merkleRoot, totalTokens, snapshotDate, claims)",
    )


class ProofResponse(BaseModel):
    """Response for GET /proofs/{address} endpoint."""

    ok: bool = True
    address: str = Field(..., description="Canonical base58 address")
    amount: int = Field(..., description="Allocated amount")
    proof: list[str] = Field(default_factory=list, description="Sibling hashes, hex")
    merkle_root: str = Field(..., description="Root of the batch the proof belongs to")


class VerifyClaimResponse(BaseModel):
    """Response for POST /verify endpoint."""

    ok: bool = True
    valid: bool = Field(..., description="Whether the proof folds to the root")
    merkle_root: str = Field(..., description="Root the claim was checked against")


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
