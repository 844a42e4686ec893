"""
API Request Models

Pydantic models for API request validation.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class CollectEventsRequest(BaseModel):
    """Request body for POST /events endpoint."""

    events: list[Union[str, dict[str, Any]]] = Field(
        ...,
        min_length=1,
        description="Praise events: bare labels or {address, amount, ...} records",
    )


class GenerateBatchRequest(BaseModel):
    """Request body for POST /batches endpoint."""

    reward_pool: Optional[int] = Field(
        default=None,
        ge=0,
        description="Tokens to distribute; server default when omitted",
    )


class VerifyClaimRequest(BaseModel):
    """Request body for POST /verify endpoint."""

    address: str = Field(..., min_length=1, description="Base58 claimant address")
    amount: int = Field(..., ge=0, description="Claimed amount")
    proof: list[str] = Field(
        default_factory=list,
        description="Sibling hashes bottom-up, hex encoded",
    )
    merkle_root: Optional[str] = Field(
        default=None,
        description="Root to verify against; current batch root when omitted",
    )
