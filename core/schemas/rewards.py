"""
Module 01 - Schemas & Canonicalization
File: rewards.py

Purpose: Reward engine data models.
Praise events enter as a tagged union (bare label or structured record),
are normalized into PraiseEvent, and leave the engine as Claims inside a
RewardBatch plus one ClaimProof per claimant.

Wire names follow the reward program client (camelCase) via aliases.
"""

from datetime import datetime
from typing import Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    field_serializer,
    field_validator,
    model_validator,
)


# =============================================================================
# Incoming Events
# =============================================================================

class LabelEvent(BaseModel):
    """
    Legacy shorthand event: just a label.

    Scored with the configured default amount for the default address.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["label"] = "label"
    label: str = Field(..., description="Free-form event label")


class StructuredEvent(BaseModel):
    """
    Structured praise event.

    Any key other than address/amount is kept verbatim in metadata, so
    records like {"event": "merged-pr", "amount": 5} parse directly.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["structured"] = "structured"
    address: str | None = Field(
        default=None,
        description="base58 claimant address; default address when missing",
    )
    amount: StrictInt | None = Field(
        default=None,
        description="Score increment; default amount when missing or zero (bools rejected)",
    )
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_metadata(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known = {"kind", "address", "amount", "metadata"}
        extra = {k: v for k, v in data.items() if k not in known}
        if not extra:
            return data
        merged = {k: v for k, v in data.items() if k in known}
        merged["metadata"] = {**extra, **dict(data.get("metadata") or {})}
        return merged


PraiseInput = Union[str, LabelEvent, StructuredEvent, dict]


def parse_event(raw: PraiseInput) -> Union[LabelEvent, StructuredEvent]:
    """
    Resolve a raw event into the tagged variant.

    Args:
        raw: Bare label string, dict record, or an already-parsed event

    Returns:
        LabelEvent or StructuredEvent

    Raises:
        pydantic.ValidationError: If a dict record has malformed fields
        TypeError: For any other input type
    """
    if isinstance(raw, (LabelEvent, StructuredEvent)):
        return raw
    if isinstance(raw, str):
        return LabelEvent(label=raw)
    if isinstance(raw, dict):
        if raw.get("kind") == "label":
            return LabelEvent.model_validate(raw)
        return StructuredEvent.model_validate(raw)
    raise TypeError(f"Unsupported praise event type: {type(raw).__name__}")


# =============================================================================
# Normalized Event
# =============================================================================

class PraiseEvent(BaseModel):
    """A normalized, timestamped event as recorded on the scoreboard."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    address: str = Field(..., min_length=1)
    amount: int = Field(..., ge=1)
    metadata: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(..., description="UTC time the event was collected")


# =============================================================================
# Claims, Batches, Proofs
# =============================================================================

class Claim(BaseModel):
    """A finalized allocation; one per address with a nonzero score."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    address: str = Field(..., min_length=1)
    amount: int = Field(..., ge=1)


class RewardBatch(BaseModel):
    """
    A published reward batch.

    claims order equals leaf order in the Merkle tree.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    merkle_root: str = Field(
        ...,
        alias="merkleRoot",
        pattern=r"^[0-9a-f]{64}$",
        description="Hex-encoded 32-byte Merkle root",
    )
    total_tokens: int = Field(..., alias="totalTokens", ge=0)
    snapshot_date: datetime = Field(..., alias="snapshotDate")
    claims: list[Claim] = Field(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys and an ISO snapshot date."""
        return self.model_dump(mode="json", by_alias=True)


class ClaimProof(BaseModel):
    """Inclusion proof for one claim of the current batch."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    address: str
    amount: int = Field(..., ge=1)
    proof: list[bytes] = Field(
        default_factory=list,
        description="Sibling hashes bottom-up; hex strings on the wire",
    )

    @field_validator("proof", mode="before")
    @classmethod
    def _decode_proof(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        nodes = []
        for node in value:
            if isinstance(node, str):
                node = bytes.fromhex(node)
            elif isinstance(node, list):
                node = bytes(node)
            if len(node) != 32:
                raise ValueError(f"Proof node must be 32 bytes, got {len(node)}")
            nodes.append(node)
        return nodes

    @field_serializer("proof")
    def _encode_proof(self, proof: list[bytes]) -> list[str]:
        return [node.hex() for node in proof]

    def proof_byte_arrays(self) -> list[list[int]]:
        """Proof nodes as integer arrays, the form instruction builders take."""
        return [list(node) for node in self.proof]


__all__ = [
    "LabelEvent",
    "StructuredEvent",
    "PraiseInput",
    "parse_event",
    "PraiseEvent",
    "Claim",
    "RewardBatch",
    "ClaimProof",
]
