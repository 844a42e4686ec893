"""API request and response models."""

from api.models.requests import CollectEventsRequest, GenerateBatchRequest, VerifyClaimRequest
from api.models.responses import (
    HealthResponse,
    CollectEventsResponse,
    BatchResponse,
    ProofResponse,
    VerifyClaimResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "CollectEventsRequest",
    "GenerateBatchRequest",
    "VerifyClaimRequest",
    "HealthResponse",
    "CollectEventsResponse",
    "BatchResponse",
    "ProofResponse",
    "VerifyClaimResponse",
    "ErrorDetail",
    "ErrorResponse",
]
