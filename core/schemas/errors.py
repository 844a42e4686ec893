"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for the reward batch engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the engine."""

    # Serialization Errors
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Claim Encoding Errors
    INVALID_ADDRESS = "INVALID_ADDRESS"
    AMOUNT_OUT_OF_RANGE = "AMOUNT_OUT_OF_RANGE"

    # Allocation Errors
    INSUFFICIENT_REWARD_POOL = "INSUFFICIENT_REWARD_POOL"

    # Batch & Proof Errors
    BATCH_MISSING = "BATCH_MISSING"
    CLAIM_NOT_FOUND = "CLAIM_NOT_FOUND"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class RewardsError(BaseModel):
    """
    Base error model for structured error communication.

    Used for passing errors across the API and CLI boundaries without
    exceptions, enabling structured error handling and serialization.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_ADDRESS],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "RewardsException":
        """Convert this error model to a raised exception."""
        return RewardsException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class RewardsException(Exception):
    """
    Base exception for all reward engine errors.

    This exception carries structured error information and can be
    converted to/from RewardsError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "REWARDS_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> RewardsError:
        """Convert this exception to a RewardsError model."""
        return RewardsError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(RewardsException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class InvalidAddressException(RewardsException):
    """Exception raised when an address cannot be decoded to 32 bytes."""

    def __init__(
        self,
        message: str,
        address: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if address is not None:
            full_details["address"] = address
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_ADDRESS,
            details=full_details,
            retryable=False,
        )


class AmountOutOfRangeException(RewardsException):
    """Exception raised when an amount does not fit an unsigned 64-bit integer."""

    def __init__(
        self,
        message: str,
        amount: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if amount is not None:
            full_details["amount"] = str(amount)
        super().__init__(
            message=message,
            code=ErrorCodes.AMOUNT_OUT_OF_RANGE,
            details=full_details,
            retryable=False,
        )


class InsufficientRewardPoolException(RewardsException):
    """Exception raised when the pool cannot give every claimant one token."""

    def __init__(
        self,
        message: str,
        reward_pool: int | None = None,
        claimants: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if reward_pool is not None:
            full_details["reward_pool"] = reward_pool
        if claimants is not None:
            full_details["claimants"] = claimants
        super().__init__(
            message=message,
            code=ErrorCodes.INSUFFICIENT_REWARD_POOL,
            details=full_details,
            retryable=False,
        )


class BatchMissingException(RewardsException):
    """Exception raised when a proof is requested before any batch exists."""

    def __init__(
        self,
        message: str = "No reward batch has been generated yet",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.BATCH_MISSING,
            details=details,
            retryable=False,
        )


class ClaimNotFoundException(RewardsException):
    """Exception raised when an address has no claim in the current batch."""

    def __init__(
        self,
        message: str,
        address: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if address is not None:
            full_details["address"] = address
        super().__init__(
            message=message,
            code=ErrorCodes.CLAIM_NOT_FOUND,
            details=full_details,
            retryable=False,
        )


class IndexOutOfRangeException(RewardsException, IndexError):
    """
    Exception raised when a proof is requested for a leaf index outside layer 0.

    Unreachable with a consistent batch; signals a programming error.
    """

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        leaf_count: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        if leaf_count is not None:
            full_details["leaf_count"] = leaf_count
        super().__init__(
            message=message,
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details=full_details,
            retryable=False,
        )
