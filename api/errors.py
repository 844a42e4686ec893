"""
API Error Handling

Standardized error handling for the API. Reward engine exceptions are
mapped onto the same ErrorResponse body as API errors.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import ErrorCodes, RewardsException


logger = logging.getLogger(__name__)


# Reward error codes answered with 404; every other domain error is a 400
NOT_FOUND_CODES = frozenset({
    ErrorCodes.BATCH_MISSING,
    ErrorCodes.CLAIM_NOT_FOUND,
})


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


class InternalError(APIError):
    """Internal server error."""

    def __init__(self, message: str = "Internal server error", details: dict[str, Any] | None = None):
        super().__init__(
            code="INTERNAL_ERROR",
            message=message,
            status_code=500,
            details=details,
        )


def status_for_code(code: str) -> int:
    """HTTP status for a reward engine error code."""
    return 404 if code in NOT_FOUND_CODES else 400


def rewards_to_api_error(exc: RewardsException) -> APIError:
    """Wrap a reward engine exception as an APIError."""
    return APIError(
        code=exc.code,
        message=exc.message,
        status_code=status_for_code(exc.code),
        details=exc.details,
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def rewards_error_handler(request: Request, exc: RewardsException) -> JSONResponse:
    """Handle reward engine exceptions raised inside route handlers."""
    error = rewards_to_api_error(exc)
    logger.info(f"{request.method} {request.url.path} -> {error.status_code} {error.code}")
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_response().model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled error on {request.url.path}: {exc!r}")
    error = InternalError(
        "An unexpected error occurred",
        details={"type": type(exc).__name__},
    )
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_response().model_dump(),
    )
