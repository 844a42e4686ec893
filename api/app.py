"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import json
import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import health, rewards
from api.errors import APIError, api_error_handler, generic_error_handler, rewards_error_handler
from core.schemas.errors import RewardsException


# Configure logging from COMMONS_LOG_LEVEL or the log_level of commons.json
def _resolve_log_level() -> int:
    """Resolve log level from env var or commons.json, defaulting to INFO."""
    raw = os.getenv("COMMONS_LOG_LEVEL")
    if raw is None:
        cfg_path = Path.cwd() / "commons.json"
        if cfg_path.exists():
            try:
                with open(cfg_path) as f:
                    raw = json.load(f).get("log_level")
            except (OSError, ValueError, AttributeError):
                raw = None
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Commons Rewards API",
        description="""
HTTP API for the off-chain reward batch engine.

## Endpoints

- **POST /events** - Record praise events (labels or {address, amount} records)
- **POST /batches** - Split the reward pool and publish a Merkle root
- **GET /batches/current** - Most recently published batch
- **GET /proofs/{address}** - Amount and inclusion proof for a claimant
- **POST /verify** - Fold a proof and compare it with a root
- **GET /health** - Health check

## Errors

Domain errors use a structured `ErrorResponse` body: 404 when no batch
exists or the address has no claim, 400 for invalid input.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RewardsException, rewards_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(rewards.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
