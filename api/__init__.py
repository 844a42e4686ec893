"""
Rewards API (FastAPI)

HTTP API for the reward batch engine:
- POST /events - Record praise events
- POST /batches - Generate a reward batch
- GET /batches/current - Current batch
- GET /proofs/{address} - Claim proof
- POST /verify - Verify a claim proof
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
