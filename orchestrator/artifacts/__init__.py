"""
Payload Artifacts & IO

Provides functionality for saving, loading, and caching payload documents.
"""

from orchestrator.artifacts.io import (
    PAYLOAD_ENV_VAR,
    PayloadIOError,
    clear_payload_cache,
    load_offchain_payload,
    payload_digest,
    read_payload,
    save_payload,
)

__all__ = [
    "PAYLOAD_ENV_VAR",
    "PayloadIOError",
    "clear_payload_cache",
    "load_offchain_payload",
    "payload_digest",
    "read_payload",
    "save_payload",
]
