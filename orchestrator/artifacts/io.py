"""
Payload Artifacts & IO
File: io.py

Purpose: Save and load off-chain payload documents, and serve a cached
payload file to integration tooling when one is configured.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from core.config.runtime import RuntimeConfig
from core.crypto.hashing import hash_canonical, to_hex

from orchestrator.pipeline import OffchainPayload, PayloadOptions, assemble_offchain_payload


logger = logging.getLogger(__name__)


# Environment variable naming a pre-built payload file
PAYLOAD_ENV_VAR = "OFFCHAIN_PIPELINE_PAYLOAD"

_cached_file_payload: Optional[dict[str, Any]] = None


class PayloadIOError(Exception):
    """Error during payload IO operations."""
    pass


def _as_document(payload: OffchainPayload | dict[str, Any]) -> dict[str, Any]:
    if isinstance(payload, OffchainPayload):
        return payload.to_dict()
    return payload


def payload_digest(payload: OffchainPayload | dict[str, Any]) -> str:
    """Hex SHA-256 of the payload's canonical JSON form."""
    return to_hex(hash_canonical(_as_document(payload)))


def save_payload(payload: OffchainPayload | dict[str, Any], path: str | Path) -> Path:
    """
    Write a payload document as indented JSON.

    The file is written to a temporary sibling first and moved into place,
    so readers never see a truncated document.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    document = _as_document(payload)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)
        os.replace(tmp_name, path)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise PayloadIOError(f"Failed to write payload to {path}: {e}") from e

    logger.info(f"Wrote payload to {path}")
    return path


def read_payload(path: str | Path) -> dict[str, Any]:
    """
    Read a payload document.

    Raises:
        PayloadIOError: If the file is missing or not a JSON object
    """
    path = Path(path)
    if not path.exists():
        raise PayloadIOError(f"Payload file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise PayloadIOError(f"Payload file is not valid JSON: {path}: {e}") from e
    if not isinstance(data, dict):
        raise PayloadIOError(f"Payload file must hold a JSON object: {path}")
    return data


def load_offchain_payload(
    options: Optional[PayloadOptions] = None,
    config: Optional[RuntimeConfig] = None,
) -> dict[str, Any]:
    """
    Return a payload document, preferring a cached file.

    When OFFCHAIN_PIPELINE_PAYLOAD names an existing file, that file is read
    once and returned on every call. Otherwise a fresh payload is assembled.
    """
    global _cached_file_payload
    payload_path = os.getenv(PAYLOAD_ENV_VAR)
    if payload_path and Path(payload_path).exists():
        if _cached_file_payload is None:
            _cached_file_payload = read_payload(payload_path)
        return _cached_file_payload
    return assemble_offchain_payload(options, config).to_dict()


def clear_payload_cache() -> None:
    """Forget the cached payload file contents."""
    global _cached_file_payload
    _cached_file_payload = None


__all__ = [
    "PAYLOAD_ENV_VAR",
    "PayloadIOError",
    "payload_digest",
    "save_payload",
    "read_payload",
    "load_offchain_payload",
    "clear_payload_cache",
]
