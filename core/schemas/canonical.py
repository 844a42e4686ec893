"""
Module 01 - Schemas & Canonicalization
File: canonical.py

Purpose: One stable JSON text per reward payload.

Payload digests (orchestrator.artifacts.io.payload_digest) are taken over
this text, so two runs that produce the same batch, proofs and
collaborator records must serialize byte-for-byte identically.

Rules:
- object keys sorted, no insignificant whitespace, UTF-8 kept as-is
- None-valued fields dropped
- datetimes in UTC with a Z suffix (microseconds only when present)
- bytes (Merkle nodes, leaves) as lowercase hex
- pydantic models by alias (merkleRoot, totalTokens, ...), dataclasses as dicts
- sets sorted after canonicalization
- NaN and infinities rejected
"""

import dataclasses
import json
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_datetime_canonical(dt: datetime) -> str:
    """
    Render a snapshot time the way payloads carry it.

    Example:
        >>> format_datetime_canonical(datetime(2026, 1, 27, 21, 35))
        '2026-01-27T21:35:00Z'
    """
    dt = ensure_utc(dt)
    pattern = "%Y-%m-%dT%H:%M:%S.%fZ" if dt.microsecond else "%Y-%m-%dT%H:%M:%SZ"
    return dt.strftime(pattern)


def _child(path: str, key: Any) -> str:
    return f"{path}.{key}" if path else str(key)


def _reject(path: str, value: Any, reason: str) -> CanonicalizationException:
    return CanonicalizationException(
        message=f"{reason} at {path or '<root>'}",
        details={"path": path, "type": type(value).__name__, "value": repr(value)[:80]},
    )


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Reduce a value to plain JSON types following the module rules.

    Raises:
        CanonicalizationException: On non-finite floats, non-scalar dict
            keys or types with no JSON form
    """
    if value is None or isinstance(value, (bool, int, str)):
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            raise _reject(path, value, "Non-finite float value encountered")
        return value

    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()

    if isinstance(value, datetime):
        return format_datetime_canonical(value)

    if isinstance(value, Enum):
        return canonicalize_value(value.value, path)

    if isinstance(value, BaseModel):
        return canonicalize_value(
            value.model_dump(mode="json", by_alias=True, exclude_none=True),
            path,
        )

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return canonicalize_value(dataclasses.asdict(value), path)

    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, (str, int)) or isinstance(key, bool):
                raise _reject(path, key, "Cannot canonicalize dict key")
            if item is None:
                continue
            out[str(key)] = canonicalize_value(item, _child(path, key))
        return out

    if isinstance(value, (list, tuple)):
        return [canonicalize_value(item, f"{path}[{i}]") for i, item in enumerate(value)]

    if isinstance(value, (set, frozenset)):
        items = [canonicalize_value(item, f"{path}{{}}") for item in value]
        return sorted(items, key=lambda item: json.dumps(item, sort_keys=True))

    raise _reject(path, value, f"Cannot canonicalize value of type {type(value).__name__}")


def dumps_canonical(obj: Any) -> str:
    """
    Serialize to canonical JSON text.

    Example:
        >>> dumps_canonical({"b": 2, "a": b"\\x01"})
        '{"a":"01","b":2}'
    """
    canonical = canonicalize_value(obj)
    try:
        return json.dumps(
            canonical,
            sort_keys=True,
            separators=CANONICAL_JSON_SEPARATORS,
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise CanonicalizationException(
            message=f"Failed to serialize to canonical JSON: {e}",
            details={"type": type(obj).__name__, "error": str(e)},
        ) from e


def canonical_equals(obj1: Any, obj2: Any) -> bool:
    """True when both values serialize to the same canonical text."""
    try:
        return dumps_canonical(obj1) == dumps_canonical(obj2)
    except CanonicalizationException:
        return False
