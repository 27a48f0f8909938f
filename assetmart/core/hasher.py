"""Canonical hashing helpers used to seal marketplace events."""

from __future__ import annotations

import hashlib
import json
from typing import Any


def canonical_json_bytes(obj: Any) -> bytes:
    """Serialize *obj* with sorted keys and compact separators, as UTF-8."""
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Hex SHA-256 of *data*."""
    return hashlib.sha256(data).hexdigest()


def compute_event_hash(event_dict: dict[str, Any]) -> str:
    """SHA-256 of an event (excluding the event_hash field itself).

    Any later edit to the event changes this value.
    """
    d = {k: v for k, v in event_dict.items() if k != "event_hash"}
    return sha256_hex(canonical_json_bytes(d))
