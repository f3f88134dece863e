"""Normalization for incoming suggest requests."""

from __future__ import annotations

from typing import Any

REQUEST_SCHEMA_VERSION = "1.0"
PATH_FIELDS = ("subjects_path", "calendar_events_path", "delays_path")


def normalize_request(payload: dict[str, Any]) -> dict[str, Any]:
    """Copy of the request with defaults filled in and path fields trimmed."""
    normalized = dict(payload)
    normalized.setdefault("schema_version", REQUEST_SCHEMA_VERSION)
    normalized.setdefault("delays_path", None)
    for field in PATH_FIELDS:
        value = normalized.get(field)
        if isinstance(value, str):
            normalized[field] = value.strip()
    if normalized.get("config") is None:
        normalized.pop("config", None)
    return normalized
