"""Validation for suggestion request payload."""

from __future__ import annotations

from typing import Any

from .errors import ValidationError

_REQUIRED_PATH_FIELDS = (
    "subjects_path",
    "calendar_events_path",
)
_OPTIONAL_PATH_FIELDS = ("delays_path",)


def validate_suggest_request(payload: dict[str, Any]) -> list[ValidationError]:
    """Validate the request with basic shape checks."""
    errors: list[ValidationError] = []

    for field in _REQUIRED_PATH_FIELDS:
        value = payload.get(field)
        if value is None:
            errors.append(
                ValidationError(
                    code="missing_field",
                    message=f"Missing required field: {field}",
                    path=f"$.{field}",
                )
            )
        elif not isinstance(value, str) or not value.strip():
            errors.append(_invalid_path(field))

    for field in _OPTIONAL_PATH_FIELDS:
        value = payload.get(field)
        if value is not None and (not isinstance(value, str) or not value.strip()):
            errors.append(_invalid_path(field))

    config = payload.get("config")
    if config is not None and not isinstance(config, dict):
        errors.append(
            ValidationError(
                code="invalid_type",
                message="Field must be an object: config",
                path="$.config",
            )
        )

    return errors


def _invalid_path(field: str) -> ValidationError:
    return ValidationError(
        code="invalid_type",
        message=f"Field must be a non-empty string path: {field}",
        path=f"$.{field}",
    )
