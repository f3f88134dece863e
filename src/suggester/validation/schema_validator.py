"""Structural validation of suggestion inputs against the bundled JSON schemas.

Only the schema keywords the bundled files use are understood: ``type``
(single or list), ``enum``, ``required``, ``properties``,
``additionalProperties: false``, ``items``, ``minItems``, ``minLength``,
``format: date-time``, ``minimum``/``maximum`` and local ``$ref`` pointers
into ``definitions``.
"""

from __future__ import annotations

import json
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any

from .errors import ValidationReport

SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schema"

_SCHEMA_BY_PAYLOAD = {
    "suggest_request": "suggest_request.schema.json",
    "subjects": "subjects.schema.json",
    "calendar_events": "calendar_events.schema.json",
    "delays": "delays.schema.json",
}

_TYPE_CHECKS = {
    "object": lambda value: isinstance(value, dict),
    "array": lambda value: isinstance(value, list),
    "string": lambda value: isinstance(value, str),
    "integer": lambda value: isinstance(value, int) and not isinstance(value, bool),
    "number": lambda value: isinstance(value, (int, float)) and not isinstance(value, bool),
    "boolean": lambda value: isinstance(value, bool),
    "null": lambda value: value is None,
}


@lru_cache(maxsize=None)
def load_schema(schema_file: str) -> dict[str, Any]:
    return json.loads((SCHEMA_DIR / schema_file).read_text(encoding="utf-8"))


def validate_inputs_with_schema(payloads: dict[str, Any]) -> ValidationReport:
    """Check every loaded payload; absent optional payloads are skipped."""
    report = ValidationReport()

    for payload_name, schema_file in _SCHEMA_BY_PAYLOAD.items():
        if payloads.get(payload_name) is None:
            continue
        schema = load_schema(schema_file)
        _SchemaWalker(root=schema, report=report).check(payloads[payload_name], schema, f"$.{payload_name}")

    return report


class _SchemaWalker:
    def __init__(self, *, root: dict[str, Any], report: ValidationReport) -> None:
        self.root = root
        self.report = report

    def check(self, value: Any, schema: dict[str, Any], path: str) -> None:
        schema = self._resolve(schema)

        expected_type = schema.get("type")
        if expected_type and not _matches_type(value, expected_type):
            self.report.add_error(
                code="INVALID_TYPE",
                message=f"Expected type {expected_type}, got {type(value).__name__}",
                field_path=path,
            )
            return

        if "enum" in schema and value not in schema["enum"]:
            self.report.add_error(
                code="INVALID_ENUM_VALUE",
                message=f"Value {value!r} not in {schema['enum']}",
                field_path=path,
            )

        if isinstance(value, dict):
            self._check_object(value, schema, path)
        elif isinstance(value, list):
            self._check_array(value, schema, path)
        elif isinstance(value, str):
            self._check_string(value, schema, path)
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            self._check_number(value, schema, path)

    def _resolve(self, schema: dict[str, Any]) -> dict[str, Any]:
        ref = schema.get("$ref")
        if not ref:
            return schema
        if not ref.startswith("#/definitions/"):
            raise ValueError(f"Unsupported schema reference: {ref}")
        return self.root["definitions"][ref.rsplit("/", 1)[-1]]

    def _check_object(self, value: dict[str, Any], schema: dict[str, Any], path: str) -> None:
        for key in schema.get("required", []):
            if key not in value:
                self.report.add_error(
                    code="MISSING_REQUIRED_FIELD",
                    message=f"Missing required field: {key}",
                    field_path=f"{path}.{key}",
                )

        properties = schema.get("properties", {})
        if schema.get("additionalProperties") is False:
            for key in value:
                if key not in properties:
                    self.report.add_error(
                        code="UNKNOWN_FIELD",
                        message=f"Unknown field: {key}",
                        field_path=f"{path}.{key}",
                        suggested_fix=f"Use one of: {', '.join(sorted(properties))}",
                    )

        for key, prop_schema in properties.items():
            if key in value:
                self.check(value[key], prop_schema, f"{path}.{key}")

    def _check_array(self, value: list[Any], schema: dict[str, Any], path: str) -> None:
        min_items = schema.get("minItems")
        if min_items is not None and len(value) < min_items:
            self.report.add_error(
                code="EMPTY_ARRAY_NOT_ALLOWED",
                message=f"Array must have at least {min_items} items",
                field_path=path,
            )
        items_schema = schema.get("items")
        if isinstance(items_schema, dict):
            for idx, item in enumerate(value):
                self.check(item, items_schema, f"{path}[{idx}]")

    def _check_string(self, value: str, schema: dict[str, Any], path: str) -> None:
        min_len = schema.get("minLength")
        if min_len is not None and len(value) < min_len:
            self.report.add_error(code="MISSING_REQUIRED_FIELD", message="String cannot be empty", field_path=path)
        if schema.get("format") == "date-time" and not _is_datetime(value):
            self.report.add_error(
                code="INVALID_DATE_FORMAT",
                message=f"Invalid ISO 8601 timestamp: {value!r}",
                field_path=path,
                suggested_fix="Use a timestamp such as 2026-03-02T14:00:00Z.",
            )

    def _check_number(self, value: float, schema: dict[str, Any], path: str) -> None:
        minimum = schema.get("minimum")
        if minimum is not None and value < minimum:
            self.report.add_error(code="OUT_OF_RANGE", message=f"Value must be >= {minimum}", field_path=path)
        maximum = schema.get("maximum")
        if maximum is not None and value > maximum:
            self.report.add_error(code="OUT_OF_RANGE", message=f"Value must be <= {maximum}", field_path=path)


def _matches_type(value: Any, expected_type: str | list[str]) -> bool:
    if isinstance(expected_type, list):
        return any(_matches_type(value, item) for item in expected_type)
    check = _TYPE_CHECKS.get(expected_type)
    return True if check is None else check(value)


def _is_datetime(value: str) -> bool:
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True
