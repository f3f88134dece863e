"""Build the JSON reports written by the CLI."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from suggester.models import format_timestamp
from suggester.validation import ValidationError, ValidationReport

REPORT_SCHEMA_VERSION = "1.0.0"


def build_error_report(
    errors: list[ValidationError],
    code: str = "validation_error",
    *,
    validation_report: ValidationReport | None = None,
    request_id: str | None = None,
) -> dict[str, Any]:
    """Error report; the full validation report is attached when given."""
    payload: dict[str, Any] = {
        "status": "error",
        "schema_version": REPORT_SCHEMA_VERSION,
        "request_id": request_id,
        "error": {
            "code": code,
            "count": len(errors),
            "details": [{"code": err.code, "message": err.message, "path": err.path} for err in errors],
        },
    }
    if validation_report is not None:
        payload["validation_report"] = validation_report.as_dict()
    return payload


def build_success_report(
    result: dict[str, Any],
    metrics: dict[str, Any],
    validation_report: ValidationReport,
    *,
    request_id: str | None = None,
) -> dict[str, Any]:
    """Success report: the engine result plus metrics and validation infos."""
    return {
        "status": "ok",
        "schema_version": REPORT_SCHEMA_VERSION,
        "request_id": request_id,
        "generated_at": format_timestamp(datetime.now(timezone.utc)),
        "now": result.get("now"),
        "priorities": result.get("priorities", []),
        "suggestions": result.get("suggestions", []),
        "skipped_subjects": result.get("skipped_subjects", []),
        "warnings": result.get("warnings", []),
        "hints": result.get("hints", []),
        "metrics": metrics,
        "decision_trace": result.get("decision_trace", []),
        "effective_config": result.get("effective_config", {}),
        "validation_report": validation_report.as_dict(),
    }
