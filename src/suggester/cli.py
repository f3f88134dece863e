"""CLI entrypoint for the study suggester."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from suggester.engine import run_suggestions
from suggester.io import dump_json, read_json, resolve_input_path, write_json
from suggester.logging_conf import configure_logging
from suggester.metrics import collect_metrics
from suggester.normalization import normalize_request, resolve_engine_config
from suggester.reporting import build_error_report, build_success_report
from suggester.schedule_codes import decode_schedule_code, split_schedule_codes
from suggester.validation import (
    ValidationError,
    ValidationReport,
    validate_domain_inputs,
    validate_inputs_with_schema,
    validate_suggest_request,
)

logger = logging.getLogger(__name__)

_PATH_FIELDS = {
    "subjects_path": "subjects",
    "calendar_events_path": "calendar_events",
    "delays_path": "delays",
}


def _load_referenced_inputs(request_file: Path, request: dict[str, Any]) -> tuple[dict[str, Any], list[ValidationError]]:
    loaded: dict[str, Any] = {}
    errors: list[ValidationError] = []

    for path_field, target_field in _PATH_FIELDS.items():
        raw = request.get(path_field)
        if raw is None:
            continue
        resolved = resolve_input_path(request_file, raw)
        try:
            loaded[target_field] = read_json(resolved)
        except FileNotFoundError:
            errors.append(
                ValidationError(
                    code="file_not_found",
                    message=f"Referenced file not found: {resolved}",
                    path=f"$.{path_field}",
                )
            )
        except ValueError as exc:
            errors.append(ValidationError(code="invalid_json", message=str(exc), path=f"$.{path_field}"))

    return loaded, errors


def run_suggest_command(request_path: str, output_path: str) -> int:
    """Validate the request and its inputs, run the engine and write the report."""
    validation_report = ValidationReport()

    try:
        request_payload = read_json(request_path)
    except (OSError, ValueError) as exc:
        logger.error("REQUEST_READ_FAIL path=%s err=%s", request_path, exc)
        write_json(
            output_path,
            build_error_report(
                [ValidationError(code="invalid_request", message=str(exc), path="$.request")],
                code="request_read_error",
            ),
        )
        return 2

    request_payload = normalize_request(request_payload)
    request_id = request_payload.get("request_id") if isinstance(request_payload.get("request_id"), str) else None

    errors = validate_suggest_request(request_payload)
    if errors:
        logger.warning("REQUEST_INVALID request_id=%s errors=%s", request_id, len(errors))
        write_json(output_path, build_error_report(errors, request_id=request_id))
        return 2

    loaded, load_errors = _load_referenced_inputs(Path(request_path), request_payload)
    if load_errors:
        logger.warning("INPUT_LOAD_FAIL request_id=%s errors=%s", request_id, len(load_errors))
        write_json(
            output_path,
            build_error_report(
                load_errors,
                code="input_load_error",
                validation_report=validation_report,
                request_id=request_id,
            ),
        )
        return 2

    loaded["suggest_request"] = request_payload
    loaded["effective_config"] = resolve_engine_config(request_payload, validation_report)
    validation_report.extend(validate_inputs_with_schema(loaded))
    validation_report.extend(validate_domain_inputs(loaded))

    if validation_report.has_errors:
        logger.warning("VALIDATION_FAIL request_id=%s codes=%s", request_id, sorted(validation_report.error_codes()))
        write_json(
            output_path,
            build_error_report(
                validation_report.as_errors(),
                code="validation_error",
                validation_report=validation_report,
                request_id=request_id,
            ),
        )
        return 2

    result = run_suggestions(loaded)
    metrics = collect_metrics(result)
    write_json(output_path, build_success_report(result, metrics, validation_report, request_id=request_id))
    logger.info("SUGGEST_OK request_id=%s suggestions=%s", request_id, metrics["suggestion_count"])
    return 0


def run_decode_command(codes: list[str], output_path: str | None = None) -> int:
    """Decode schedule codes; exit code 1 when none of them decodes."""
    results: list[dict[str, Any]] = []
    for raw in codes:
        for code in split_schedule_codes(raw):
            parsed = decode_schedule_code(code)
            results.append({"code": code, "schedule": parsed.as_dict() if parsed else None})

    payload = {
        "status": "ok",
        "decoded": sum(1 for item in results if item["schedule"] is not None),
        "results": results,
    }
    if output_path:
        write_json(output_path, payload)
    else:
        sys.stdout.write(dump_json(payload) + "\n")
    return 0 if payload["decoded"] else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="suggester", description="Study suggestion engine CLI")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for stderr output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    suggest_parser = subparsers.add_parser("suggest", help="Generate study suggestions from a request JSON")
    suggest_parser.add_argument("--request", required=True, help="Path to suggest_request.json")
    suggest_parser.add_argument("--output", required=True, help="Path to the output report JSON")

    decode_parser = subparsers.add_parser("decode", help="Decode schedule codes such as 3N34")
    decode_parser.add_argument("codes", nargs="+", help="Codes; one argument may hold several separated by , or ;")
    decode_parser.add_argument("--output", help="Write the result JSON here instead of stdout")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "suggest":
        return run_suggest_command(args.request, args.output)
    if args.command == "decode":
        return run_decode_command(args.codes, args.output)

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
