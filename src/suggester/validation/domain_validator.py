"""Domain-level cross-file validation rules."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from .errors import ValidationReport


def validate_domain_inputs(loaded_payload: dict[str, Any]) -> ValidationReport:
    """Validate cross-file coherence and non-schema rules."""
    report = ValidationReport()

    subjects = _items(loaded_payload.get("subjects"), "subjects")
    events = _items(loaded_payload.get("calendar_events"), "events")
    delays = _items(loaded_payload.get("delays"), "delays")

    subject_ids: set[str] = set()
    for idx, subject in enumerate(subjects):
        subject_id = subject.get("id")
        if not isinstance(subject_id, str):
            continue
        if subject_id in subject_ids:
            report.add_error(
                code="DUPLICATE_SUBJECT_ID",
                message=f"Duplicate subject id: {subject_id}",
                field_path=f"$.subjects.subjects[{idx}].id",
            )
        subject_ids.add(subject_id)

    for idx, event in enumerate(events):
        path = f"$.calendar_events.events[{idx}]"
        event_subject = event.get("subject_id")
        if isinstance(event_subject, str) and event_subject and event_subject not in subject_ids:
            report.add_error(
                code="UNKNOWN_SUBJECT_REFERENCE",
                message=f"Unknown subject id reference: {event_subject}",
                field_path=f"{path}.subject_id",
            )

        event_type = event.get("event_type")
        if event_type == "free_study":
            _validate_slot_window(event, path, report)
        elif event_type == "deadline" and not event_subject:
            report.add_info(
                code="MISSING_DEADLINE_SUBJECT",
                message="Deadline without subject does not affect urgency",
                field_path=f"{path}.subject_id",
            )

    for idx, delay in enumerate(delays):
        delay_subject = delay.get("subject_id")
        if isinstance(delay_subject, str) and delay_subject not in subject_ids:
            report.add_error(
                code="UNKNOWN_SUBJECT_REFERENCE",
                message=f"Unknown subject id reference: {delay_subject}",
                field_path=f"$.delays.delays[{idx}].subject_id",
            )

    return report


def _items(root: Any, list_key: str) -> list[dict[str, Any]]:
    if not isinstance(root, dict):
        return []
    items = root.get(list_key, [])
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def _validate_slot_window(event: dict[str, Any], path: str, report: ValidationReport) -> None:
    start = _parse_datetime(event.get("start_datetime"))
    end_raw = event.get("end_datetime")
    if not end_raw:
        report.add_info(
            code="SLOT_WITHOUT_END",
            message="Free-study slot without end_datetime is skipped",
            field_path=f"{path}.end_datetime",
        )
        return
    end = _parse_datetime(end_raw)
    if start is not None and end is not None and end <= start:
        report.add_error(
            code="INVALID_SLOT_WINDOW",
            message="end_datetime must be after start_datetime",
            field_path=path,
            suggested_fix="Swap the times or adjust the free-study slot.",
        )


def _parse_datetime(raw: Any) -> datetime | None:
    if not isinstance(raw, str):
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
