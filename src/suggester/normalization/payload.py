"""Coerce validated JSON payloads into engine models.

Callers validate first (schema + domain); these helpers only convert, and
skip entries that are not objects.
"""

from __future__ import annotations

from typing import Any

from suggester.models import DeadlineEvent, DelayRecord, FreeSlot, Subject, parse_timestamp

DEADLINE_EVENT_TYPE = "deadline"
FREE_STUDY_EVENT_TYPE = "free_study"


def _items(payload: dict[str, Any], root_key: str, list_key: str) -> list[dict[str, Any]]:
    root = payload.get(root_key, {})
    if isinstance(root, dict):
        items = root.get(list_key, [])
        if isinstance(items, list):
            return [item for item in items if isinstance(item, dict)]
    return []


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    return int(value)


def subject_from_dict(raw: dict[str, Any]) -> Subject:
    return Subject(
        subject_id=str(raw.get("id", "")),
        name=str(raw.get("name", "") or ""),
        difficulty_weight=_optional_int(raw.get("difficulty_weight")),
        dedication_weight=_optional_int(raw.get("dedication_weight")),
        status=str(raw.get("status") or "active"),
        code=raw.get("code") if isinstance(raw.get("code"), str) else None,
    )


def delay_from_dict(raw: dict[str, Any]) -> DelayRecord:
    delayed_at = raw.get("delayed_at")
    return DelayRecord(
        subject_id=str(raw.get("subject_id", "")),
        expires_at=parse_timestamp(raw["expires_at"]),
        delayed_at=parse_timestamp(delayed_at) if delayed_at else None,
        delay_id=str(raw.get("id", "") or ""),
    )


def split_calendar_events(events: list[dict[str, Any]]) -> tuple[list[DeadlineEvent], list[FreeSlot]]:
    """Split raw calendar events into deadlines and free-study slots.

    Other event types (classes, occupied time) do not take part in
    suggestions. Deadlines without a subject and free slots without an end
    cannot be used and are dropped here.
    """

    deadlines: list[DeadlineEvent] = []
    free_slots: list[FreeSlot] = []
    for event in events:
        event_type = event.get("event_type")
        if event_type == DEADLINE_EVENT_TYPE:
            subject_id = event.get("subject_id")
            if not subject_id:
                continue
            deadlines.append(
                DeadlineEvent(
                    subject_id=str(subject_id),
                    due_at=parse_timestamp(event["start_datetime"]),
                    event_id=str(event.get("id", "")),
                    title=str(event.get("title", "") or ""),
                )
            )
        elif event_type == FREE_STUDY_EVENT_TYPE:
            end_raw = event.get("end_datetime")
            if not end_raw:
                continue
            subject_id = event.get("subject_id")
            free_slots.append(
                FreeSlot(
                    slot_id=str(event.get("id", "")),
                    start=parse_timestamp(event["start_datetime"]),
                    end=parse_timestamp(end_raw),
                    subject_id=str(subject_id) if subject_id else None,
                )
            )
    return deadlines, free_slots


def load_engine_inputs(
    loaded_payload: dict[str, Any],
) -> tuple[list[Subject], list[DeadlineEvent], list[FreeSlot], list[DelayRecord]]:
    subjects = [subject_from_dict(raw) for raw in _items(loaded_payload, "subjects", "subjects")]
    deadlines, free_slots = split_calendar_events(_items(loaded_payload, "calendar_events", "events"))
    delays = [delay_from_dict(raw) for raw in _items(loaded_payload, "delays", "delays")]
    return subjects, deadlines, free_slots, delays
