"""Warning and hint generation for suggestion output."""

from __future__ import annotations

from collections.abc import Collection, Sequence
from datetime import datetime, timedelta
from typing import Any

from suggester.models import DeadlineEvent, DelayRecord, FreeSlot, Subject, SubjectPriority, format_timestamp


def build_warnings_and_hints(
    *,
    subjects: Sequence[Subject],
    priorities: Sequence[SubjectPriority],
    eligible_slots: Sequence[FreeSlot],
    assigned_subject_ids: Collection[str],
    deadlines: Sequence[DeadlineEvent],
    delays: Sequence[DelayRecord],
    now: datetime,
    notice_days: int = 7,
    urgent_hours: int = 24,
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Generate presentation warnings and the hints that address them."""
    warnings: list[dict[str, Any]] = []
    hints: list[dict[str, Any]] = []

    # (1) Subjects that cannot be scored until weights are configured.
    without_weights = sorted(
        subject.subject_id
        for subject in subjects
        if not subject.is_finished and not (subject.difficulty_weight and subject.dedication_weight)
    )
    if without_weights:
        warnings.append(
            {
                "code": "SUBJECTS_WITHOUT_WEIGHTS",
                "severity": "warning",
                "subject_ids": without_weights,
                "message": "Some active subjects have no difficulty or dedication weight and were not scored.",
            }
        )
        hints.append(
            {
                "code": "HINT_CONFIGURE_WEIGHTS",
                "message": "Set difficulty and dedication weights (1-5) for every active subject.",
            }
        )

    # (2) Nothing to fill or nothing to fill it with.
    if not eligible_slots:
        warnings.append(
            {
                "code": "NO_FREE_SLOTS",
                "severity": "warning",
                "message": "No future free-study slot is available for automatic suggestions.",
            }
        )
        hints.append(
            {
                "code": "HINT_ADD_FREE_SLOTS",
                "message": "Mark free-study time in the calendar to receive suggestions.",
            }
        )
    if not priorities:
        warnings.append(
            {
                "code": "NO_SCHEDULABLE_SUBJECTS",
                "severity": "warning",
                "message": "No active subject with weights is available for scoring.",
            }
        )
    elif eligible_slots:
        # Repeats for high scores can leave mid-ranked subjects without a slot.
        uncovered = sorted(p.subject.subject_id for p in priorities if p.subject.subject_id not in assigned_subject_ids)
        if uncovered:
            warnings.append(
                {
                    "code": "UNCOVERED_SUBJECTS",
                    "severity": "info",
                    "subject_ids": uncovered,
                    "message": "Some scored subjects received no suggested study time.",
                }
            )
            hints.append(
                {
                    "code": "HINT_ADD_FREE_SLOTS",
                    "message": "Add free-study slots so every subject gets study time.",
                }
            )

    # (3) Upcoming deadlines.
    urgent_limit = now + timedelta(hours=urgent_hours)
    notice_limit = now + timedelta(days=notice_days)
    for deadline in sorted(deadlines, key=lambda d: (d.due_at, d.subject_id)):
        if deadline.due_at <= now:
            continue
        if deadline.due_at <= urgent_limit:
            code, severity = "DEADLINE_WITHIN_24H", "critical"
        elif deadline.due_at <= notice_limit:
            code, severity = "DEADLINE_WITHIN_7_DAYS", "warning"
        else:
            continue
        warnings.append(
            {
                "code": code,
                "severity": severity,
                "subject_id": deadline.subject_id,
                "event_id": deadline.event_id,
                "title": deadline.title,
                "due_at": format_timestamp(deadline.due_at),
            }
        )

    # (4) Delay bonuses in effect.
    for delay in sorted(delays, key=lambda d: d.subject_id):
        if not delay.is_active(now):
            continue
        warnings.append(
            {
                "code": "ACTIVE_DELAY",
                "severity": "info",
                "subject_id": delay.subject_id,
                "expires_at": format_timestamp(delay.expires_at),
            }
        )

    unique_hints: list[dict[str, Any]] = []
    seen: set[str] = set()
    for hint in hints:
        if hint["code"] in seen:
            continue
        seen.add(hint["code"])
        unique_hints.append(hint)

    return warnings, unique_hints
