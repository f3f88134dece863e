"""Suggestion engine runner."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from suggester.models import (
    DeadlineEvent,
    DelayRecord,
    FreeSlot,
    StudySuggestion,
    Subject,
    SubjectPriority,
    format_timestamp,
    parse_timestamp,
)
from suggester.normalization.payload import load_engine_inputs
from suggester.reporting.decision_trace import DecisionTraceCollector
from suggester.reporting.warnings import build_warnings_and_hints

from .config import DEFAULT_ENGINE_CONFIG, check_engine_config
from .distributor import distribute_slots, extra_entries
from .scoring import score_subjects
from .segmenter import segment_slot

logger = logging.getLogger(__name__)


def eligible_free_slots(free_slots: Sequence[FreeSlot], now: datetime) -> list[FreeSlot]:
    """Future slots without a manual subject, ordered by start time."""
    return sorted(
        (slot for slot in free_slots if slot.start > now and not slot.is_manually_assigned),
        key=lambda slot: slot.start,
    )


def generate_suggestions(
    subjects: Sequence[Subject],
    free_slots: Sequence[FreeSlot],
    deadlines: Sequence[DeadlineEvent],
    delays: Sequence[DelayRecord],
    now: datetime,
    *,
    config: dict[str, Any] | None = None,
    decision_trace: DecisionTraceCollector | None = None,
    priorities: Sequence[SubjectPriority] | None = None,
) -> list[StudySuggestion]:
    """Assign a subject to every eligible free slot and segment it.

    ``now`` must be captured once by the caller. Slots whose blocks come
    out empty (shorter than the minimum usable time) are dropped.
    ``priorities`` may carry a ranking already scored from the same inputs
    and config. An unusable ``config`` raises ``ValueError``.
    """

    cfg = DEFAULT_ENGINE_CONFIG if config is None else {**DEFAULT_ENGINE_CONFIG, **config}
    check_engine_config(cfg)

    slots = eligible_free_slots(free_slots, now)
    if not slots or not subjects:
        return []

    if priorities is None:
        priorities = _score_with_config(subjects, deadlines, delays, now, cfg)
    if not priorities:
        return []

    once_threshold = float(cfg["repeat_once_threshold"])
    triple_threshold = float(cfg["repeat_triple_threshold"])
    distribution = distribute_slots(
        priorities,
        len(slots),
        once_threshold=once_threshold,
        triple_threshold=triple_threshold,
    )
    scores_by_subject = {p.subject.subject_id: p.score for p in priorities}

    suggestions: list[StudySuggestion] = []
    for slot, priority in zip(slots, distribution):
        blocks = segment_slot(
            slot,
            priority,
            study_minutes=cfg["study_minutes"],
            break_minutes=cfg["break_minutes"],
            min_usable_minutes=cfg["min_usable_minutes"],
        )

        if decision_trace is not None:
            extras = extra_entries(
                priority.score,
                once_threshold=once_threshold,
                triple_threshold=triple_threshold,
            )
            rules = ["RULE_SCORE_RANKING"]
            if extras == 3:
                rules.append("RULE_REPEAT_TRIPLE")
            elif extras == 1:
                rules.append("RULE_REPEAT_ONCE")
            if priority.delay_bonus > 0:
                rules.append("RULE_DELAY_BONUS")
            if not blocks:
                rules.append("RULE_SLOT_TOO_SHORT")
            decision_trace.record(
                slot_id=slot.slot_id,
                scores_by_subject=scores_by_subject,
                selected_subject_id=priority.subject.subject_id,
                applied_rules=rules,
                block_count=len(blocks),
                tradeoff_note="" if blocks else "Slot shorter than the minimum usable time; suggestion dropped.",
            )

        if not blocks:
            continue
        suggestions.append(StudySuggestion(free_slot=slot, blocks=blocks, assigned_subject=priority.subject))

    logger.debug(
        "SUGGESTIONS_GENERATED slots=%s subjects=%s suggestions=%s",
        len(slots),
        len(priorities),
        len(suggestions),
    )
    return suggestions


def _score_with_config(
    subjects: Sequence[Subject],
    deadlines: Sequence[DeadlineEvent],
    delays: Sequence[DelayRecord],
    now: datetime,
    cfg: dict[str, Any],
) -> list[SubjectPriority]:
    return score_subjects(
        subjects,
        deadlines,
        delays,
        now,
        delay_bonus=float(cfg["delay_bonus"]),
        ladder=cfg["urgency_ladder"],
    )


def resolve_now(request: dict[str, Any]) -> datetime:
    """Pick the reference time once: request ``now``, ``generated_at``, or the clock."""
    for key in ("now", "generated_at"):
        raw = request.get(key)
        if isinstance(raw, str) and raw:
            return parse_timestamp(raw)
    return datetime.now(timezone.utc)


def run_suggestions(payload: dict[str, Any]) -> dict[str, Any]:
    """Run the engine over loaded, validated payloads."""
    request = payload.get("suggest_request", {}) if isinstance(payload.get("suggest_request"), dict) else {}
    config = payload.get("effective_config") if isinstance(payload.get("effective_config"), dict) else {}
    cfg = {**DEFAULT_ENGINE_CONFIG, **config}
    now = resolve_now(request)

    subjects, deadlines, free_slots, delays = load_engine_inputs(payload)

    check_engine_config(cfg)
    priorities = _score_with_config(subjects, deadlines, delays, now, cfg)
    decision_trace = DecisionTraceCollector(start_timestamp=now)
    suggestions = generate_suggestions(
        subjects,
        free_slots,
        deadlines,
        delays,
        now,
        config=cfg,
        decision_trace=decision_trace,
        priorities=priorities,
    )
    eligible = eligible_free_slots(free_slots, now)
    skipped = [
        {
            "subject_id": subject.subject_id,
            "reason": "finished" if subject.is_finished else "missing_weights",
        }
        for subject in subjects
        if not subject.is_schedulable
    ]

    warnings, hints = build_warnings_and_hints(
        subjects=subjects,
        priorities=priorities,
        eligible_slots=eligible,
        assigned_subject_ids={suggestion.assigned_subject.subject_id for suggestion in suggestions},
        deadlines=deadlines,
        delays=delays,
        now=now,
        notice_days=int(cfg["deadline_notice_days"]),
        urgent_hours=int(cfg["deadline_urgent_hours"]),
    )

    logger.info(
        "RUN_COMPLETE now=%s subjects=%s eligible_slots=%s suggestions=%s",
        format_timestamp(now),
        len(subjects),
        len(eligible),
        len(suggestions),
    )
    return {
        "status": "ok",
        "now": format_timestamp(now),
        "priorities": [priority.as_dict() for priority in priorities],
        "suggestions": [suggestion.as_dict() for suggestion in suggestions],
        "eligible_slots": [slot.as_dict() for slot in eligible],
        "skipped_subjects": skipped,
        "warnings": warnings,
        "hints": hints,
        "effective_config": cfg,
        "decision_trace": decision_trace.as_list(),
    }
