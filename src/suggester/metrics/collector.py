"""Suggestion metrics collector."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from statistics import mean, pstdev
from typing import Any


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def _slot_minutes(slot: dict[str, Any]) -> int:
    try:
        start = datetime.fromisoformat(str(slot.get("start", "")).replace("Z", "+00:00"))
        end = datetime.fromisoformat(str(slot.get("end", "")).replace("Z", "+00:00"))
    except ValueError:
        return 0
    return max(0, int((end - start).total_seconds() // 60))


def collect_metrics(result: dict[str, Any]) -> dict[str, Any]:
    """Compute summary metrics; ratios are clamped in [0,1]."""
    suggestions = [item for item in result.get("suggestions", []) if isinstance(item, dict)]
    priorities = [item for item in result.get("priorities", []) if isinstance(item, dict)]
    eligible_slots = [item for item in result.get("eligible_slots", []) if isinstance(item, dict)]

    study_minutes_total = 0
    break_minutes_total = 0
    minutes_by_subject: dict[str, int] = defaultdict(int)
    slots_by_subject: dict[str, int] = defaultdict(int)

    for suggestion in suggestions:
        sid = str(suggestion.get("assigned_subject_id", ""))
        study = max(0, int(suggestion.get("study_minutes", 0) or 0))
        pause = max(0, int(suggestion.get("break_minutes", 0) or 0))
        study_minutes_total += study
        break_minutes_total += pause
        minutes_by_subject[sid] += study
        slots_by_subject[sid] += 1

    scored_ids = {str(p.get("subject_id", "")) for p in priorities}
    covered_ids = {sid for sid in minutes_by_subject if sid in scored_ids}
    coverage_subject = _clamp01(len(covered_ids) / len(scored_ids)) if scored_ids else 0.0

    available_minutes = sum(_slot_minutes(slot) for slot in eligible_slots)
    slot_utilization = _clamp01((study_minutes_total + break_minutes_total) / max(1, available_minutes))

    scores = [float(p.get("score", 0.0) or 0.0) for p in priorities]
    subject_minutes = list(minutes_by_subject.values())
    avg_minutes = mean(subject_minutes) if subject_minutes else 0.0
    cv = (pstdev(subject_minutes) / max(1.0, avg_minutes)) if subject_minutes else 0.0

    return {
        "suggestion_count": len(suggestions),
        "study_minutes_total": study_minutes_total,
        "break_minutes_total": break_minutes_total,
        "minutes_by_subject": dict(sorted(minutes_by_subject.items())),
        "slots_by_subject": dict(sorted(slots_by_subject.items())),
        "coverage_subject": coverage_subject,
        "slot_utilization": slot_utilization,
        "balance_score": _clamp01(1.0 - min(1.0, cv)),
        "top_score": max(scores) if scores else 0.0,
        "mean_score": mean(scores) if scores else 0.0,
    }
