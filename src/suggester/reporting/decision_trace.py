"""Per-slot record of why a subject was picked."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from suggester.models import format_timestamp


@dataclass(frozen=True, slots=True)
class SlotDecision:
    decision_id: str
    timestamp: datetime
    slot_id: str
    scores_by_subject: dict[str, float]
    selected_subject_id: str
    applied_rules: tuple[str, ...]
    block_count: int
    tradeoff_note: str = ""

    def as_dict(self) -> dict[str, Any]:
        return {
            "decision_id": self.decision_id,
            "timestamp": format_timestamp(self.timestamp),
            "slot_id": self.slot_id,
            "candidate_subjects": sorted(self.scores_by_subject),
            "scores_by_subject": {sid: self.scores_by_subject[sid] for sid in sorted(self.scores_by_subject)},
            "selected_subject_id": self.selected_subject_id,
            "applied_rules": list(self.applied_rules),
            "block_count": self.block_count,
            "tradeoff_note": self.tradeoff_note,
        }


@dataclass(slots=True)
class DecisionTraceCollector:
    """Collects slot decisions while the orchestrator runs.

    Decision timestamps are synthetic (start plus one second per decision)
    so the trace stays reproducible for a fixed ``now``.
    """

    start_timestamp: datetime
    decisions: list[SlotDecision] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.start_timestamp.tzinfo is None:
            self.start_timestamp = self.start_timestamp.replace(tzinfo=timezone.utc)

    def record(
        self,
        *,
        slot_id: str,
        scores_by_subject: dict[str, float],
        selected_subject_id: str,
        applied_rules: list[str],
        block_count: int,
        tradeoff_note: str = "",
    ) -> SlotDecision:
        sequence = len(self.decisions) + 1
        decision = SlotDecision(
            decision_id=f"d-{sequence:06d}",
            timestamp=self.start_timestamp + timedelta(seconds=sequence),
            slot_id=slot_id,
            scores_by_subject={sid: float(score) for sid, score in scores_by_subject.items()},
            selected_subject_id=selected_subject_id,
            applied_rules=tuple(applied_rules),
            block_count=block_count,
            tradeoff_note=tradeoff_note,
        )
        self.decisions.append(decision)
        return decision

    def as_list(self) -> list[dict[str, Any]]:
        ordered = sorted(self.decisions, key=lambda d: (d.timestamp, d.decision_id))
        return [decision.as_dict() for decision in ordered]
