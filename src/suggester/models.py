"""Immutable domain values consumed and produced by the suggestion engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

FINISHED_STATUSES = frozenset({"finished", "finalizada"})

# (5 + 5) * (1 + 1.5) + 2: max weights, last-day urgency and a delay bonus.
MAX_POSSIBLE_SCORE = 27.0

_WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO timestamp; naive values are treated as UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class Subject:
    subject_id: str
    name: str = ""
    difficulty_weight: int | None = None
    dedication_weight: int | None = None
    status: str = "active"
    code: str | None = None

    @property
    def is_finished(self) -> bool:
        return self.status.lower() in FINISHED_STATUSES

    @property
    def is_schedulable(self) -> bool:
        """Both weights set and not finished."""
        return bool(self.difficulty_weight) and bool(self.dedication_weight) and not self.is_finished

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.subject_id,
            "name": self.name,
            "code": self.code,
            "difficulty_weight": self.difficulty_weight,
            "dedication_weight": self.dedication_weight,
            "status": self.status,
        }


@dataclass(frozen=True, slots=True)
class DeadlineEvent:
    subject_id: str
    due_at: datetime
    event_id: str = ""
    title: str = ""

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.event_id,
            "subject_id": self.subject_id,
            "title": self.title,
            "due_at": format_timestamp(self.due_at),
        }


@dataclass(frozen=True, slots=True)
class FreeSlot:
    slot_id: str
    start: datetime
    end: datetime
    subject_id: str | None = None

    @property
    def is_manually_assigned(self) -> bool:
        return bool(self.subject_id)

    @property
    def minutes(self) -> int:
        return max(0, int((self.end - self.start).total_seconds() // 60))

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.slot_id,
            "start": format_timestamp(self.start),
            "end": format_timestamp(self.end),
            "subject_id": self.subject_id,
        }


@dataclass(frozen=True, slots=True)
class DelayRecord:
    subject_id: str
    expires_at: datetime
    delayed_at: datetime | None = None
    delay_id: str = ""

    def is_active(self, now: datetime) -> bool:
        return self.expires_at > now

    def refreshed(self, now: datetime, hours: float) -> "DelayRecord":
        return DelayRecord(
            subject_id=self.subject_id,
            expires_at=now + timedelta(hours=hours),
            delayed_at=now,
            delay_id=self.delay_id,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.delay_id,
            "subject_id": self.subject_id,
            "delayed_at": format_timestamp(self.delayed_at) if self.delayed_at else None,
            "expires_at": format_timestamp(self.expires_at),
        }


@dataclass(frozen=True, slots=True)
class SubjectPriority:
    """Score of one subject and the components it was built from."""

    subject: Subject
    difficulty_weight: int
    dedication_weight: int
    urgency_factor: float
    delay_bonus: float
    score: float
    nearest_deadline: DeadlineEvent | None = None

    @property
    def urgency_level(self) -> str:
        if self.urgency_factor >= 1.0:
            return "high"
        if self.urgency_factor >= 0.5:
            return "medium"
        return "low"

    @property
    def score_ratio(self) -> float:
        return max(0.0, min(1.0, self.score / MAX_POSSIBLE_SCORE))

    def as_dict(self) -> dict[str, Any]:
        return {
            "subject_id": self.subject.subject_id,
            "subject_name": self.subject.name,
            "difficulty_weight": self.difficulty_weight,
            "dedication_weight": self.dedication_weight,
            "urgency_factor": self.urgency_factor,
            "urgency_level": self.urgency_level,
            "delay_bonus": self.delay_bonus,
            "score": self.score,
            "score_ratio": round(self.score_ratio, 4),
            "nearest_deadline": self.nearest_deadline.as_dict() if self.nearest_deadline else None,
        }


@dataclass(frozen=True, slots=True)
class StudyBlock:
    block_id: str
    subject: Subject
    start: datetime
    end: datetime
    is_break: bool
    free_slot_id: str

    @property
    def minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.block_id,
            "subject_id": self.subject.subject_id,
            "start": format_timestamp(self.start),
            "end": format_timestamp(self.end),
            "minutes": self.minutes,
            "is_break": self.is_break,
            "free_slot_id": self.free_slot_id,
        }


@dataclass(frozen=True, slots=True)
class StudySuggestion:
    free_slot: FreeSlot
    blocks: list[StudyBlock] = field(default_factory=list)
    assigned_subject: Subject | None = None

    @property
    def study_minutes(self) -> int:
        return sum(block.minutes for block in self.blocks if not block.is_break)

    @property
    def break_minutes(self) -> int:
        return sum(block.minutes for block in self.blocks if block.is_break)

    def as_dict(self) -> dict[str, Any]:
        return {
            "free_slot": self.free_slot.as_dict(),
            "assigned_subject_id": self.assigned_subject.subject_id if self.assigned_subject else None,
            "study_minutes": self.study_minutes,
            "break_minutes": self.break_minutes,
            "blocks": [block.as_dict() for block in self.blocks],
        }


@dataclass(frozen=True, slots=True)
class ParsedSchedule:
    """Decoded schedule code; weekday is Sunday-based (1 = Monday)."""

    weekday: int
    start_time: str
    end_time: str

    @property
    def weekday_name(self) -> str:
        return _WEEKDAY_NAMES[self.weekday]

    def as_dict(self) -> dict[str, Any]:
        return {
            "weekday": self.weekday,
            "weekday_name": self.weekday_name,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }
