"""Priority scoring for schedulable subjects.

Formula: ``score = (D + B) * (1 + urgency) + delay_bonus`` where D and B are
the difficulty and dedication weights, urgency comes from the nearest
future deadline and the delay bonus from an active delay record.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from suggester.models import DeadlineEvent, DelayRecord, Subject, SubjectPriority

logger = logging.getLogger(__name__)

DEFAULT_DELAY_BONUS = 2.0

# (max days_until, inclusive?, factor); first match wins. Negative days
# always map to PAST_DEADLINE_URGENCY.
PAST_DEADLINE_URGENCY = 2.0
URGENCY_LADDERS: dict[str, tuple[tuple[int, bool, float], ...]] = {
    "fine": (
        (1, True, 1.5),
        (2, True, 1.2),
        (4, False, 1.0),
        (7, True, 0.5),
    ),
    "coarse": (
        (1, True, 1.5),
        (4, False, 1.0),
        (7, True, 0.5),
    ),
}
DEFAULT_URGENCY_LADDER = "fine"

_ONE_DAY = timedelta(days=1)


def days_until(due_at: datetime, now: datetime) -> int:
    """Whole days from ``now`` to ``due_at``, floored."""
    return (due_at - now) // _ONE_DAY


def urgency_factor(days: int, ladder: str = DEFAULT_URGENCY_LADDER) -> float:
    steps = URGENCY_LADDERS.get(ladder)
    if steps is None:
        raise ValueError(f"Unknown urgency ladder {ladder!r}; expected one of {sorted(URGENCY_LADDERS)}")
    if days < 0:
        return PAST_DEADLINE_URGENCY
    for limit, inclusive, factor in steps:
        if days < limit or (inclusive and days == limit):
            return factor
    return 0.0


def nearest_future_deadline(
    subject_id: str,
    deadlines: Iterable[DeadlineEvent],
    now: datetime,
) -> DeadlineEvent | None:
    upcoming = [d for d in deadlines if d.subject_id == subject_id and d.due_at > now]
    if not upcoming:
        return None
    return min(upcoming, key=lambda d: d.due_at)


def has_active_delay(subject_id: str, delays: Iterable[DelayRecord], now: datetime) -> bool:
    return any(delay.subject_id == subject_id and delay.is_active(now) for delay in delays)


def compute_score(
    difficulty_weight: int,
    dedication_weight: int,
    urgency: float,
    delay_bonus: float = 0.0,
) -> float:
    return (difficulty_weight + dedication_weight) * (1 + urgency) + delay_bonus


def score_subject(
    subject: Subject,
    deadlines: Iterable[DeadlineEvent],
    delays: Iterable[DelayRecord],
    now: datetime,
    *,
    delay_bonus: float = DEFAULT_DELAY_BONUS,
    ladder: str = DEFAULT_URGENCY_LADDER,
) -> SubjectPriority:
    """Score one subject. Callers must only pass schedulable subjects."""

    if subject.difficulty_weight is None or subject.dedication_weight is None:
        raise ValueError(f"Subject {subject.subject_id!r} has no weights and cannot be scored")

    nearest = nearest_future_deadline(subject.subject_id, deadlines, now)
    urgency = urgency_factor(days_until(nearest.due_at, now), ladder) if nearest else 0.0
    bonus = delay_bonus if has_active_delay(subject.subject_id, delays, now) else 0.0

    return SubjectPriority(
        subject=subject,
        difficulty_weight=subject.difficulty_weight,
        dedication_weight=subject.dedication_weight,
        urgency_factor=urgency,
        delay_bonus=bonus,
        score=compute_score(subject.difficulty_weight, subject.dedication_weight, urgency, bonus),
        nearest_deadline=nearest,
    )


def score_subjects(
    subjects: Sequence[Subject],
    deadlines: Sequence[DeadlineEvent],
    delays: Sequence[DelayRecord],
    now: datetime,
    *,
    delay_bonus: float = DEFAULT_DELAY_BONUS,
    ladder: str = DEFAULT_URGENCY_LADDER,
) -> list[SubjectPriority]:
    """Score every schedulable subject, highest score first.

    Subjects missing a weight or already finished are skipped silently.
    The sort is stable so equal scores keep their input order.
    """

    priorities = [
        score_subject(subject, deadlines, delays, now, delay_bonus=delay_bonus, ladder=ladder)
        for subject in subjects
        if subject.is_schedulable
    ]
    priorities.sort(key=lambda p: p.score, reverse=True)
    logger.debug(
        "SUBJECTS_SCORED scored=%s skipped=%s",
        len(priorities),
        len(subjects) - len(priorities),
    )
    return priorities
