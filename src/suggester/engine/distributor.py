"""Map ranked subject priorities onto a fixed number of free slots.

Phases:
1) pool building: every subject once, plus extra entries for high scores,
2) reconciliation with the slot count (cyclic padding or truncation).

Full coverage of subjects is only guaranteed when there are at least as
many slots as subjects; with fewer slots high scores take all of them.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from suggester.models import SubjectPriority

logger = logging.getLogger(__name__)

REPEAT_ONCE_THRESHOLD = 12.0
REPEAT_TRIPLE_THRESHOLD = 15.0


def extra_entries(
    score: float,
    *,
    once_threshold: float = REPEAT_ONCE_THRESHOLD,
    triple_threshold: float = REPEAT_TRIPLE_THRESHOLD,
) -> int:
    if score >= triple_threshold:
        return 3
    if score >= once_threshold:
        return 1
    return 0


def build_candidate_pool(
    priorities: Sequence[SubjectPriority],
    *,
    once_threshold: float = REPEAT_ONCE_THRESHOLD,
    triple_threshold: float = REPEAT_TRIPLE_THRESHOLD,
) -> list[SubjectPriority]:
    pool: list[SubjectPriority] = []
    for priority in priorities:
        copies = 1 + extra_entries(
            priority.score,
            once_threshold=once_threshold,
            triple_threshold=triple_threshold,
        )
        pool.extend([priority] * copies)
    return pool


def distribute_slots(
    priorities: Sequence[SubjectPriority],
    num_slots: int,
    *,
    once_threshold: float = REPEAT_ONCE_THRESHOLD,
    triple_threshold: float = REPEAT_TRIPLE_THRESHOLD,
) -> list[SubjectPriority]:
    """Return exactly ``num_slots`` priorities in slot fill order.

    ``priorities`` must already be ranked by descending score.
    """

    if not priorities or num_slots <= 0:
        return []

    pool = build_candidate_pool(
        priorities,
        once_threshold=once_threshold,
        triple_threshold=triple_threshold,
    )
    pool_size = len(pool)

    if num_slots > pool_size:
        idx = 0
        while len(pool) < num_slots:
            pool.append(priorities[idx % len(priorities)])
            idx += 1
    elif num_slots < pool_size:
        pool.sort(key=lambda p: p.score, reverse=True)
        pool = pool[:num_slots]

    logger.debug(
        "SLOTS_DISTRIBUTED subjects=%s pool=%s slots=%s distinct=%s",
        len(priorities),
        pool_size,
        num_slots,
        len({p.subject.subject_id for p in pool}),
    )
    return pool
