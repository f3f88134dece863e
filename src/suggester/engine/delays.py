"""Pure bookkeeping over delay records.

The store owns delay records; these helpers compute the record set it
should hold after a subject is reported as delayed or cleared.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import datetime, timedelta

from suggester.models import DelayRecord

logger = logging.getLogger(__name__)

DELAY_HOURS = 24


def active_delays(delays: Sequence[DelayRecord], now: datetime) -> list[DelayRecord]:
    return [delay for delay in delays if delay.is_active(now)]


def register_delay(
    delays: Sequence[DelayRecord],
    subject_id: str,
    now: datetime,
    *,
    hours: float = DELAY_HOURS,
) -> list[DelayRecord]:
    """Refresh the subject's active delay, or add one if none is active."""

    updated: list[DelayRecord] = []
    refreshed = False
    for delay in delays:
        if not refreshed and delay.subject_id == subject_id and delay.is_active(now):
            updated.append(delay.refreshed(now, hours))
            refreshed = True
            continue
        updated.append(delay)

    if not refreshed:
        updated.append(
            DelayRecord(
                subject_id=subject_id,
                expires_at=now + timedelta(hours=hours),
                delayed_at=now,
                delay_id=str(uuid.uuid4()),
            )
        )

    logger.debug("DELAY_REGISTERED subject=%s refreshed=%s", subject_id, refreshed)
    return updated


def clear_delay(delays: Sequence[DelayRecord], subject_id: str) -> list[DelayRecord]:
    return [delay for delay in delays if delay.subject_id != subject_id]
