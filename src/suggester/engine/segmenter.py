"""Carve one free slot into alternating study and break blocks.

Deterministic behaviour:
- blocks are emitted in ascending time order starting at the slot start,
- a study block is emitted only when at least ``min_usable_minutes`` remain,
- a break is emitted only when enough time remains after it for another
  study block, so the last block is always a study block.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from suggester.models import FreeSlot, StudyBlock, SubjectPriority

STUDY_MINUTES = 50
BREAK_MINUTES = 10
MIN_USABLE_MINUTES = 20


def _minutes_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)


def segment_slot(
    slot: FreeSlot,
    priority: SubjectPriority,
    *,
    study_minutes: int = STUDY_MINUTES,
    break_minutes: int = BREAK_MINUTES,
    min_usable_minutes: int = MIN_USABLE_MINUTES,
) -> list[StudyBlock]:
    """Build the study/break blocks of ``slot`` for the assigned subject."""

    subject = priority.subject
    blocks: list[StudyBlock] = []
    cursor = slot.start

    while True:
        remaining = _minutes_between(cursor, slot.end)
        if remaining < min_usable_minutes:
            break

        study_end = cursor + timedelta(minutes=min(study_minutes, remaining))
        blocks.append(
            StudyBlock(
                block_id=f"{slot.slot_id}-block-{len(blocks)}",
                subject=subject,
                start=cursor,
                end=study_end,
                is_break=False,
                free_slot_id=slot.slot_id,
            )
        )
        cursor = study_end

        break_end = cursor + timedelta(minutes=break_minutes)
        if _minutes_between(break_end, slot.end) < min_usable_minutes:
            break
        blocks.append(
            StudyBlock(
                block_id=f"{slot.slot_id}-break-{len(blocks)}",
                subject=subject,
                start=cursor,
                end=break_end,
                is_break=True,
                free_slot_id=slot.slot_id,
            )
        )
        cursor = break_end

    return blocks
