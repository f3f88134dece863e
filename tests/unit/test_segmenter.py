from __future__ import annotations

from datetime import datetime, timedelta, timezone

from suggester.engine.segmenter import segment_slot
from suggester.models import FreeSlot, Subject, SubjectPriority

START = datetime(2026, 3, 3, 14, 0, tzinfo=timezone.utc)
PRIORITY = SubjectPriority(
    subject=Subject(subject_id="math", name="Math", difficulty_weight=4, dedication_weight=4),
    difficulty_weight=4,
    dedication_weight=4,
    urgency_factor=0.0,
    delay_bonus=0.0,
    score=8.0,
)


def _slot(minutes: int, slot_id: str = "slot-1") -> FreeSlot:
    return FreeSlot(slot_id=slot_id, start=START, end=START + timedelta(minutes=minutes))


def _shape(minutes: int) -> list[tuple[bool, int]]:
    return [(block.is_break, block.minutes) for block in segment_slot(_slot(minutes), PRIORITY)]


def test_forty_five_minute_slot_is_one_study_block() -> None:
    blocks = segment_slot(_slot(45), PRIORITY)
    assert len(blocks) == 1
    assert not blocks[0].is_break
    assert blocks[0].minutes == 45
    assert blocks[0].end == START + timedelta(minutes=45)


def test_slot_shorter_than_minimum_gives_no_blocks() -> None:
    assert _shape(19) == []
    assert _shape(0) == []
    assert _shape(20) == [(False, 20)]


def test_break_is_skipped_when_not_enough_time_follows() -> None:
    assert _shape(60) == [(False, 50)]
    assert _shape(79) == [(False, 50)]
    assert _shape(80) == [(False, 50), (True, 10), (False, 20)]


def test_two_hour_slot_alternates_study_and_break() -> None:
    assert _shape(120) == [(False, 50), (True, 10), (False, 50)]
    assert _shape(140) == [(False, 50), (True, 10), (False, 50), (True, 10), (False, 20)]


def test_blocks_are_contiguous_ordered_and_labelled() -> None:
    blocks = segment_slot(_slot(180, "free-9"), PRIORITY)
    assert [block.block_id for block in blocks] == [
        "free-9-block-0",
        "free-9-break-1",
        "free-9-block-2",
        "free-9-break-3",
        "free-9-block-4",
    ]
    for previous, current in zip(blocks, blocks[1:]):
        assert previous.end == current.start
    assert all(block.free_slot_id == "free-9" for block in blocks)
    assert all(block.subject.subject_id == "math" for block in blocks)
    assert blocks[-1].end == START + timedelta(minutes=170)


def test_custom_durations() -> None:
    blocks = segment_slot(_slot(90), PRIORITY, study_minutes=25, break_minutes=5, min_usable_minutes=15)
    assert [(b.is_break, b.minutes) for b in blocks] == [
        (False, 25),
        (True, 5),
        (False, 25),
        (True, 5),
        (False, 25),
    ]


def test_inverted_slot_gives_no_blocks() -> None:
    slot = FreeSlot(slot_id="bad", start=START, end=START - timedelta(minutes=30))
    assert segment_slot(slot, PRIORITY) == []
