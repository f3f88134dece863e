from __future__ import annotations

import pytest

from suggester.engine.distributor import build_candidate_pool, distribute_slots, extra_entries
from suggester.models import Subject, SubjectPriority


def _priority(sid: str, score: float) -> SubjectPriority:
    return SubjectPriority(
        subject=Subject(subject_id=sid, name=sid, difficulty_weight=3, dedication_weight=3),
        difficulty_weight=3,
        dedication_weight=3,
        urgency_factor=0.0,
        delay_bonus=0.0,
        score=score,
    )


def _ids(priorities: list[SubjectPriority]) -> list[str]:
    return [p.subject.subject_id for p in priorities]


@pytest.mark.parametrize(
    ("score", "expected"),
    [(27.0, 3), (15.0, 3), (14.99, 1), (12.0, 1), (11.99, 0), (2.0, 0)],
)
def test_extra_entries_thresholds(score: float, expected: int) -> None:
    assert extra_entries(score) == expected


def test_pool_construction_for_reference_scores() -> None:
    ranked = [_priority("a", 20), _priority("b", 13), _priority("c", 5)]
    assert _ids(build_candidate_pool(ranked)) == ["a", "a", "a", "a", "b", "b", "c"]


def test_truncation_keeps_highest_scores_including_duplicates() -> None:
    ranked = [_priority("a", 20), _priority("b", 13), _priority("c", 5)]
    assert _ids(distribute_slots(ranked, 5)) == ["a", "a", "a", "a", "b"]
    assert _ids(distribute_slots(ranked, 2)) == ["a", "a"]


def test_equal_pool_and_slots_returns_pool_as_is() -> None:
    ranked = [_priority("a", 20), _priority("b", 13), _priority("c", 5)]
    assert _ids(distribute_slots(ranked, 7)) == ["a", "a", "a", "a", "b", "b", "c"]


def test_padding_cycles_ranked_list_from_the_top() -> None:
    ranked = [_priority("a", 20), _priority("b", 13), _priority("c", 5)]
    assert _ids(distribute_slots(ranked, 10)) == ["a", "a", "a", "a", "b", "b", "c", "a", "b", "c"]


def test_low_scores_get_one_entry_each_then_cycle() -> None:
    ranked = [_priority("x", 8), _priority("y", 6)]
    assert _ids(distribute_slots(ranked, 5)) == ["x", "y", "x", "y", "x"]


def test_fewer_slots_than_subjects_leaves_lowest_uncovered() -> None:
    ranked = [_priority("x", 10), _priority("y", 9), _priority("z", 8)]
    assert _ids(distribute_slots(ranked, 2)) == ["x", "y"]


def test_truncation_is_stable_for_equal_scores() -> None:
    ranked = [_priority("x", 10), _priority("y", 10), _priority("z", 10)]
    assert _ids(distribute_slots(ranked, 2)) == ["x", "y"]


def test_empty_inputs_give_empty_distribution() -> None:
    assert distribute_slots([], 4) == []
    assert distribute_slots([_priority("a", 20)], 0) == []


def test_custom_thresholds() -> None:
    ranked = [_priority("a", 10), _priority("b", 5)]
    result = distribute_slots(ranked, 5, once_threshold=5, triple_threshold=10)
    assert _ids(result) == ["a", "a", "a", "a", "b"]
