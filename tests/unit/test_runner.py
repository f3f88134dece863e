from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

import suggester.engine.runner as runner_module
from suggester.engine import generate_suggestions, run_suggestions
from suggester.engine.runner import eligible_free_slots, resolve_now
from suggester.models import DeadlineEvent, DelayRecord, FreeSlot, Subject
from suggester.reporting.decision_trace import DecisionTraceCollector

NOW = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)


def _slot(slot_id: str, hours_from_now: float, minutes: int, subject_id: str | None = None) -> FreeSlot:
    start = NOW + timedelta(hours=hours_from_now)
    return FreeSlot(slot_id=slot_id, start=start, end=start + timedelta(minutes=minutes), subject_id=subject_id)


def _subjects() -> list[Subject]:
    return [
        Subject(subject_id="math", name="Math", difficulty_weight=5, dedication_weight=5),
        Subject(subject_id="physics", name="Physics", difficulty_weight=2, dedication_weight=2),
    ]


def test_urgent_subject_takes_every_slot() -> None:
    deadlines = [DeadlineEvent(subject_id="math", due_at=NOW + timedelta(days=1), event_id="exam")]
    slots = [_slot("s1", 2, 60), _slot("s2", 26, 60), _slot("s3", 50, 60)]

    suggestions = generate_suggestions(_subjects(), slots, deadlines, [], NOW)

    assert [s.assigned_subject.subject_id for s in suggestions] == ["math", "math", "math"]
    assert [s.free_slot.slot_id for s in suggestions] == ["s1", "s2", "s3"]
    for suggestion in suggestions:
        assert len(suggestion.blocks) == 1
        assert suggestion.blocks[0].minutes == 50
        assert suggestion.study_minutes == 50
        assert suggestion.break_minutes == 0


def test_slots_are_assigned_in_start_order() -> None:
    subjects = [
        Subject(subject_id="a", difficulty_weight=3, dedication_weight=3),
        Subject(subject_id="b", difficulty_weight=2, dedication_weight=2),
    ]
    slots = [_slot("late", 30, 60), _slot("early", 3, 60)]
    suggestions = generate_suggestions(subjects, slots, [], [], NOW)
    assert [(s.free_slot.slot_id, s.assigned_subject.subject_id) for s in suggestions] == [
        ("early", "a"),
        ("late", "b"),
    ]


def test_manual_past_and_short_slots_are_not_suggested() -> None:
    slots = [
        _slot("manual", 2, 60, subject_id="physics"),
        _slot("past", -3, 60),
        _slot("short", 4, 15),
        _slot("ok", 6, 45),
    ]
    assert [slot.slot_id for slot in eligible_free_slots(slots, NOW)] == ["short", "ok"]

    suggestions = generate_suggestions(_subjects(), slots, [], [], NOW)
    assert [s.free_slot.slot_id for s in suggestions] == ["ok"]


def test_slot_starting_exactly_now_is_not_eligible() -> None:
    slot = FreeSlot(slot_id="now", start=NOW, end=NOW + timedelta(hours=1))
    assert eligible_free_slots([slot], NOW) == []


def test_empty_inputs_give_no_suggestions() -> None:
    assert generate_suggestions([], [_slot("s1", 2, 60)], [], [], NOW) == []
    assert generate_suggestions(_subjects(), [], [], [], NOW) == []
    unweighted = [Subject(subject_id="x"), Subject(subject_id="y", difficulty_weight=3, dedication_weight=3, status="finished")]
    assert generate_suggestions(unweighted, [_slot("s1", 2, 60)], [], [], NOW) == []


def test_delay_bonus_can_change_the_assignment() -> None:
    subjects = [
        Subject(subject_id="a", difficulty_weight=3, dedication_weight=3),
        Subject(subject_id="b", difficulty_weight=3, dedication_weight=2),
    ]
    delays = [DelayRecord(subject_id="b", expires_at=NOW + timedelta(hours=10))]
    suggestions = generate_suggestions(subjects, [_slot("s1", 1, 60)], [], delays, NOW)
    assert suggestions[0].assigned_subject.subject_id == "b"


def test_decision_trace_records_every_slot() -> None:
    trace = DecisionTraceCollector(start_timestamp=NOW)
    deadlines = [DeadlineEvent(subject_id="math", due_at=NOW + timedelta(days=1))]
    generate_suggestions(
        _subjects(),
        [_slot("s1", 2, 60), _slot("s2", 4, 10)],
        deadlines,
        [],
        NOW,
        decision_trace=trace,
    )
    items = trace.as_list()
    assert [item["slot_id"] for item in items] == ["s1", "s2"]
    assert items[0]["applied_rules"] == ["RULE_SCORE_RANKING", "RULE_REPEAT_TRIPLE"]
    assert items[0]["scores_by_subject"] == {"math": 25.0, "physics": 4.0}
    assert "RULE_SLOT_TOO_SHORT" in items[1]["applied_rules"]
    assert items[1]["block_count"] == 0


def test_config_overrides_segment_durations() -> None:
    suggestions = generate_suggestions(
        _subjects(),
        [_slot("s1", 2, 60)],
        [],
        [],
        NOW,
        config={"study_minutes": 25, "break_minutes": 5, "min_usable_minutes": 10},
    )
    assert [(b.is_break, b.minutes) for b in suggestions[0].blocks] == [(False, 25), (True, 5), (False, 25)]


def test_resolve_now_prefers_request_now() -> None:
    assert resolve_now({"now": "2026-03-02T08:00:00Z", "generated_at": "2026-01-01T00:00:00Z"}) == NOW
    assert resolve_now({"generated_at": "2026-03-02T08:00:00"}) == NOW
    assert resolve_now({}).tzinfo is not None


def _payload() -> dict[str, Any]:
    return {
        "suggest_request": {"request_id": "r-1", "now": "2026-03-02T08:00:00Z"},
        "effective_config": {},
        "subjects": {
            "subjects": [
                {"id": "math", "name": "Math", "difficulty_weight": 5, "dedication_weight": 5},
                {"id": "physics", "name": "Physics", "difficulty_weight": 2, "dedication_weight": 2},
                {"id": "art", "name": "Art", "difficulty_weight": None, "dedication_weight": 2},
                {"id": "old", "name": "Old", "difficulty_weight": 3, "dedication_weight": 3, "status": "finished"},
            ]
        },
        "calendar_events": {
            "events": [
                {"id": "exam", "event_type": "deadline", "subject_id": "math", "start_datetime": "2026-03-03T08:00:00Z"},
                {
                    "id": "f1",
                    "event_type": "free_study",
                    "start_datetime": "2026-03-02T14:00:00Z",
                    "end_datetime": "2026-03-02T16:00:00Z",
                },
            ]
        },
        "delays": {"delays": [{"id": "d1", "subject_id": "physics", "expires_at": "2026-03-02T20:00:00Z"}]},
    }


def test_run_suggestions_builds_full_result() -> None:
    result = run_suggestions(_payload())

    assert result["status"] == "ok"
    assert result["now"] == "2026-03-02T08:00:00Z"
    assert [p["subject_id"] for p in result["priorities"]] == ["math", "physics"]
    assert result["priorities"][1]["score"] == 6.0
    assert result["skipped_subjects"] == [
        {"subject_id": "art", "reason": "missing_weights"},
        {"subject_id": "old", "reason": "finished"},
    ]
    suggestion = result["suggestions"][0]
    assert suggestion["assigned_subject_id"] == "math"
    assert suggestion["study_minutes"] == 100
    assert suggestion["break_minutes"] == 10
    assert [w["code"] for w in result["warnings"]] == [
        "SUBJECTS_WITHOUT_WEIGHTS",
        "UNCOVERED_SUBJECTS",
        "DEADLINE_WITHIN_24H",
        "ACTIVE_DELAY",
    ]
    assert [h["code"] for h in result["hints"]] == ["HINT_CONFIGURE_WEIGHTS", "HINT_ADD_FREE_SLOTS"]
    assert len(result["decision_trace"]) == 1
    assert result["effective_config"]["study_minutes"] == 50


def test_run_suggestions_is_deterministic() -> None:
    assert run_suggestions(_payload()) == run_suggestions(_payload())


def _crowded_payload(slot_count: int) -> dict[str, Any]:
    free_slots = [
        {
            "id": f"f{idx}",
            "event_type": "free_study",
            "start_datetime": f"2026-03-02T{10 + 2 * idx:02d}:00:00Z",
            "end_datetime": f"2026-03-02T{11 + 2 * idx:02d}:00:00Z",
        }
        for idx in range(slot_count)
    ]
    return {
        "suggest_request": {"now": "2026-03-02T08:00:00Z"},
        "effective_config": {},
        "subjects": {
            "subjects": [
                {"id": "a", "difficulty_weight": 5, "dedication_weight": 5},
                {"id": "b", "difficulty_weight": 5, "dedication_weight": 4},
                {"id": "c", "difficulty_weight": 1, "dedication_weight": 1},
            ]
        },
        "calendar_events": {
            "events": [
                {"id": "exam-a", "event_type": "deadline", "subject_id": "a", "start_datetime": "2026-03-07T09:00:00Z"},
                *free_slots,
            ]
        },
        "delays": {"delays": [{"id": "d-a", "subject_id": "a", "expires_at": "2026-03-02T20:00:00Z"}]},
    }


@pytest.mark.parametrize("slot_count", [2, 3])
def test_uncovered_subjects_follow_the_actual_assignment(slot_count: int) -> None:
    result = run_suggestions(_crowded_payload(slot_count))

    assert [p["score"] for p in result["priorities"]] == [17.0, 9.0, 2.0]
    assert {s["assigned_subject_id"] for s in result["suggestions"]} == {"a"}
    uncovered = [w for w in result["warnings"] if w["code"] == "UNCOVERED_SUBJECTS"]
    assert len(uncovered) == 1
    assert uncovered[0]["subject_ids"] == ["b", "c"]
    assert "HINT_ADD_FREE_SLOTS" in {h["code"] for h in result["hints"]}


def test_no_uncovered_warning_when_every_subject_gets_a_slot() -> None:
    subjects = [
        {"id": "x", "difficulty_weight": 2, "dedication_weight": 2},
        {"id": "y", "difficulty_weight": 1, "dedication_weight": 2},
    ]
    payload = _crowded_payload(2)
    payload["subjects"] = {"subjects": subjects}
    payload["calendar_events"]["events"] = payload["calendar_events"]["events"][1:]
    payload["delays"] = None

    result = run_suggestions(payload)

    assert [s["assigned_subject_id"] for s in result["suggestions"]] == ["x", "y"]
    assert "UNCOVERED_SUBJECTS" not in {w["code"] for w in result["warnings"]}
    assert result["hints"] == []


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("urgency_ladder", "bogus"),
        ("break_minutes", 2.5),
        ("study_minutes", 0),
        ("delay_bonus", -1),
    ],
)
def test_generate_suggestions_rejects_unusable_config(key: str, value: Any) -> None:
    with pytest.raises(ValueError, match=key):
        generate_suggestions(_subjects(), [_slot("s1", 2, 60)], [], [], NOW, config={key: value})


def test_run_suggestions_scores_subjects_once(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[int] = []
    original = runner_module.score_subjects

    def counting_score_subjects(*args: Any, **kwargs: Any) -> Any:
        calls.append(1)
        return original(*args, **kwargs)

    monkeypatch.setattr(runner_module, "score_subjects", counting_score_subjects)
    result = run_suggestions(_payload())

    assert len(calls) == 1
    assert result["suggestions"][0]["assigned_subject_id"] == "math"
