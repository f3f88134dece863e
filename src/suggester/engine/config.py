"""Engine defaults shared by the resolver and the runner."""

from __future__ import annotations

from typing import Any

from .distributor import REPEAT_ONCE_THRESHOLD, REPEAT_TRIPLE_THRESHOLD
from .scoring import DEFAULT_DELAY_BONUS, DEFAULT_URGENCY_LADDER, URGENCY_LADDERS
from .segmenter import BREAK_MINUTES, MIN_USABLE_MINUTES, STUDY_MINUTES

DEFAULT_ENGINE_CONFIG: dict[str, Any] = {
    "study_minutes": STUDY_MINUTES,
    "break_minutes": BREAK_MINUTES,
    "min_usable_minutes": MIN_USABLE_MINUTES,
    "delay_bonus": DEFAULT_DELAY_BONUS,
    "repeat_once_threshold": REPEAT_ONCE_THRESHOLD,
    "repeat_triple_threshold": REPEAT_TRIPLE_THRESHOLD,
    "urgency_ladder": DEFAULT_URGENCY_LADDER,
    "deadline_notice_days": 7,
    "deadline_urgent_hours": 24,
}

POSITIVE_INT_KEYS = ("study_minutes", "min_usable_minutes", "deadline_notice_days", "deadline_urgent_hours")
NON_NEGATIVE_INT_KEYS = ("break_minutes",)
NON_NEGATIVE_NUMBER_KEYS = ("delay_bonus", "repeat_once_threshold", "repeat_triple_threshold")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_valid_config_value(key: str, value: Any) -> bool:
    if key == "urgency_ladder":
        return isinstance(value, str) and value in URGENCY_LADDERS
    if key in POSITIVE_INT_KEYS:
        return _is_int(value) and value > 0
    if key in NON_NEGATIVE_INT_KEYS:
        return _is_int(value) and value >= 0
    if key in NON_NEGATIVE_NUMBER_KEYS:
        return (_is_int(value) or isinstance(value, float)) and value >= 0
    return True


def check_engine_config(config: dict[str, Any]) -> None:
    """Raise ``ValueError`` naming the first unusable key in an engine config."""
    for key in DEFAULT_ENGINE_CONFIG:
        if key in config and not is_valid_config_value(key, config[key]):
            raise ValueError(f"Invalid value {config[key]!r} for engine config key {key!r}")
