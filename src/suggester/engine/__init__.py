"""Suggestion engine."""

from .config import DEFAULT_ENGINE_CONFIG
from .delays import active_delays, clear_delay, register_delay
from .distributor import distribute_slots, extra_entries
from .runner import generate_suggestions, run_suggestions
from .scoring import compute_score, score_subject, score_subjects, urgency_factor
from .segmenter import segment_slot

__all__ = [
    "DEFAULT_ENGINE_CONFIG",
    "active_delays",
    "clear_delay",
    "compute_score",
    "distribute_slots",
    "extra_entries",
    "generate_suggestions",
    "register_delay",
    "run_suggestions",
    "score_subject",
    "score_subjects",
    "segment_slot",
    "urgency_factor",
]
