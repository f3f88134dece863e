"""Study suggestion engine: priority scoring, slot distribution and schedule-code decoding."""

from .engine import (
    active_delays,
    clear_delay,
    distribute_slots,
    generate_suggestions,
    register_delay,
    run_suggestions,
    score_subject,
    score_subjects,
    segment_slot,
    urgency_factor,
)
from .models import (
    DeadlineEvent,
    DelayRecord,
    FreeSlot,
    ParsedSchedule,
    StudyBlock,
    StudySuggestion,
    Subject,
    SubjectPriority,
)
from .schedule_codes import decode_schedule_code, decode_schedule_codes, is_valid_schedule_code

__all__ = [
    "DeadlineEvent",
    "DelayRecord",
    "FreeSlot",
    "ParsedSchedule",
    "StudyBlock",
    "StudySuggestion",
    "Subject",
    "SubjectPriority",
    "active_delays",
    "clear_delay",
    "decode_schedule_code",
    "decode_schedule_codes",
    "distribute_slots",
    "generate_suggestions",
    "is_valid_schedule_code",
    "register_delay",
    "run_suggestions",
    "score_subject",
    "score_subjects",
    "segment_slot",
    "urgency_factor",
]
