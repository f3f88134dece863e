"""Deterministic decoder for institutional schedule codes.

A code is ``<weekday digit><shift letter><block digits>``, e.g. ``"3N34"``:
Tuesday, evening shift, blocks 3 and 4 (20:10-21:50). The block tables are
fixed by the institution and must not be computed.
"""

from __future__ import annotations

import logging
import re

from suggester.models import ParsedSchedule

logger = logging.getLogger(__name__)

_CODE_PATTERN = re.compile(r"^(\d)([MTN])(\d+)$", re.IGNORECASE)
_SEPARATORS = re.compile(r"[\s,;]+")

# Code digit -> Sunday-based weekday index.
WEEKDAY_BY_DIGIT: dict[str, int] = {
    "2": 1,
    "3": 2,
    "4": 3,
    "5": 4,
    "6": 5,
    "7": 6,
}

SHIFT_BLOCKS: dict[str, dict[str, tuple[str, str]]] = {
    "M": {
        "1": ("07:00", "08:00"),
        "2": ("08:00", "09:00"),
        "3": ("09:00", "10:00"),
        "4": ("10:00", "11:00"),
        "5": ("11:00", "12:00"),
        "6": ("12:00", "13:00"),
    },
    "T": {
        "1": ("13:00", "14:00"),
        "2": ("14:00", "15:00"),
        "3": ("15:00", "16:00"),
        "4": ("16:00", "17:00"),
        "5": ("17:00", "18:00"),
        "6": ("18:00", "19:00"),
    },
    # Evening blocks are 50 minutes long and start at 18:30.
    "N": {
        "1": ("18:30", "19:20"),
        "2": ("19:20", "20:10"),
        "3": ("20:10", "21:00"),
        "4": ("21:00", "21:50"),
    },
}


def is_valid_schedule_code(code: str) -> bool:
    """Syntactic check only; block digits are not validated."""
    if not isinstance(code, str) or not code:
        return False
    return _CODE_PATTERN.match(code.strip()) is not None


def decode_schedule_code(code: str) -> ParsedSchedule | None:
    """Decode one code, returning ``None`` when it cannot be decoded.

    Block digits outside the shift table are discarded. Start is the start
    of the lowest remaining block and end the end of the highest one; gaps
    between blocks are not validated.
    """

    if not isinstance(code, str) or not code:
        return None

    match = _CODE_PATTERN.match(code.strip())
    if match is None:
        logger.warning("SCHEDULE_CODE_INVALID code=%r", code)
        return None

    day_digit, shift, block_digits = match.groups()
    weekday = WEEKDAY_BY_DIGIT.get(day_digit)
    if weekday is None:
        logger.warning("SCHEDULE_CODE_INVALID_DAY day=%r code=%r", day_digit, code)
        return None

    shift_blocks = SHIFT_BLOCKS[shift.upper()]
    blocks = sorted((digit for digit in block_digits if digit in shift_blocks), key=int)
    if not blocks:
        logger.warning("SCHEDULE_CODE_NO_VALID_BLOCKS code=%r", code)
        return None

    parsed = ParsedSchedule(
        weekday=weekday,
        start_time=shift_blocks[blocks[0]][0],
        end_time=shift_blocks[blocks[-1]][1],
    )
    logger.debug(
        "SCHEDULE_CODE_DECODED code=%r weekday=%s start=%s end=%s",
        code,
        parsed.weekday,
        parsed.start_time,
        parsed.end_time,
    )
    return parsed


def split_schedule_codes(codes: str) -> list[str]:
    if not isinstance(codes, str) or not codes:
        return []
    return [code for code in _SEPARATORS.split(codes) if code]


def decode_schedule_codes(codes: str) -> list[ParsedSchedule]:
    """Decode codes separated by whitespace, commas or semicolons.

    Invalid entries are skipped.
    """

    results: list[ParsedSchedule] = []
    for code in split_schedule_codes(codes):
        parsed = decode_schedule_code(code)
        if parsed is not None:
            results.append(parsed)
    return results
