"""Wall-clock time arithmetic for shifts that may cross midnight."""

from __future__ import annotations

import re
from datetime import time

from canpay_engine.calculators.types import PayrollInputError

MINUTES_PER_DAY = 1440

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


class InvalidTimeFormatError(PayrollInputError):
    """Raised when a time-of-day is not a valid 24-hour "HH:MM"."""

    code = "INVALID_TIME_FORMAT"

    def __init__(self, value: object, reason: str = "expected 24-hour HH:MM"):
        self.value = value
        super().__init__(f"Invalid time {value!r}: {reason}")


class InvalidTimeWindowError(InvalidTimeFormatError):
    """Raised when a minute offset lies outside a single day."""

    def __init__(self, value: object):
        super().__init__(value, f"minute offset must be in [0, {MINUTES_PER_DAY})")


def to_minutes(value: str | time) -> int:
    """Convert "HH:MM" (or a ``datetime.time``) to minutes after midnight."""
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    if not isinstance(value, str):
        raise InvalidTimeFormatError(value)

    match = _TIME_RE.match(value.strip())
    if match is None:
        raise InvalidTimeFormatError(value)

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeFormatError(value)

    return hours * 60 + minutes


def _check_offset(minutes: int) -> int:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidTimeWindowError(minutes)
    return minutes


def _unroll(start: int, end: int) -> int:
    """End offset, pushed into the next day when the window crosses midnight."""
    return end + MINUTES_PER_DAY if end < start else end


def shift_minutes(start: str | time, end: str | time) -> int:
    """Length of a shift in minutes; an end before the start is next day."""
    start_min = to_minutes(start)
    end_min = to_minutes(end)
    return _unroll(start_min, end_min) - start_min


def overlap_minutes(start_a: int, end_a: int, start_b: int, end_b: int) -> int:
    """Minutes shared by two daily windows given as minute offsets.

    Each window is unrolled past midnight when its end precedes its start.
    Window B is then compared against window A on the previous, same and
    next day, so a premium of 00:00-06:00 counts fully inside a 22:00-06:00
    shift. Neither window can reach 24 hours, so the three placements never
    count the same minute twice.
    """
    for offset in (start_a, end_a, start_b, end_b):
        _check_offset(offset)

    a_end = _unroll(start_a, end_a)
    b_end = _unroll(start_b, end_b)

    total = 0
    for day in (-MINUTES_PER_DAY, 0, MINUTES_PER_DAY):
        start = max(start_a, start_b + day)
        end = min(a_end, b_end + day)
        if start < end:
            total += end - start
    return total
