from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timedelta, tzinfo

from slotplanner.application.exceptions import InvalidTimeFormat

MIN_LEAD = timedelta(hours=2)
END_OF_DAY = 24 * 60

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

logger = logging.getLogger(__name__)

TimeValue = int | str | time


def to_offset(value: str | time, allow_end_of_day: bool = False) -> int:
    """Convert "HH:MM" (or a time) to minutes since midnight.

    "24:00" is only accepted when allow_end_of_day is set, for interval ends.
    """
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if not isinstance(value, str):
        raise InvalidTimeFormat(f"Expected HH:MM string, got {value!r}")

    match = _TIME_RE.match(value.strip())
    if not match:
        raise InvalidTimeFormat(f"Invalid time format: {value!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if allow_end_of_day and hours == 24 and minutes == 0:
        return END_OF_DAY
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise InvalidTimeFormat(f"Time out of range: {value!r}")
    return hours * 60 + minutes


def parse_range(text: str) -> tuple[int, int]:
    """Parse "HH:MM-HH:MM" into (start, end) offsets."""
    if not isinstance(text, str) or "-" not in text:
        raise InvalidTimeFormat(f"Invalid time range: {text!r}")
    start_str, end_str = text.split("-", 1)
    start = to_offset(start_str)
    end = to_offset(end_str, allow_end_of_day=True)
    if start >= end:
        raise InvalidTimeFormat(f"Time range ends before it starts: {text!r}")
    return start, end


def _as_offset(value: TimeValue, is_end: bool) -> int:
    if isinstance(value, int):
        return value
    return to_offset(value, allow_end_of_day=is_end)


def overlaps(a_start: TimeValue, a_end: TimeValue, b_start: TimeValue, b_end: TimeValue) -> bool:
    """Half-open overlap test; touching intervals do not overlap.

    A boundary that cannot be parsed counts as no overlap.
    """
    try:
        a0 = _as_offset(a_start, False)
        a1 = _as_offset(a_end, True)
        b0 = _as_offset(b_start, False)
        b1 = _as_offset(b_end, True)
    except InvalidTimeFormat as e:
        logger.warning("Ignoring interval with invalid time", extra={"error": str(e)})
        return False
    return a0 < b1 and b0 < a1


def anchor(day: date, offset: int, timezone: tzinfo | None) -> datetime:
    """The instant `offset` minutes after midnight of `day` in the business zone."""
    midnight = datetime.combine(day, time.min, tzinfo=timezone)
    return midnight + timedelta(minutes=offset)


def is_too_soon(slot_start: datetime, now: datetime, min_lead: timedelta = MIN_LEAD) -> bool:
    return slot_start < now + min_lead
