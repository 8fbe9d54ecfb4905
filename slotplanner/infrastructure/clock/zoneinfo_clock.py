from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from slotplanner.application.ports.clock import ClockPort


class ZoneInfoClock(ClockPort):
    def __init__(self, timezone: ZoneInfo) -> None:
        self._timezone = timezone

    def now(self) -> datetime:
        return datetime.now(self._timezone)


class FixedClock(ClockPort):
    def __init__(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")
        self._instant = instant

    def now(self) -> datetime:
        return self._instant
