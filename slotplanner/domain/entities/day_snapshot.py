from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from slotplanner.domain.entities.time_slot import BookedInterval, ManualBlock


@dataclass(frozen=True)
class DaySnapshot:
    """Read-only view of one day's bookings and manual blocks."""

    day: date
    booked: tuple[BookedInterval, ...] = field(default_factory=tuple)
    blocks: tuple[ManualBlock, ...] = field(default_factory=tuple)
    skipped_records: int = 0  # malformed entries dropped while normalizing

    @property
    def appointment_count(self) -> int:
        ids: set[str] = set()
        anonymous = 0
        for interval in self.booked:
            if interval.appointment_id is None:
                anonymous += 1
            else:
                ids.add(interval.appointment_id)
        return anonymous + len(ids)
