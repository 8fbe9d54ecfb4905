from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from slotplanner.domain.entities.time_slot import TimeSlot


class AvailabilityReason(str, Enum):
    AVAILABLE = "available"
    FULLY_BOOKED = "fully_booked"
    MANUALLY_BLOCKED = "manually_blocked"
    TOO_SOON = "too_soon"


@dataclass(frozen=True)
class AvailabilityVerdict:
    available: bool
    reason: AvailabilityReason
    occupied: int  # raw overlap count, may exceed capacity
    capacity: int
    message: str = ""

    @property
    def free(self) -> int:
        """Remaining mechanics at this slot; 0 whenever the slot is not bookable."""
        if not self.available:
            return 0
        return max(0, self.capacity - self.occupied)


@dataclass(frozen=True)
class SlotAvailability:
    slot: TimeSlot
    verdict: AvailabilityVerdict
