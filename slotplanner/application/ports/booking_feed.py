from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from slotplanner.domain.entities.day_snapshot import DaySnapshot


class BookingFeedPort(ABC):
    @abstractmethod
    def get_day_snapshot(self, day: date) -> DaySnapshot:
        """Fetch existing appointments and manual blocks for a date."""
        raise NotImplementedError
