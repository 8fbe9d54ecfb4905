from __future__ import annotations

import logging
from datetime import date

from slotplanner.application.ports.booking_feed import BookingFeedPort
from slotplanner.domain.entities.day_snapshot import DaySnapshot
from slotplanner.domain.entities.time_slot import BookedInterval, ManualBlock


class MemoryBookingFeed(BookingFeedPort):
    def __init__(self, snapshots: dict[date, DaySnapshot] | None = None) -> None:
        self._snapshots: dict[date, DaySnapshot] = dict(snapshots or {})
        self._logger = logging.getLogger(__name__)

    def get_day_snapshot(self, day: date) -> DaySnapshot:
        return self._snapshots.get(day, DaySnapshot(day=day))

    def set_day(
        self,
        day: date,
        booked: list[BookedInterval] | None = None,
        blocks: list[ManualBlock] | None = None,
    ) -> None:
        self._snapshots[day] = DaySnapshot(day=day, booked=tuple(booked or ()), blocks=tuple(blocks or ()))
        self._logger.info(
            "Memory booking feed updated",
            extra={"date": day.isoformat(), "booked": len(booked or ()), "blocks": len(blocks or ())},
        )
