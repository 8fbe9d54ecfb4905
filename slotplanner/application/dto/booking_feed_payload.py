from __future__ import annotations

import logging
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from slotplanner.application.exceptions import InvalidTimeFormat
from slotplanner.application.utils.interval_math import parse_range, to_offset
from slotplanner.domain.entities.day_snapshot import DaySnapshot
from slotplanner.domain.entities.time_slot import BookedInterval, ManualBlock

logger = logging.getLogger(__name__)

BOOKING_REASONS = {"scheduled_appointment", "pending_appointment"}


def parse_time_range(value: Any) -> tuple[int, int]:
    """Accept "HH:MM-HH:MM" or {"start": "HH:MM", "end": "HH:MM"}."""
    if isinstance(value, str):
        return parse_range(value)
    if isinstance(value, dict):
        start, end = value.get("start"), value.get("end")
        if not start or not end:
            raise InvalidTimeFormat(f"Time range missing start or end: {value!r}")
        start_min = to_offset(str(start))
        end_min = to_offset(str(end), allow_end_of_day=True)
        if start_min >= end_min:
            raise InvalidTimeFormat(f"Time range ends before it starts: {value!r}")
        return start_min, end_min
    raise InvalidTimeFormat(f"Unrecognised time range: {value!r}")


def _optional_id(value: Any) -> str | None:
    return str(value) if value not in (None, "") else None


class BookingFeedPayload(BaseModel):
    """Response body of the booking store's `/unavailable-slots` endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    scheduled_slots: list[Any] | None = Field(default_factory=list, alias="scheduledSlots")
    pending_appointments: list[Any] | None = Field(default_factory=list, alias="pendingAppointments")
    unavailable_slots: list[Any] | None = Field(default_factory=list, alias="unavailableSlots")

    @field_validator("scheduled_slots", "pending_appointments", "unavailable_slots", mode="before")
    @classmethod
    def coerce_list(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            if value is not None:
                logger.warning("Ignoring non-list booking store field", extra={"error": type(value).__name__})
            return []
        return value

    def to_snapshot(self, day: date) -> DaySnapshot:
        booked: list[BookedInterval] = []
        blocks: list[ManualBlock] = []
        skipped = 0

        def _skip(kind: str, entry: Any, error: Exception) -> None:
            nonlocal skipped
            skipped += 1
            logger.warning(
                "Skipping malformed %s record",
                kind,
                extra={"date": day.isoformat(), "slot": repr(entry), "error": str(error)},
            )

        for entry in self.scheduled_slots or []:
            if not isinstance(entry, dict):
                _skip("scheduled", entry, InvalidTimeFormat("not an object"))
                continue
            try:
                start, end = parse_time_range(entry.get("timeSlot"))
            except ValueError as e:
                _skip("scheduled", entry, e)
                continue
            booked.append(
                BookedInterval(start=start, end=end, appointment_id=_optional_id(entry.get("appointmentId")))
            )

        for index, appointment in enumerate(self.pending_appointments or []):
            if not isinstance(appointment, dict):
                _skip("pending", appointment, InvalidTimeFormat("not an object"))
                continue
            appointment_id = _optional_id(appointment.get("appointmentId")) or f"pending-{index}"
            candidates = appointment.get("selectedSlots")
            if candidates is None:
                continue
            if not isinstance(candidates, list):
                _skip("pending", appointment, InvalidTimeFormat("selectedSlots is not a list"))
                continue
            for candidate in candidates:
                try:
                    start, end = parse_time_range(candidate)
                except ValueError as e:
                    _skip("pending", candidate, e)
                    continue
                booked.append(BookedInterval(start=start, end=end, appointment_id=appointment_id, pending=True))

        known_ids = {interval.appointment_id for interval in booked if interval.appointment_id}
        for entry in self.unavailable_slots or []:
            if isinstance(entry, str):
                text, reason, appointment_id = entry, "manually_set", None
            elif isinstance(entry, dict):
                text = entry.get("timeSlot") or entry.get("slot")
                reason = entry.get("reason") or "unknown"
                appointment_id = _optional_id(entry.get("appointmentId"))
            else:
                _skip("unavailable", entry, InvalidTimeFormat("not a string or object"))
                continue
            try:
                start, end = parse_time_range(text)
            except ValueError as e:
                _skip("unavailable", entry, e)
                continue

            if reason in BOOKING_REASONS:
                # Already counted through scheduledSlots / pendingAppointments.
                if appointment_id is not None and appointment_id in known_ids:
                    continue
                booked.append(
                    BookedInterval(
                        start=start,
                        end=end,
                        appointment_id=appointment_id,
                        pending=reason == "pending_appointment",
                    )
                )
                continue
            blocks.append(ManualBlock(start=start, end=end, reason=reason))

        return DaySnapshot(day=day, booked=tuple(booked), blocks=tuple(blocks), skipped_records=skipped)
