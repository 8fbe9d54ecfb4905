from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, timedelta, tzinfo

from slotplanner.application.use_cases.evaluate_availability import evaluate_grid
from slotplanner.application.utils.interval_math import MIN_LEAD
from slotplanner.domain.entities.availability import AvailabilityReason
from slotplanner.domain.entities.day_snapshot import DaySnapshot
from slotplanner.domain.entities.stats import AvailabilityStats
from slotplanner.domain.entities.time_slot import BookedInterval, ManualBlock, TimeSlot


def maximum_capacity(slots: Sequence[TimeSlot], capacity: int) -> int:
    """Most appointments the raw grid could ever hold across `capacity` mechanics.

    Each mechanic independently packs slots earliest-end-first; mechanics are
    interchangeable so their counts simply add up. Bookings and manual blocks
    are not considered.
    """
    if not slots or capacity <= 0:
        return 0

    ordered = sorted(slots, key=lambda s: (s.end, s.start))
    total = 0
    for _ in range(capacity):
        last_end = 0
        held = 0
        for slot in ordered:
            if slot.start >= last_end:
                held += 1
                last_end = slot.end
        total += held
    return total


def format_utilization(current_appointments: int, maximum: int) -> str:
    if maximum <= 0:
        return "0%"
    return f"{current_appointments / maximum * 100:.1f}%"


def aggregate(
    slots: Sequence[TimeSlot],
    booked: Sequence[BookedInterval],
    blocks: Sequence[ManualBlock],
    day: date,
    now: datetime,
    capacity: int,
    *,
    current_appointments: int | None = None,
    timezone: tzinfo | None = None,
    min_lead: timedelta = MIN_LEAD,
) -> AvailabilityStats:
    """Tally verdicts by reason and derive the day's theoretical throughput."""
    graded = evaluate_grid(slots, booked, blocks, day, now, capacity, timezone=timezone, min_lead=min_lead)

    tally = {reason: 0 for reason in AvailabilityReason}
    occupied_capacity = 0
    for item in graded:
        tally[item.verdict.reason] += 1
        occupied_capacity += item.verdict.occupied

    if current_appointments is None:
        current_appointments = DaySnapshot(day=day, booked=tuple(booked)).appointment_count

    maximum = maximum_capacity(slots, capacity)
    return AvailabilityStats(
        total_slots=len(graded),
        available=tally[AvailabilityReason.AVAILABLE],
        fully_booked=tally[AvailabilityReason.FULLY_BOOKED],
        manually_blocked=tally[AvailabilityReason.MANUALLY_BLOCKED],
        too_soon=tally[AvailabilityReason.TOO_SOON],
        mechanics_count=capacity,
        maximum_capacity=maximum,
        occupied_capacity=occupied_capacity,
        current_appointments=current_appointments,
        available_capacity=maximum - current_appointments,
        utilization=format_utilization(current_appointments, maximum),
    )
