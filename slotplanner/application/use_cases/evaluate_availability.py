from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta, tzinfo

from slotplanner.application.utils.interval_math import MIN_LEAD, anchor, is_too_soon, overlaps
from slotplanner.domain.entities.availability import (
    AvailabilityReason,
    AvailabilityVerdict,
    SlotAvailability,
)
from slotplanner.domain.entities.time_slot import BookedInterval, ManualBlock, TimeSlot

# First match wins. Lead time outranks a manual block because it is the more
# actionable fact for a customer picking a slot.
AVAILABILITY_PRECEDENCE: tuple[AvailabilityReason, ...] = (
    AvailabilityReason.TOO_SOON,
    AvailabilityReason.MANUALLY_BLOCKED,
    AvailabilityReason.FULLY_BOOKED,
)


def resolve_reason(triggered: Iterable[AvailabilityReason]) -> AvailabilityReason:
    """Pick the highest-precedence reason among the rules that fired."""
    fired = set(triggered)
    for reason in AVAILABILITY_PRECEDENCE:
        if reason in fired:
            return reason
    return AvailabilityReason.AVAILABLE


def count_overlapping(slot: TimeSlot, booked: Iterable[BookedInterval]) -> int:
    """Count booked intervals overlapping the slot; a pending appointment counts once."""
    count = 0
    seen_pending: set[str] = set()
    for interval in booked:
        if not overlaps(slot.start, slot.end, interval.start, interval.end):
            continue
        if interval.pending and interval.appointment_id is not None:
            if interval.appointment_id in seen_pending:
                continue
            seen_pending.add(interval.appointment_id)
        count += 1
    return count


def is_manually_blocked(slot: TimeSlot, blocks: Iterable[ManualBlock]) -> bool:
    return any(overlaps(slot.start, slot.end, block.start, block.end) for block in blocks)


def _lead_hours(min_lead: timedelta) -> str:
    hours = min_lead.total_seconds() / 3600
    return f"{hours:g} hour" + ("" if hours == 1 else "s")


def evaluate(
    slot: TimeSlot,
    booked: Sequence[BookedInterval],
    blocks: Sequence[ManualBlock],
    day: date,
    now: datetime,
    capacity: int,
    *,
    timezone: tzinfo | None = None,
    min_lead: timedelta = MIN_LEAD,
) -> AvailabilityVerdict:
    """Classify one slot. Pure; call once per slot per query."""
    zone = timezone if timezone is not None else now.tzinfo
    occupied = count_overlapping(slot, booked)

    triggered: list[AvailabilityReason] = []
    if is_too_soon(anchor(day, slot.start, zone), now, min_lead):
        triggered.append(AvailabilityReason.TOO_SOON)
    if is_manually_blocked(slot, blocks):
        triggered.append(AvailabilityReason.MANUALLY_BLOCKED)
    if occupied >= capacity:
        triggered.append(AvailabilityReason.FULLY_BOOKED)

    reason = resolve_reason(triggered)

    if reason is AvailabilityReason.TOO_SOON:
        return AvailabilityVerdict(
            available=False,
            reason=reason,
            occupied=0,
            capacity=capacity,
            message=f"This slot is too soon (must be at least {_lead_hours(min_lead)} from now)",
        )
    if reason is AvailabilityReason.MANUALLY_BLOCKED:
        return AvailabilityVerdict(
            available=False,
            reason=reason,
            occupied=capacity,
            capacity=capacity,
            message="This slot has been manually marked as unavailable",
        )
    if reason is AvailabilityReason.FULLY_BOOKED:
        return AvailabilityVerdict(
            available=False,
            reason=reason,
            occupied=occupied,
            capacity=capacity,
            message=f"Fully booked ({occupied} of {capacity} mechanics occupied)",
        )
    return AvailabilityVerdict(
        available=True,
        reason=reason,
        occupied=occupied,
        capacity=capacity,
        message=f"Available ({capacity - occupied} of {capacity} mechanics free)",
    )


def evaluate_grid(
    slots: Sequence[TimeSlot],
    booked: Sequence[BookedInterval],
    blocks: Sequence[ManualBlock],
    day: date,
    now: datetime,
    capacity: int,
    *,
    timezone: tzinfo | None = None,
    min_lead: timedelta = MIN_LEAD,
) -> list[SlotAvailability]:
    return [
        SlotAvailability(
            slot=slot,
            verdict=evaluate(slot, booked, blocks, day, now, capacity, timezone=timezone, min_lead=min_lead),
        )
        for slot in slots
    ]


def available_slots(
    slots: Sequence[TimeSlot],
    booked: Sequence[BookedInterval],
    blocks: Sequence[ManualBlock],
    day: date,
    now: datetime,
    capacity: int,
    *,
    timezone: tzinfo | None = None,
    min_lead: timedelta = MIN_LEAD,
) -> list[SlotAvailability]:
    graded = evaluate_grid(slots, booked, blocks, day, now, capacity, timezone=timezone, min_lead=min_lead)
    return [item for item in graded if item.verdict.available]
