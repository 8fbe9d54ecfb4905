from __future__ import annotations

from slotplanner.domain.entities.time_slot import TimeSlot

OPENING_MINUTE = 8 * 60
CLOSING_MINUTE = 20 * 60
STEP_MINUTES = 30


def generate_slots(
    duration_minutes: int,
    open_at: int = OPENING_MINUTE,
    close_at: int = CLOSING_MINUTE,
    step: int = STEP_MINUTES,
) -> list[TimeSlot]:
    """Build the day's candidate slots: starts every `step` minutes, each ending by `close_at`."""
    if duration_minutes <= 0 or step <= 0:
        return []

    slots: list[TimeSlot] = []
    start = open_at
    while start + duration_minutes <= close_at:
        slots.append(TimeSlot(start=start, end=start + duration_minutes))
        start += step
    return slots
