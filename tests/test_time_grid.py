from __future__ import annotations

from slotplanner.application.utils.time_grid import CLOSING_MINUTE, OPENING_MINUTE, generate_slots
from slotplanner.domain.entities.time_slot import TimeSlot


def test_one_hour_grid():
    slots = generate_slots(60)

    assert slots[0] == TimeSlot(start=480, end=540)
    assert slots[-1] == TimeSlot(start=1140, end=1200)
    assert slots[-1].label == "19:00-20:00"
    assert len(slots) == 23


def test_grid_steps_every_half_hour():
    slots = generate_slots(30)
    assert len(slots) == 24
    assert [s.start for s in slots[:3]] == [480, 510, 540]
    assert len(generate_slots(120)) == 21


def test_grid_bounds_hold_for_every_duration():
    for duration in range(1, 721):
        slots = generate_slots(duration)
        assert slots, duration
        for slot in slots:
            assert slot.start >= OPENING_MINUTE
            assert slot.end <= CLOSING_MINUTE
            assert slot.duration_minutes == duration


def test_whole_window_fits_exactly_once():
    assert generate_slots(720) == [TimeSlot(start=480, end=1200)]


def test_empty_grid_for_zero_or_oversized_duration():
    assert generate_slots(0) == []
    assert generate_slots(-30) == []
    assert generate_slots(721) == []
    assert generate_slots(24 * 60) == []


def test_generation_is_repeatable():
    assert generate_slots(90) == generate_slots(90)
