"""
Tests for the day analysis use case wiring feed, clock and capacity together.
"""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from slotplanner.application.use_cases.analyze_day import SlotAnalysisUseCase
from slotplanner.domain.entities.availability import AvailabilityReason
from slotplanner.domain.entities.recommendation import RecommendationTrace
from slotplanner.domain.entities.time_slot import BookedInterval, ManualBlock, TimeSlot
from slotplanner.infrastructure.booking.memory_booking_feed import MemoryBookingFeed
from slotplanner.infrastructure.clock.zoneinfo_clock import FixedClock

PERTH = ZoneInfo("Australia/Perth")
DAY = date(2025, 1, 1)


def _use_case(capacity_provider=lambda: 2, now=datetime(2024, 12, 31, 12, 0, tzinfo=PERTH)) -> SlotAnalysisUseCase:
    feed = MemoryBookingFeed()
    feed.set_day(
        DAY,
        booked=[
            BookedInterval(start=540, end=600, appointment_id="a1"),
            BookedInterval(start=540, end=600, appointment_id="a2"),
        ],
        blocks=[ManualBlock(start=720, end=780, reason="manually_set")],
    )
    return SlotAnalysisUseCase(
        feed=feed,
        clock=FixedClock(now),
        timezone=PERTH,
        capacity_provider=capacity_provider,
    )


def test_availability_reflects_snapshot():
    graded = _use_case().availability(DAY, 60)
    by_label = {item.slot.label: item.verdict for item in graded}

    assert len(graded) == 23
    assert by_label["09:00-10:00"].reason is AvailabilityReason.FULLY_BOOKED
    assert by_label["12:00-13:00"].reason is AvailabilityReason.MANUALLY_BLOCKED
    assert by_label["14:00-15:00"].available is True


def test_stats_use_snapshot_appointment_count():
    stats = _use_case().stats(DAY, 60)
    assert stats.current_appointments == 2
    assert stats.maximum_capacity == 24
    assert stats.utilization == "8.3%"


def test_recommendations_use_default_budget():
    trace = RecommendationTrace()
    result = _use_case().recommendations(DAY, 60, [TimeSlot(480, 540)], trace=trace)

    assert trace.budget == 3
    assert len(result.recommended) == 3


def test_analyze_recommends_across_whole_grid():
    result = _use_case(capacity_provider=lambda: 1).analyze(DAY, 60)

    assert result.capacity == 1
    assert result.stats.total_slots == 23
    assert result.recommendation.statistics.current_selections == 0
    recommended = result.recommendation.recommended
    assert all(a.end <= b.start for a, b in zip(recommended, recommended[1:]))
    assert TimeSlot(720, 780) not in recommended


def test_capacity_is_read_for_every_query():
    counts = iter([1, 3])
    use_case = _use_case(capacity_provider=lambda: next(counts))

    first = {item.slot.label: item.verdict for item in use_case.availability(DAY, 60)}
    second = {item.slot.label: item.verdict for item in use_case.availability(DAY, 60)}

    assert first["09:00-10:00"].available is False
    assert second["09:00-10:00"].available is True
    assert second["09:00-10:00"].capacity == 3


def test_negative_duration_is_rejected():
    with pytest.raises(ValueError):
        _use_case().availability(DAY, -60)


def test_oversized_duration_gives_empty_results():
    use_case = _use_case()
    assert use_case.availability(DAY, 800) == []
    assert use_case.stats(DAY, 800).utilization == "0%"
    assert use_case.recommendations(DAY, 800, []).recommended == []


def test_oversized_duration_reports_no_candidates():
    trace = RecommendationTrace()
    result = _use_case().analyze(DAY, 800, trace=trace)

    assert result.slots == []
    assert result.recommendation.recommended == []
    assert trace.skipped_reason == "no_candidates"
