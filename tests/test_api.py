"""
Tests for the slot planner HTTP API.
"""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from fastapi.testclient import TestClient

from slotplanner.application.exceptions import BookingFeedError
from slotplanner.application.ports.booking_feed import BookingFeedPort
from slotplanner.application.use_cases.analyze_day import SlotAnalysisUseCase
from slotplanner.domain.entities.time_slot import BookedInterval
from slotplanner.infrastructure.booking.memory_booking_feed import MemoryBookingFeed
from slotplanner.infrastructure.clock.zoneinfo_clock import FixedClock
from slotplanner.main import app
from slotplanner.wiring.dependencies import get_slot_analysis_use_case

PERTH = ZoneInfo("Australia/Perth")
DAY = date(2025, 1, 1)
NOW = datetime(2024, 12, 31, 12, 0, tzinfo=PERTH)


class BrokenFeed(BookingFeedPort):
    def get_day_snapshot(self, day):
        raise BookingFeedError("booking store unavailable")


def _client(feed: BookingFeedPort | None = None, capacity: int = 2) -> TestClient:
    if feed is None:
        feed = MemoryBookingFeed()
        feed.set_day(DAY, booked=[BookedInterval(start=540, end=600, appointment_id="a1")])
    use_case = SlotAnalysisUseCase(
        feed=feed,
        clock=FixedClock(NOW),
        timezone=PERTH,
        capacity_provider=lambda: capacity,
    )
    app.dependency_overrides[get_slot_analysis_use_case] = lambda: use_case
    return TestClient(app)


def teardown_function():
    app.dependency_overrides.clear()


def test_health():
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_availability_endpoint():
    response = _client().post("/api/v1/slots/availability", json={"date": "2025-01-01", "duration_minutes": 60})

    assert response.status_code == 200
    body = response.json()
    assert body["duration_minutes"] == 60
    assert len(body["slots"]) == 23
    nine = next(s for s in body["slots"] if s["start"] == "09:00")
    assert nine == {
        "start": "09:00",
        "end": "10:00",
        "available": True,
        "reason": "available",
        "occupied": 1,
        "capacity": 2,
        "message": "Available (1 of 2 mechanics free)",
    }


def test_stats_endpoint():
    response = _client().post("/api/v1/slots/stats", json={"date": "2025-01-01", "duration_minutes": 60})

    assert response.status_code == 200
    body = response.json()
    assert body["maximum_capacity"] == 24
    assert body["current_appointments"] == 1
    assert body["utilization"] == "4.2%"


def test_recommendations_endpoint_with_trace():
    response = _client().post(
        "/api/v1/slots/recommendations",
        json={
            "date": "2025-01-01",
            "duration_minutes": 60,
            "selection": [{"start": "08:00", "end": "09:00"}],
            "include_trace": True,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert len(body["recommended"]) == 3
    assert body["statistics"]["current_selections"] == 1
    assert body["trace"]["budget"] == 3
    assert body["trace"]["winner"] in {"dp", "greedy"}


def test_full_selection_gets_no_recommendations():
    selection = [
        {"start": "08:00", "end": "09:00"},
        {"start": "10:00", "end": "11:00"},
        {"start": "12:00", "end": "13:00"},
        {"start": "14:00", "end": "15:00"},
    ]
    response = _client().post(
        "/api/v1/slots/recommendations",
        json={"date": "2025-01-01", "duration_minutes": 60, "selection": selection, "max_selections": 4},
    )

    assert response.status_code == 200
    assert response.json()["recommended"] == []
    assert response.json()["improvement_possible"] is False
    assert response.json()["trace"] is None


def test_invalid_selection_time_is_rejected():
    response = _client().post(
        "/api/v1/slots/recommendations",
        json={"date": "2025-01-01", "selection": [{"start": "25:00", "end": "26:00"}]},
    )
    assert response.status_code == 422


def test_backwards_selection_is_a_bad_request():
    response = _client().post(
        "/api/v1/slots/recommendations",
        json={"date": "2025-01-01", "selection": [{"start": "10:00", "end": "09:00"}]},
    )
    assert response.status_code == 400


def test_booking_store_failure_maps_to_bad_gateway():
    response = _client(feed=BrokenFeed()).post("/api/v1/slots/stats", json={"date": "2025-01-01"})
    assert response.status_code == 502


def test_analysis_endpoint():
    response = _client(capacity=1).post("/api/v1/slots/analysis", json={"date": "2025-01-01", "duration_minutes": 60})

    assert response.status_code == 200
    body = response.json()
    assert body["capacity"] == 1
    assert body["stats"]["total_slots"] == 23
    assert body["recommendation"]["recommended"]
