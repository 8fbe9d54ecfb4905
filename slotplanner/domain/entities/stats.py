from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AvailabilityStats:
    total_slots: int
    available: int
    fully_booked: int
    manually_blocked: int
    too_soon: int
    mechanics_count: int
    maximum_capacity: int  # theoretical best, ignores current bookings and blocks
    occupied_capacity: int
    current_appointments: int
    available_capacity: int
    utilization: str  # e.g. "37.5%"
