from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator

from slotplanner.application.utils.interval_math import to_offset
from slotplanner.domain.entities.time_slot import TimeSlot


class SlotSchema(BaseModel):
    start: str
    end: str

    @field_validator("start")
    @classmethod
    def _check_start(cls, value: str) -> str:
        to_offset(value)
        return value

    @field_validator("end")
    @classmethod
    def _check_end(cls, value: str) -> str:
        to_offset(value, allow_end_of_day=True)
        return value

    def to_time_slot(self) -> TimeSlot:
        return TimeSlot(start=to_offset(self.start), end=to_offset(self.end, allow_end_of_day=True))

    @classmethod
    def from_time_slot(cls, slot: TimeSlot) -> "SlotSchema":
        return cls(start=slot.start_label, end=slot.end_label)


class DayRequestSchema(BaseModel):
    date: date
    duration_minutes: int | None = Field(default=None, ge=0)


class RecommendationRequestSchema(DayRequestSchema):
    selection: list[SlotSchema] = Field(default_factory=list)
    max_selections: int | None = Field(default=None, ge=0)
    include_trace: bool = False


class SlotVerdictSchema(BaseModel):
    start: str
    end: str
    available: bool
    reason: str
    occupied: int
    capacity: int
    message: str


class AvailabilityResponseSchema(BaseModel):
    date: date
    duration_minutes: int
    slots: list[SlotVerdictSchema]


class StatsResponseSchema(BaseModel):
    total_slots: int
    available: int
    fully_booked: int
    manually_blocked: int
    too_soon: int
    mechanics_count: int
    maximum_capacity: int
    occupied_capacity: int
    current_appointments: int
    available_capacity: int
    utilization: str


class RecommendationResponseSchema(BaseModel):
    recommended: list[SlotSchema]
    current_max_appointments: int
    potential_max_appointments: int
    improvement_possible: bool
    statistics: dict[str, int] = Field(default_factory=dict)
    trace: dict[str, Any] | None = None


class AnalysisResponseSchema(BaseModel):
    date: date
    duration_minutes: int
    capacity: int
    slots: list[SlotVerdictSchema]
    stats: StatsResponseSchema
    recommendation: RecommendationResponseSchema
