from __future__ import annotations

from dataclasses import dataclass, field

from slotplanner.domain.entities.time_slot import TimeSlot


@dataclass(frozen=True)
class WeightedSlot:
    slot: TimeSlot
    weight: int  # remaining free mechanics at this slot


@dataclass(frozen=True)
class RecommendationStatistics:
    total_available_slots: int = 0
    slots_analyzed: int = 0
    current_selections: int = 0
    recommended_additional: int = 0


@dataclass(frozen=True)
class RecommendationResult:
    recommended: list[TimeSlot]
    current_max_appointments: int
    potential_max_appointments: int
    improvement_possible: bool
    statistics: RecommendationStatistics = field(default_factory=RecommendationStatistics)


@dataclass
class RecommendationTrace:
    """Diagnostics filled in by the recommendation engine when a caller passes one."""

    candidates: list[WeightedSlot] = field(default_factory=list)
    budget: int = 0
    dp_slots: list[TimeSlot] = field(default_factory=list)
    dp_weight: int = 0
    greedy_slots: list[TimeSlot] = field(default_factory=list)
    greedy_weight: int = 0
    winner: str | None = None  # "dp" or "greedy"
    backfilled: list[TimeSlot] = field(default_factory=list)
    skipped_reason: str | None = None
