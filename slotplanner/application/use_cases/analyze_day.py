from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from slotplanner.application.ports.booking_feed import BookingFeedPort
from slotplanner.application.ports.clock import ClockPort
from slotplanner.application.use_cases.aggregate_stats import aggregate
from slotplanner.application.use_cases.evaluate_availability import evaluate_grid
from slotplanner.application.use_cases.recommend_slots import DEFAULT_MAX_SELECTIONS, recommend
from slotplanner.application.utils.interval_math import MIN_LEAD
from slotplanner.application.utils.time_grid import generate_slots
from slotplanner.domain.entities.availability import SlotAvailability
from slotplanner.domain.entities.day_snapshot import DaySnapshot
from slotplanner.domain.entities.recommendation import RecommendationResult, RecommendationTrace
from slotplanner.domain.entities.stats import AvailabilityStats
from slotplanner.domain.entities.time_slot import TimeSlot


@dataclass(frozen=True)
class DayContext:
    """Everything one query is evaluated against, sampled once."""

    day: date
    now: datetime
    capacity: int
    slots: list[TimeSlot]
    snapshot: DaySnapshot


@dataclass(frozen=True)
class DayAnalysis:
    day: date
    duration_minutes: int
    capacity: int
    slots: list[SlotAvailability]
    stats: AvailabilityStats
    recommendation: RecommendationResult


class SlotAnalysisUseCase:
    def __init__(
        self,
        feed: BookingFeedPort,
        clock: ClockPort,
        timezone: ZoneInfo,
        capacity_provider: Callable[[], int],
        min_lead: timedelta = MIN_LEAD,
        max_selections: int = DEFAULT_MAX_SELECTIONS,
    ) -> None:
        self._feed = feed
        self._clock = clock
        self._timezone = timezone
        self._capacity_provider = capacity_provider
        self._min_lead = min_lead
        self._max_selections = max_selections
        self._logger = logging.getLogger(__name__)

    def availability(self, day: date, duration_minutes: int) -> list[SlotAvailability]:
        ctx = self._context(day, duration_minutes)
        return evaluate_grid(
            ctx.slots,
            ctx.snapshot.booked,
            ctx.snapshot.blocks,
            day,
            ctx.now,
            ctx.capacity,
            timezone=self._timezone,
            min_lead=self._min_lead,
        )

    def stats(self, day: date, duration_minutes: int) -> AvailabilityStats:
        ctx = self._context(day, duration_minutes)
        return self._stats(ctx)

    def recommendations(
        self,
        day: date,
        duration_minutes: int,
        selection: Sequence[TimeSlot],
        max_selections: int | None = None,
        trace: RecommendationTrace | None = None,
    ) -> RecommendationResult:
        ctx = self._context(day, duration_minutes)
        budget = self._max_selections if max_selections is None else max_selections
        result = self._recommend(ctx, selection, budget, trace)
        self._logger.info(
            "Recommendations computed",
            extra={
                "date": day.isoformat(),
                "capacity": ctx.capacity,
                "solver": trace.winner if trace else None,
                "recommended": len(result.recommended),
            },
        )
        return result

    def analyze(self, day: date, duration_minutes: int, trace: RecommendationTrace | None = None) -> DayAnalysis:
        """Whole-day view for administrators: every slot may be recommended, nothing pre-selected."""
        ctx = self._context(day, duration_minutes)
        graded = evaluate_grid(
            ctx.slots,
            ctx.snapshot.booked,
            ctx.snapshot.blocks,
            day,
            ctx.now,
            ctx.capacity,
            timezone=self._timezone,
            min_lead=self._min_lead,
        )
        return DayAnalysis(
            day=day,
            duration_minutes=duration_minutes,
            capacity=ctx.capacity,
            slots=graded,
            stats=self._stats(ctx),
            recommendation=self._recommend(ctx, [], len(ctx.slots), trace),
        )

    def _context(self, day: date, duration_minutes: int) -> DayContext:
        if duration_minutes < 0:
            raise ValueError("duration_minutes must not be negative")
        now = self._clock.now().astimezone(self._timezone)
        capacity = self._capacity_provider()
        snapshot = self._feed.get_day_snapshot(day)
        slots = generate_slots(duration_minutes)
        if not slots:
            self._logger.info(
                "No slots fit the requested duration",
                extra={"date": day.isoformat(), "duration": duration_minutes},
            )
        return DayContext(day=day, now=now, capacity=capacity, slots=slots, snapshot=snapshot)

    def _stats(self, ctx: DayContext) -> AvailabilityStats:
        return aggregate(
            ctx.slots,
            ctx.snapshot.booked,
            ctx.snapshot.blocks,
            ctx.day,
            ctx.now,
            ctx.capacity,
            current_appointments=ctx.snapshot.appointment_count,
            timezone=self._timezone,
            min_lead=self._min_lead,
        )

    def _recommend(
        self,
        ctx: DayContext,
        selection: Sequence[TimeSlot],
        max_selections: int,
        trace: RecommendationTrace | None,
    ) -> RecommendationResult:
        return recommend(
            ctx.slots,
            selection,
            ctx.snapshot.booked,
            ctx.snapshot.blocks,
            ctx.day,
            ctx.now,
            ctx.capacity,
            max_selections,
            timezone=self._timezone,
            min_lead=self._min_lead,
            trace=trace,
        )
