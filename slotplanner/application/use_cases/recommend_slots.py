from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from datetime import date, datetime, timedelta, tzinfo

from slotplanner.application.use_cases.evaluate_availability import evaluate_grid
from slotplanner.application.use_cases.solvers import DpSolver, GreedySolver, Solver, choose_solution
from slotplanner.application.utils.interval_math import MIN_LEAD
from slotplanner.domain.entities.availability import SlotAvailability
from slotplanner.domain.entities.recommendation import (
    RecommendationResult,
    RecommendationStatistics,
    RecommendationTrace,
    WeightedSlot,
)
from slotplanner.domain.entities.time_slot import BookedInterval, ManualBlock, TimeSlot

DEFAULT_MAX_SELECTIONS = 4


def weigh_candidates(graded: Sequence[SlotAvailability]) -> list[WeightedSlot]:
    """Available slots paired with how many mechanics are still free there."""
    return [
        WeightedSlot(slot=item.slot, weight=item.verdict.free)
        for item in graded
        if item.verdict.available and item.verdict.free > 0
    ]


def achievable_appointments(weighted: Sequence[WeightedSlot], selection: Sequence[TimeSlot]) -> int:
    """Picked slots plus whatever free capacity the rest of the day still offers."""
    used = Counter(selection)
    total = len(selection)
    for candidate in weighted:
        total += max(0, candidate.weight - used.get(candidate.slot, 0))
    return total


def _clashes(slot: TimeSlot, others: Sequence[TimeSlot]) -> bool:
    return any(slot.start < other.end and other.start < slot.end for other in others)


def _backfill(
    chosen: list[TimeSlot],
    candidates: Sequence[WeightedSlot],
    selection: Sequence[TimeSlot],
    budget: int,
) -> list[TimeSlot]:
    added: list[TimeSlot] = []
    for candidate in sorted(candidates, key=lambda c: (c.slot.start, c.slot.end)):
        if len(chosen) + len(added) >= budget:
            break
        slot = candidate.slot
        if candidate.weight <= 0 or slot in chosen or slot in added:
            continue
        if _clashes(slot, chosen) or _clashes(slot, added) or _clashes(slot, selection):
            continue
        added.append(slot)
    return added


def recommend(
    slots: Sequence[TimeSlot],
    current_selection: Sequence[TimeSlot],
    booked: Sequence[BookedInterval],
    blocks: Sequence[ManualBlock],
    day: date,
    now: datetime,
    capacity: int,
    max_selections: int = DEFAULT_MAX_SELECTIONS,
    *,
    timezone: tzinfo | None = None,
    min_lead: timedelta = MIN_LEAD,
    trace: RecommendationTrace | None = None,
    dp_solver: Solver | None = None,
    greedy_solver: Solver | None = None,
) -> RecommendationResult:
    """Suggest further disjoint slots that keep the most mechanics busy.

    `max_selections` is the total number of slots one appointment may hold, so
    the additional budget is what the current selection leaves over.
    """
    selection = list(current_selection)
    graded = evaluate_grid(slots, booked, blocks, day, now, capacity, timezone=timezone, min_lead=min_lead)
    weighted = weigh_candidates(graded)
    current_max = achievable_appointments(weighted, selection)

    budget = max_selections - len(selection)
    candidates = [
        candidate
        for candidate in weighted
        if candidate.slot not in selection and not _clashes(candidate.slot, selection)
    ]
    if trace is not None:
        trace.candidates = list(candidates)
        trace.budget = max(0, budget)

    def _empty(reason: str) -> RecommendationResult:
        if trace is not None:
            trace.skipped_reason = reason
        return RecommendationResult(
            recommended=[],
            current_max_appointments=current_max,
            potential_max_appointments=current_max,
            improvement_possible=False,
            statistics=RecommendationStatistics(
                total_available_slots=len(weighted),
                slots_analyzed=len(candidates),
                current_selections=len(selection),
                recommended_additional=0,
            ),
        )

    if not candidates:
        return _empty("no_candidates")
    if budget <= 0:
        return _empty("selection_full")

    dp = (dp_solver or DpSolver()).solve(candidates, budget)
    greedy = (greedy_solver or GreedySolver()).solve(candidates, budget)
    winner = choose_solution(dp, greedy)

    chosen = list(winner.slots)
    extra = _backfill(chosen, candidates, selection, budget)
    recommended = sorted(chosen + extra, key=lambda s: (s.start, s.end))

    if trace is not None:
        trace.dp_slots = dp.slots
        trace.dp_weight = dp.weight
        trace.greedy_slots = greedy.slots
        trace.greedy_weight = greedy.weight
        trace.winner = winner.solver
        trace.backfilled = extra

    potential_max = achievable_appointments(weighted, selection + recommended)
    return RecommendationResult(
        recommended=recommended,
        current_max_appointments=current_max,
        potential_max_appointments=potential_max,
        improvement_possible=potential_max > current_max,
        statistics=RecommendationStatistics(
            total_available_slots=len(weighted),
            slots_analyzed=len(candidates),
            current_selections=len(selection),
            recommended_additional=len(recommended),
        ),
    )


def get_recommended_slots(
    slots: Sequence[TimeSlot],
    current_selection: Sequence[TimeSlot],
    booked: Sequence[BookedInterval],
    blocks: Sequence[ManualBlock],
    day: date,
    now: datetime,
    capacity: int,
    max_selections: int = DEFAULT_MAX_SELECTIONS,
    **kwargs,
) -> list[TimeSlot]:
    return recommend(
        slots, current_selection, booked, blocks, day, now, capacity, max_selections, **kwargs
    ).recommended


def is_slot_recommended(
    slot: TimeSlot,
    slots: Sequence[TimeSlot],
    current_selection: Sequence[TimeSlot],
    booked: Sequence[BookedInterval],
    blocks: Sequence[ManualBlock],
    day: date,
    now: datetime,
    capacity: int,
    max_selections: int = DEFAULT_MAX_SELECTIONS,
    **kwargs,
) -> bool:
    recommended = get_recommended_slots(
        slots, current_selection, booked, blocks, day, now, capacity, max_selections, **kwargs
    )
    return slot in recommended
