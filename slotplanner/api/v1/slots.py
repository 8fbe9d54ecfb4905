import logging

from fastapi import APIRouter, Depends, HTTPException

from slotplanner.api.v1.schemas import (
    AnalysisResponseSchema,
    AvailabilityResponseSchema,
    DayRequestSchema,
    RecommendationRequestSchema,
    RecommendationResponseSchema,
    SlotSchema,
    SlotVerdictSchema,
    StatsResponseSchema,
)
from slotplanner.application.exceptions import BookingFeedError
from slotplanner.application.use_cases.analyze_day import SlotAnalysisUseCase
from slotplanner.core.config import settings
from slotplanner.domain.entities.availability import SlotAvailability
from slotplanner.domain.entities.recommendation import RecommendationResult, RecommendationTrace
from slotplanner.domain.entities.stats import AvailabilityStats
from slotplanner.wiring.dependencies import get_slot_analysis_use_case

router = APIRouter()
logger = logging.getLogger(__name__)


def _duration(req: DayRequestSchema) -> int:
    if req.duration_minutes is None:
        return settings.DEFAULT_SERVICE_DURATION_MINUTES
    return req.duration_minutes


def _verdicts(graded: list[SlotAvailability]) -> list[SlotVerdictSchema]:
    return [
        SlotVerdictSchema(
            start=item.slot.start_label,
            end=item.slot.end_label,
            available=item.verdict.available,
            reason=item.verdict.reason.value,
            occupied=item.verdict.occupied,
            capacity=item.verdict.capacity,
            message=item.verdict.message,
        )
        for item in graded
    ]


def _stats(stats: AvailabilityStats) -> StatsResponseSchema:
    return StatsResponseSchema(
        total_slots=stats.total_slots,
        available=stats.available,
        fully_booked=stats.fully_booked,
        manually_blocked=stats.manually_blocked,
        too_soon=stats.too_soon,
        mechanics_count=stats.mechanics_count,
        maximum_capacity=stats.maximum_capacity,
        occupied_capacity=stats.occupied_capacity,
        current_appointments=stats.current_appointments,
        available_capacity=stats.available_capacity,
        utilization=stats.utilization,
    )


def _trace(trace: RecommendationTrace) -> dict:
    return {
        "candidates": [{"slot": c.slot.label, "weight": c.weight} for c in trace.candidates],
        "budget": trace.budget,
        "dp": {"slots": [s.label for s in trace.dp_slots], "weight": trace.dp_weight},
        "greedy": {"slots": [s.label for s in trace.greedy_slots], "weight": trace.greedy_weight},
        "winner": trace.winner,
        "backfilled": [s.label for s in trace.backfilled],
        "skipped_reason": trace.skipped_reason,
    }


def _recommendation(
    result: RecommendationResult, trace: RecommendationTrace | None = None
) -> RecommendationResponseSchema:
    statistics = result.statistics
    return RecommendationResponseSchema(
        recommended=[SlotSchema.from_time_slot(slot) for slot in result.recommended],
        current_max_appointments=result.current_max_appointments,
        potential_max_appointments=result.potential_max_appointments,
        improvement_possible=result.improvement_possible,
        statistics={
            "total_available_slots": statistics.total_available_slots,
            "slots_analyzed": statistics.slots_analyzed,
            "current_selections": statistics.current_selections,
            "recommended_additional": statistics.recommended_additional,
        },
        trace=_trace(trace) if trace is not None else None,
    )


@router.post("/availability", response_model=AvailabilityResponseSchema)
def availability(
    req: DayRequestSchema,
    uc: SlotAnalysisUseCase = Depends(get_slot_analysis_use_case),
):
    duration = _duration(req)
    try:
        graded = uc.availability(req.date, duration)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingFeedError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return AvailabilityResponseSchema(date=req.date, duration_minutes=duration, slots=_verdicts(graded))


@router.post("/stats", response_model=StatsResponseSchema)
def stats(
    req: DayRequestSchema,
    uc: SlotAnalysisUseCase = Depends(get_slot_analysis_use_case),
):
    try:
        result = uc.stats(req.date, _duration(req))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingFeedError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return _stats(result)


@router.post("/recommendations", response_model=RecommendationResponseSchema)
def recommendations(
    req: RecommendationRequestSchema,
    uc: SlotAnalysisUseCase = Depends(get_slot_analysis_use_case),
):
    trace = RecommendationTrace() if req.include_trace else None
    try:
        selection = [slot.to_time_slot() for slot in req.selection]
        result = uc.recommendations(
            req.date,
            _duration(req),
            selection,
            max_selections=req.max_selections,
            trace=trace,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingFeedError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return _recommendation(result, trace)


@router.post("/analysis", response_model=AnalysisResponseSchema)
def analysis(
    req: DayRequestSchema,
    uc: SlotAnalysisUseCase = Depends(get_slot_analysis_use_case),
):
    duration = _duration(req)
    try:
        result = uc.analyze(req.date, duration)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingFeedError as e:
        raise HTTPException(status_code=502, detail=str(e))

    logger.info(
        "Day analysis served",
        extra={"date": req.date.isoformat(), "capacity": result.capacity},
    )
    return AnalysisResponseSchema(
        date=result.day,
        duration_minutes=result.duration_minutes,
        capacity=result.capacity,
        slots=_verdicts(result.slots),
        stats=_stats(result.stats),
        recommendation=_recommendation(result.recommendation),
    )
