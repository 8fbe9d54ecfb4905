from functools import lru_cache
import logging
from datetime import timedelta
from zoneinfo import ZoneInfo

from slotplanner.core.config import settings
from slotplanner.application.ports.booking_feed import BookingFeedPort
from slotplanner.application.ports.clock import ClockPort
from slotplanner.application.use_cases.analyze_day import SlotAnalysisUseCase
from slotplanner.infrastructure.booking.http_booking_feed import HttpBookingFeed
from slotplanner.infrastructure.booking.memory_booking_feed import MemoryBookingFeed
from slotplanner.infrastructure.clock.zoneinfo_clock import ZoneInfoClock


logger = logging.getLogger(__name__)


def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_booking_feed() -> BookingFeedPort:
    if not settings.BOOKING_API_BASE_URL or settings.ENV.lower() in {"dev", "local"}:
        logger.info("Using MemoryBookingFeed (ENV=%s)", settings.ENV)
        return MemoryBookingFeed()
    logger.info("Using HttpBookingFeed")
    return HttpBookingFeed()


def get_clock() -> ClockPort:
    return ZoneInfoClock(get_timezone())


def get_mechanics_count() -> int:
    return settings.MECHANICS_COUNT


def get_slot_analysis_use_case() -> SlotAnalysisUseCase:
    return SlotAnalysisUseCase(
        feed=get_booking_feed(),
        clock=get_clock(),
        timezone=get_timezone(),
        capacity_provider=get_mechanics_count,
        min_lead=timedelta(minutes=settings.MIN_LEAD_MINUTES),
        max_selections=settings.MAX_SELECTIONS,
    )
