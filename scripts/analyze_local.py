#!/usr/bin/env python3
"""
Local timeslot analyzer (no HTTP, no booking store).

Usage:
  python3 scripts/analyze_local.py --date 2025-01-01 --duration 90 --mechanics 2 \
      --booked 09:00-10:00 --booked 09:30-11:00 --block 12:00-13:00

What it does:
- Builds the day's slot grid for the requested service duration
- Prints each slot's verdict, the day's statistics and the recommended slots
- Shows which solver won and what was backfilled
"""

from __future__ import annotations

import argparse
import sys
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from slotplanner.application.exceptions import InvalidTimeFormat
from slotplanner.application.use_cases.analyze_day import SlotAnalysisUseCase
from slotplanner.application.utils.interval_math import parse_range
from slotplanner.core.config import settings
from slotplanner.domain.entities.recommendation import RecommendationTrace
from slotplanner.domain.entities.time_slot import BookedInterval, ManualBlock
from slotplanner.infrastructure.booking.memory_booking_feed import MemoryBookingFeed
from slotplanner.infrastructure.clock.zoneinfo_clock import FixedClock, ZoneInfoClock


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Analyze one day's appointment slots.")
    parser.add_argument("--date", type=date.fromisoformat, required=True, help="YYYY-MM-DD")
    parser.add_argument("--duration", type=int, default=settings.DEFAULT_SERVICE_DURATION_MINUTES)
    parser.add_argument("--mechanics", type=int, default=settings.MECHANICS_COUNT)
    parser.add_argument("--booked", action="append", default=[], help="HH:MM-HH:MM, repeatable")
    parser.add_argument("--block", action="append", default=[], help="HH:MM-HH:MM, repeatable")
    parser.add_argument("--now", type=datetime.fromisoformat, default=None, help="ISO instant, local if naive")
    return parser.parse_args(argv)


def _ranges(values: list[str], label: str) -> list[tuple[int, int]]:
    ranges: list[tuple[int, int]] = []
    for value in values:
        try:
            ranges.append(parse_range(value))
        except InvalidTimeFormat as e:
            print(f"Ignoring {label} {value!r}: {e}")
    return ranges


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    tz = ZoneInfo(settings.BUSINESS_TIMEZONE)

    feed = MemoryBookingFeed()
    feed.set_day(
        args.date,
        booked=[
            BookedInterval(start=start, end=end, appointment_id=f"local-{i}")
            for i, (start, end) in enumerate(_ranges(args.booked, "booking"))
        ],
        blocks=[ManualBlock(start=start, end=end, reason="manually_set") for start, end in _ranges(args.block, "block")],
    )

    if args.now is None:
        clock = ZoneInfoClock(tz)
    else:
        now = args.now if args.now.tzinfo else args.now.replace(tzinfo=tz)
        clock = FixedClock(now)

    use_case = SlotAnalysisUseCase(
        feed=feed,
        clock=clock,
        timezone=tz,
        capacity_provider=lambda: args.mechanics,
    )
    trace = RecommendationTrace()
    analysis = use_case.analyze(args.date, args.duration, trace=trace)

    print(f"\nSlot analysis for {analysis.day.isoformat()} ({analysis.duration_minutes} min, {analysis.capacity} mechanics)")
    print("-" * 60)
    if not analysis.slots:
        print("No appointments possible with this duration.")
    recommended = set(analysis.recommendation.recommended)
    for item in analysis.slots:
        marker = "*" if item.slot in recommended else " "
        print(f"{marker} {item.slot.label}  {item.verdict.reason.value:<16} {item.verdict.message}")

    stats = analysis.stats
    print("\n--- Statistics ---")
    print(f"available: {stats.available}  fully booked: {stats.fully_booked}  "
          f"blocked: {stats.manually_blocked}  too soon: {stats.too_soon}")
    print(f"maximum capacity: {stats.maximum_capacity}  current appointments: {stats.current_appointments}  "
          f"utilization: {stats.utilization}")

    print("\n--- Recommendation ---")
    print("slots: " + (", ".join(s.label for s in analysis.recommendation.recommended) or "(none)"))
    print(f"solver: {trace.winner or trace.skipped_reason}  dp weight: {trace.dp_weight}  "
          f"greedy weight: {trace.greedy_weight}")
    if trace.backfilled:
        print("backfilled: " + ", ".join(s.label for s in trace.backfilled))
    print("-" * 60)


if __name__ == "__main__":
    main()
