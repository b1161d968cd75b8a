"""
Main Execution Script for the Availability Engine.
Loads a JSON snapshot and prints the bookable slots for one service over a date range.
"""

import argparse
import logging
import sys
from datetime import date, timedelta

from config.log_setup import setup_logging
from config.settings import get_settings
from scheduler.clock import BusinessClock
from scheduler.engine import AvailabilityEngine, booking_cutoff
from scheduler.errors import SchedulingError
from scheduler.snapshot import load_snapshot

logger = logging.getLogger("Main")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="List bookable slots from a schedule snapshot.")
    parser.add_argument("snapshot", help="Path to the JSON snapshot")
    parser.add_argument("--service", required=True, help="Service id to book")
    parser.add_argument("--date", type=date.fromisoformat, default=None, help="First day (YYYY-MM-DD), default today")
    parser.add_argument("--days", type=int, default=1, help="Number of days to list")
    parser.add_argument("--step", type=int, default=None, help="Slot granularity in minutes")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    args = parse_args(argv)

    clock = BusinessClock(settings.BUSINESS_TIMEZONE)
    engine = AvailabilityEngine(clock, default_step_minutes=settings.SLOT_STEP_MINUTES)
    snapshot = load_snapshot(args.snapshot)

    now = clock.now()
    start_date = args.date or now.date()
    end_date = start_date + timedelta(days=max(args.days, 1) - 1)
    not_before = booking_cutoff(now, settings.ALLOW_SAME_DAY_BOOKING, settings.MIN_NOTICE_HOURS)

    logger.info(f"🚀 Listing slots for {args.service} from {start_date} to {end_date} ({clock.timezone_name})")

    try:
        by_day = engine.available_slots_by_day(
            start_date,
            end_date,
            args.service,
            snapshot.business_hours,
            snapshot.appointments,
            snapshot.time_off,
            snapshot.services,
            step_minutes=args.step,
            not_before=not_before,
        )
    except SchedulingError as e:
        logger.error(f"❌ Cannot compute availability: {e}")
        return 1

    print("\n" + "=" * 50)
    print(f"📅 AVAILABLE SLOTS: {args.service}")
    print("=" * 50)
    if not by_day:
        print("No availability in range.")
    for day, slots in by_day.items():
        times = ", ".join(s.strftime("%H:%M") for s in slots)
        print(f"{day.isoformat()} ({day.strftime('%a')}): {times}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
