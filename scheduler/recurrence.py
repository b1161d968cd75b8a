"""
Recurring Time-Off Expansion.

This module turns a TimeOff definition into the concrete excluded intervals that fall
inside a query window. Expansion is always bounded by the caller's window, so an
open-ended recurrence is never computed to infinity.

Rules:
1. The time-of-day of start/end (business-local) is the daily excluded window.
2. The local date of start is the anchor: no occurrence before it.
3. recurrence_end_date is an inclusive cutoff on each occurrence's start date.
4. A window whose end time-of-day is earlier than its start crosses midnight and
   ends on the following day.
5. Monthly occurrences land on the anchor's day-of-month only. Months without that
   day (e.g. the 31st in April) contribute nothing.
"""

import logging
from datetime import date as date_type, datetime, time as time_type, timedelta
from typing import Iterator, List, Optional

from models import Interval, TimeOff, RecurrencePattern
from .clock import BusinessClock
from .errors import InvalidInterval

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


class RecurrenceExpander:
    """
    Materializes time-off occurrences for a window. Pure: the same inputs always
    produce the same output.
    """

    def __init__(self, clock: BusinessClock):
        self.clock = clock

    def expand(self, time_off: TimeOff, window: Interval) -> List[Interval]:
        """
        Every occurrence of `time_off` that intersects `window`, in chronological order.
        Occurrences are returned whole, not clipped to the window.
        """
        if not time_off.is_active:
            return []

        pattern = time_off.pattern

        # --- One-time block ---
        if pattern == RecurrencePattern.NONE:
            occurrence = Interval(self.clock.to_local(time_off.start), self.clock.to_local(time_off.end))
            return [occurrence] if occurrence.overlaps(window) else []

        # --- Recurring daily window ---
        local_start = self.clock.to_local(time_off.start)
        local_end = self.clock.to_local(time_off.end)
        anchor = local_start.date()
        start_tod = local_start.time().replace(tzinfo=None)
        end_tod = local_end.time().replace(tzinfo=None)
        if start_tod == end_tod:
            raise InvalidInterval(local_start, local_end)
        crosses_midnight = end_tod < start_tod

        first_day = self.clock.local_date(window.start)
        if crosses_midnight:
            # Yesterday's occurrence may spill into the window
            first_day -= ONE_DAY
        first_day = max(anchor, first_day)

        last_day = self.clock.local_date(window.end)
        if time_off.recurrence_end_date is not None:
            last_day = min(last_day, self.clock.local_date(time_off.recurrence_end_date))

        occurrences = []
        for day in self._candidate_days(pattern, anchor, first_day, last_day):
            occurrence = self._occurrence(day, start_tod, end_tod, crosses_midnight)
            if occurrence is not None and occurrence.overlaps(window):
                occurrences.append(occurrence)

        logger.debug(f"Expanded time-off {time_off.id} ({pattern.value}) to {len(occurrences)} occurrence(s) in {window}")
        return occurrences

    def blocks(self, time_off: TimeOff, instant: datetime) -> bool:
        """Is `instant` inside any occurrence of this time-off?"""
        probe = Interval(instant, instant + timedelta(microseconds=1))
        return any(occ.contains(instant) for occ in self.expand(time_off, probe))

    def _occurrence(
        self,
        day: date_type,
        start_tod: time_type,
        end_tod: time_type,
        crosses_midnight: bool
    ) -> Optional[Interval]:
        end_day = day + ONE_DAY if crosses_midnight else day
        start = self.clock.localize(day, start_tod)
        end = self.clock.localize(end_day, end_tod)
        if start >= end:
            # Whole wall-clock window falls in a spring-forward gap
            logger.debug(f"No occurrence on {day.isoformat()}: {start_tod}-{end_tod} does not exist locally")
            return None
        return Interval(start, end)

    def _candidate_days(
        self,
        pattern: RecurrencePattern,
        anchor: date_type,
        first_day: date_type,
        last_day: date_type
    ) -> Iterator[date_type]:
        """Dates in [first_day, last_day] on which the pattern fires."""
        if first_day > last_day:
            return

        if pattern == RecurrencePattern.DAILY:
            day = first_day
            while day <= last_day:
                yield day
                day += ONE_DAY

        elif pattern == RecurrencePattern.WEEKLY:
            # Advance to the anchor's weekday, then step a week at a time
            day = first_day + timedelta(days=(anchor.weekday() - first_day.weekday()) % 7)
            while day <= last_day:
                yield day
                day += timedelta(weeks=1)

        elif pattern == RecurrencePattern.MONTHLY:
            year, month = first_day.year, first_day.month
            while (year, month) <= (last_day.year, last_day.month):
                try:
                    day = date_type(year, month, anchor.day)
                except ValueError:
                    # Anchor day does not exist this month: no occurrence, no clamping
                    day = None
                if day is not None and first_day <= day <= last_day:
                    yield day
                month += 1
                if month > 12:
                    year, month = year + 1, 1

        elif pattern == RecurrencePattern.NONE:
            return

        else:
            raise ValueError(f"Unhandled recurrence pattern: {pattern!r}")
