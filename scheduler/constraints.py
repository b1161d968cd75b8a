"""
Hard Constraint Validation Logic.

This module answers the binary question: "Can this booking happen at this time?"
It enforces physical reality (one provider, one client at a time, buffers included)
and opening hours.

A conflict is an expected outcome, so it is returned as a value rather than raised.
"""

import logging
from dataclasses import dataclass
from datetime import date as date_type, datetime, timedelta
from typing import Iterable, List, Sequence, Union

from models import BusinessHours, Interval, OccupiedInterval, Service
from .clock import BusinessClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoConflict:
    """The proposed interval is free."""

    @property
    def has_conflict(self) -> bool:
        return False


@dataclass(frozen=True)
class Conflict:
    """The proposed interval collides with an occupied interval."""
    conflicting: OccupiedInterval

    @property
    def has_conflict(self) -> bool:
        return True


@dataclass(frozen=True)
class OutsideBusinessHours:
    """The buffered booking does not fit inside a single open window."""
    requested: Interval

    @property
    def has_conflict(self) -> bool:
        return True


ConflictResult = Union[NoConflict, Conflict]
BookingDecision = Union[NoConflict, Conflict, OutsideBusinessHours]


def sort_occupied(occupied: Iterable[OccupiedInterval]) -> List[OccupiedInterval]:
    """Earliest start first. Stable, so equal ranges keep their input order."""
    return sorted(occupied, key=lambda o: (o.start, o.end))


def check_conflict(proposed: Interval, occupied: Iterable[OccupiedInterval]) -> ConflictResult:
    """
    Report the earliest-starting occupied interval that overlaps `proposed`.
    The occupied list is treated as a union; its order never changes whether a
    conflict exists.
    """
    for block in sort_occupied(occupied):
        if block.interval.overlaps(proposed):
            return Conflict(block)
    return NoConflict()


def open_intervals(day: date_type, business_hours: BusinessHours, clock: BusinessClock) -> List[Interval]:
    """The day's open windows as aware Intervals. Empty when closed."""
    return [
        Interval(clock.localize(day, w.open_time), clock.localize(day, w.close_time))
        for w in business_hours.windows_for(day.weekday())
    ]


def fits_open_hours(required: Interval, windows: Sequence[Interval]) -> bool:
    """Buffers are business-internal time: the whole block must sit inside one window."""
    return any(window.encloses(required) for window in windows)


class ConstraintChecker:
    """
    Validates a concrete booking request against opening hours and occupied time.
    """

    def __init__(self, clock: BusinessClock):
        self.clock = clock

    def required_interval(self, start: datetime, service: Service) -> Interval:
        """[start - buffer_before, start + duration + buffer_after)"""
        return Interval(start, start + timedelta(minutes=service.duration_minutes)).expand(
            service.buffer_before_minutes,
            service.buffer_after_minutes
        )

    def check_booking(
        self,
        start: datetime,
        service: Service,
        business_hours: BusinessHours,
        occupied: Sequence[OccupiedInterval]
    ) -> BookingDecision:
        """
        Master validation function. Returns NoConflict if the booking is valid.
        """
        start = self.clock.to_local(start)
        required = self.required_interval(start, service)

        # 1. Opening hours (buffers included)
        day = self.clock.local_date(start)
        if not fits_open_hours(required, open_intervals(day, business_hours, self.clock)):
            logger.info(f"Booking for {service.id} at {start.isoformat()} is outside business hours")
            return OutsideBusinessHours(required)

        # 2. Occupied time
        result = check_conflict(required, occupied)
        if result.has_conflict:
            logger.info(
                f"Booking for {service.id} at {start.isoformat()} clashes with "
                f"{result.conflicting.reason.value} {result.conflicting.source_id}"
            )
        return result
