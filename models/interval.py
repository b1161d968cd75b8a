"""
Interval primitives for the Availability Engine.

Every piece of occupied or open time is expressed as a half-open range [start, end).
Intervals are immutable values; operations return new Intervals.
"""

from dataclasses import dataclass
from datetime import date as date_type, datetime, timedelta
from enum import Enum
from typing import Optional

from scheduler.errors import InvalidInterval


@dataclass(frozen=True)
class Interval:
    """Half-open time range [start, end). Construction fails if start >= end."""
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidInterval(self.start, self.end)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: "Interval") -> bool:
        # Touching ranges ([9,10) and [10,11)) do not overlap
        return self.start < other.end and other.start < self.end

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    def encloses(self, other: "Interval") -> bool:
        """True if `other` lies entirely inside this interval."""
        return self.start <= other.start and other.end <= self.end

    def expand(self, before_minutes: int = 0, after_minutes: int = 0) -> "Interval":
        """Widen the range by buffer minutes on each side."""
        return Interval(
            self.start - timedelta(minutes=before_minutes),
            self.end + timedelta(minutes=after_minutes),
        )

    def intersection(self, other: "Interval") -> Optional["Interval"]:
        if not self.overlaps(other):
            return None
        return Interval(max(self.start, other.start), min(self.end, other.end))

    def clamp_to_day(self, day: date_type, clock) -> Optional["Interval"]:
        """
        Portion of this interval falling on `day` in the business timezone.
        `clock` is the BusinessClock that defines day boundaries.
        """
        return self.intersection(clock.day_window(day))

    def __str__(self) -> str:
        return f"[{self.start.isoformat()}, {self.end.isoformat()})"


class OccupancyReason(str, Enum):
    """Why a range of time is unavailable."""
    APPOINTMENT = "appointment"
    TIME_OFF = "time_off"


@dataclass(frozen=True)
class OccupiedInterval:
    """
    A derived block of unavailable time, tagged with its source record.
    Produced fresh on every query and never persisted.
    """
    interval: Interval
    reason: OccupancyReason
    source_id: str

    @property
    def start(self) -> datetime:
        return self.interval.start

    @property
    def end(self) -> datetime:
        return self.interval.end
