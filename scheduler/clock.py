"""
Business timezone handling.

All day boundaries, weekday and day-of-month decisions are made in one configured
timezone, never the host platform's local zone.
"""

from datetime import date as date_type, datetime, time as time_type, timedelta

import pytz

from models import Interval


class BusinessClock:
    """Converts between calendar dates, wall-clock times and aware instants."""

    def __init__(self, timezone_name: str = "UTC"):
        # Unknown names raise pytz.UnknownTimeZoneError
        self.tz = pytz.timezone(timezone_name)
        self.timezone_name = timezone_name

    def localize(self, day: date_type, wall_time: time_type) -> datetime:
        """Aware instant for a wall-clock time on a business-local date."""
        return self.tz.normalize(self.tz.localize(datetime.combine(day, wall_time)))

    def to_local(self, instant: datetime) -> datetime:
        """Express an instant in business-local time. Naive values are taken as local wall clock."""
        if instant.tzinfo is None:
            return self.tz.localize(instant)
        return instant.astimezone(self.tz)

    def local_date(self, instant: datetime) -> date_type:
        return self.to_local(instant).date()

    def local_time(self, instant: datetime) -> time_type:
        return self.to_local(instant).time().replace(tzinfo=None)

    def day_window(self, day: date_type) -> Interval:
        """[00:00, next day 00:00) local, as an Interval of aware instants."""
        return Interval(
            self.localize(day, time_type.min),
            self.localize(day + timedelta(days=1), time_type.min)
        )

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def __repr__(self) -> str:
        return f"BusinessClock({self.timezone_name!r})"
