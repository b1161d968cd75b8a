"""
Business hours model for the Availability Engine.

Opening hours are wall-clock times in the business timezone, keyed by weekday
(0=Monday, 6=Sunday). A weekday without windows is closed.
"""

from datetime import time
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator


def sunday_first_to_weekday(day_of_week: int) -> int:
    """Stored 0=Sunday numbering to Python's 0=Monday."""
    return (day_of_week - 1) % 7


class OpenWindow(BaseModel):
    """A time window when the business is open."""
    open_time: time = Field(description="Opening time")
    close_time: time = Field(description="Closing time")

    @model_validator(mode='after')
    def validate_times(self):
        if self.open_time >= self.close_time:
            raise ValueError("Closing time must be strictly after opening time")
        return self

    model_config = ConfigDict(frozen=True)


class BusinessHours(BaseModel):
    """
    Weekly opening hours.
    A day may have several windows (e.g. 09:00-12:00 and 13:00-17:00).
    """
    days: Dict[int, List[OpenWindow]] = Field(
        default_factory=dict,
        description="Weekday (0=Monday) -> open windows"
    )

    @field_validator('days')
    @classmethod
    def validate_days(cls, v):
        for weekday, windows in v.items():
            if not 0 <= weekday <= 6:
                raise ValueError(f"Weekday must be between 0 (Monday) and 6 (Sunday), got {weekday}")
            ordered = sorted(windows, key=lambda w: w.open_time)
            for prev, nxt in zip(ordered, ordered[1:]):
                if nxt.open_time < prev.close_time:
                    raise ValueError(f"Open windows overlap on weekday {weekday}")
            v[weekday] = ordered
        return v

    def windows_for(self, weekday: int) -> List[OpenWindow]:
        """Open windows for a weekday, earliest first. Empty when closed."""
        return list(self.days.get(weekday, []))

    def is_open_on(self, weekday: int) -> bool:
        return bool(self.days.get(weekday))

    @classmethod
    def weekly(cls, open_time: time, close_time: time, weekdays: Sequence[int] = (0, 1, 2, 3, 4)) -> "BusinessHours":
        """Same single window on each of `weekdays`."""
        window = OpenWindow(open_time=open_time, close_time=close_time)
        return cls(days={d: [window] for d in weekdays})

    @classmethod
    def from_time_slots(cls, slots: Mapping[int, Sequence[str]]) -> "BusinessHours":
        """
        Parse the flat storage format: weekday -> ["09:00", "12:00", "13:00", "17:00"],
        consecutive pairs being (open, close). A trailing unpaired value is ignored.
        Stored weekdays count from Sunday (0=Sunday, 6=Saturday).
        """
        days = {}
        for weekday, values in slots.items():
            windows = []
            for i in range(0, len(values) - 1, 2):
                windows.append(OpenWindow(
                    open_time=time.fromisoformat(values[i]),
                    close_time=time.fromisoformat(values[i + 1])
                ))
            if windows:
                days[sunday_first_to_weekday(int(weekday))] = windows
        return cls(days=days)

    @classmethod
    def from_day_records(cls, records: Iterable[Mapping[str, Any]]) -> "BusinessHours":
        """
        Parse stored per-day records:
        {"dayOfWeek": 1, "isOpen": true, "timeSlots": ["08:00", "17:30"]}.
        Days flagged closed are closed whatever their time slots say.
        """
        return cls.from_time_slots({
            int(record["dayOfWeek"]): record.get("timeSlots", [])
            for record in records
            if record.get("isOpen", False)
        })

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "days": {
                "0": [{"open_time": "09:00:00", "close_time": "17:00:00"}],
                "5": [
                    {"open_time": "09:00:00", "close_time": "12:00:00"},
                    {"open_time": "13:00:00", "close_time": "15:30:00"}
                ]
            }
        }
    })
