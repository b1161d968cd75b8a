"""
Time-off data models for the Availability Engine.

A TimeOff is either a one-time block or a recurring daily window.
For recurring entries, the time-of-day of `start`/`end` defines the excluded window and
the date of `start` is the recurrence anchor.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict, model_validator


class RecurrencePattern(str, Enum):
    """Defines how a time-off block repeats."""
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"      # Same weekday as the anchor
    MONTHLY = "monthly"    # Same day-of-month as the anchor


class TimeOff(BaseModel):
    """
    A period when the provider is unavailable.
    """

    id: str = Field(description="Unique identifier")
    title: str = Field(default="", description="e.g. 'Lunch', 'Vacation'")

    start: datetime = Field(description="Start of the first (or only) occurrence")
    end: datetime = Field(description="End of the first (or only) occurrence")

    # --- Recurrence ---
    is_recurring: bool = Field(default=False)
    pattern: RecurrencePattern = Field(default=RecurrencePattern.NONE)
    recurrence_end_date: Optional[datetime] = Field(
        default=None,
        description="Inclusive cutoff on occurrence start dates. None = repeats indefinitely"
    )

    is_active: bool = Field(default=True, description="Inactive entries never block time")

    @model_validator(mode='after')
    def validate_configuration(self):
        """Ensure the recurrence configuration is consistent."""
        if self.start >= self.end:
            raise ValueError("Time-off end must be strictly after start")

        if not self.is_recurring and self.pattern != RecurrencePattern.NONE:
            raise ValueError("One-time time-off cannot specify a recurrence pattern")

        if self.is_recurring and self.pattern == RecurrencePattern.NONE:
            raise ValueError("Recurring time-off requires a recurrence pattern")

        if self.recurrence_end_date is not None and self.recurrence_end_date < self.start:
            raise ValueError("Recurrence end date cannot be before the first occurrence")

        return self

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "id": "to_lunch",
            "title": "Lunch",
            "start": "2025-03-03T12:00:00-05:00",
            "end": "2025-03-03T13:00:00-05:00",
            "is_recurring": True,
            "pattern": "daily",
            "recurrence_end_date": None,
            "is_active": True
        }
    })
