"""
Appointment data models for the Availability Engine.

Appointments are read-only snapshots supplied by the appointment store.
Only some statuses hold their slot on the calendar.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict, model_validator


class AppointmentStatus(str, Enum):
    """Lifecycle status of an appointment."""
    CONFIRMED = "confirmed"
    ARRIVED = "arrived"
    COMPLETED = "completed"
    CANCELED = "canceled"
    NO_SHOW = "no_show"

    @property
    def occupies_calendar(self) -> bool:
        """Canceled and no-show appointments free their slot."""
        if self in (AppointmentStatus.CONFIRMED, AppointmentStatus.ARRIVED, AppointmentStatus.COMPLETED):
            return True
        if self in (AppointmentStatus.CANCELED, AppointmentStatus.NO_SHOW):
            return False
        raise ValueError(f"Unhandled appointment status: {self!r}")


class Appointment(BaseModel):
    """
    A scheduled booking of one service.
    `end` is expected to equal `start + service.duration_minutes`; buffers are
    never stored on the appointment, they come from the service at query time.
    """

    id: str = Field(description="Unique identifier")
    service_id: str = Field(description="Catalog id of the booked service")
    start: datetime = Field(description="Start of the service itself")
    end: datetime = Field(description="End of the service itself")
    status: AppointmentStatus = Field(default=AppointmentStatus.CONFIRMED)

    client_name: Optional[str] = Field(default=None, description="Display name for diagnostics")

    @model_validator(mode='after')
    def validate_times(self):
        if self.start >= self.end:
            raise ValueError("Appointment end must be strictly after start")
        return self

    @property
    def occupies_calendar(self) -> bool:
        return self.status.occupies_calendar

    @classmethod
    def for_service(cls, id: str, service, start: datetime, **extra) -> "Appointment":
        """Build an appointment whose end is derived from the service duration."""
        return cls(
            id=id,
            service_id=service.id,
            start=start,
            end=start + timedelta(minutes=service.duration_minutes),
            **extra
        )

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "id": "appt_0001",
            "service_id": "svc_facial_60",
            "start": "2025-03-04T10:00:00-05:00",
            "end": "2025-03-04T11:00:00-05:00",
            "status": "confirmed",
            "client_name": "Dana Ortiz"
        }
    })
