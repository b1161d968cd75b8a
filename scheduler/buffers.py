"""
Buffered Appointments.

An appointment removes more than its own duration from the calendar: the service's
buffer before and buffer after are unbookable too.
"""

from dataclasses import dataclass
from typing import Mapping

from models import Appointment, Service, Interval, OccupiedInterval, OccupancyReason
from .errors import MissingService


@dataclass(frozen=True)
class BufferedAppointment:
    """An appointment paired with the service that defines its buffers."""
    appointment: Appointment
    service: Service

    @classmethod
    def resolve(cls, appointment: Appointment, services: Mapping[str, Service]) -> "BufferedAppointment":
        """Look up the appointment's service. Raises MissingService for a dangling reference."""
        service = services.get(appointment.service_id)
        if service is None:
            raise MissingService(appointment.service_id)
        return cls(appointment, service)

    @property
    def occupied(self) -> Interval:
        """[start - buffer_before, end + buffer_after)"""
        return Interval(self.appointment.start, self.appointment.end).expand(
            self.service.buffer_before_minutes,
            self.service.buffer_after_minutes
        )

    def as_occupied_interval(self) -> OccupiedInterval:
        return OccupiedInterval(self.occupied, OccupancyReason.APPOINTMENT, self.appointment.id)
