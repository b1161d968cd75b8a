"""
Booking State Management.

This module is the reference commit path for new appointments.
Listing slots and committing a booking are separate steps, so another booking can land
in between. The ledger closes that race by re-running the conflict check inside the
same lock that guards the write: no two active appointments may ever hold overlapping
buffered intervals.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Dict, List, Mapping, Optional, Sequence

from models import Appointment, AppointmentStatus, Service, TimeOff
from .buffers import BufferedAppointment
from .engine import AvailabilityEngine
from .errors import SlotUnavailable

logger = logging.getLogger(__name__)


class BookingLedger:
    """
    In-memory appointment store with an optimistic check-then-write commit.
    Stored appointments are frozen; status changes replace them with new copies.
    """

    def __init__(
        self,
        engine: AvailabilityEngine,
        services: Mapping[str, Service],
        time_off: Sequence[TimeOff] = (),
        appointments: Sequence[Appointment] = ()
    ):
        self.engine = engine
        self.services = dict(services)
        self.time_off = list(time_off)
        self._appointments: Dict[str, Appointment] = {a.id: a for a in appointments}
        self._lock = threading.Lock()

    def book(self, appointment: Appointment) -> Appointment:
        """
        Commit a new appointment. Raises SlotUnavailable if its buffered block
        collides with an active appointment or time-off, MissingService if its
        service is unknown.
        """
        with self._lock:
            if appointment.id in self._appointments:
                raise ValueError(f"Appointment {appointment.id} already exists")

            buffered = BufferedAppointment.resolve(self.engine.localized(appointment), self.services)
            block = buffered.occupied

            if not appointment.occupies_calendar:
                # Canceled / no-show records hold no time
                self._appointments[appointment.id] = appointment
                logger.info(f"Recorded {appointment.id} ({appointment.status.value}) without a slot")
                return appointment

            # 1. Re-fetch occupied time for every day the block touches
            clock = self.engine.clock
            occupied = []
            day = clock.local_date(block.start)
            last_day = clock.local_date(block.end)
            current = list(self._appointments.values())
            while day <= last_day:
                occupied.extend(self.engine.get_occupied_intervals(day, current, self.time_off, self.services))
                day += timedelta(days=1)

            # 2. Authoritative check, then write
            result = self.engine.check_conflict(block, occupied)
            if result.has_conflict:
                logger.info(f"Rejected booking {appointment.id}: {result.conflicting.source_id} occupies {result.conflicting.interval}")
                raise SlotUnavailable(result)

            self._appointments[appointment.id] = appointment
            logger.info(f"Booked {appointment.id} ({appointment.service_id}) at {appointment.start.isoformat()}")
            return appointment

    def set_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment:
        """Replace a stored appointment with a copy carrying the new status."""
        with self._lock:
            existing = self._appointments.get(appointment_id)
            if existing is None:
                raise KeyError(appointment_id)
            updated = existing.model_copy(update={"status": status})
            self._appointments[appointment_id] = updated
            logger.info(f"Appointment {appointment_id}: {existing.status.value} -> {status.value}")
            return updated

    def cancel(self, appointment_id: str) -> Appointment:
        return self.set_status(appointment_id, AppointmentStatus.CANCELED)

    def get(self, appointment_id: str) -> Optional[Appointment]:
        return self._appointments.get(appointment_id)

    def appointments_between(self, start: datetime, end: datetime) -> List[Appointment]:
        """Range query: appointments whose own times overlap [start, end), any status."""
        with self._lock:
            found = [a for a in self._appointments.values() if a.start < end and start < a.end]
        return sorted(found, key=lambda a: a.start)

    def snapshot(self) -> List[Appointment]:
        with self._lock:
            return list(self._appointments.values())
