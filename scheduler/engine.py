"""
The Availability Engine.

This module orchestrates the availability pipeline for a single provider:
1. Occupied Time - buffered appointments plus expanded time-off for a day.
2. Slot Listing - stepping through open hours to find bookable starts.
3. Conflict Verdicts - the authoritative check used at booking-commit time.

The engine is a pure computation over immutable snapshots. Data access lives with the
caller, which passes services, appointments, time-off and business hours in.
"""

import logging
from datetime import date as date_type, datetime, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from models import (
    Appointment,
    BusinessHours,
    Interval,
    OccupiedInterval,
    OccupancyReason,
    Service,
    TimeOff,
)
from .buffers import BufferedAppointment
from .clock import BusinessClock
from .constraints import BookingDecision, ConflictResult, ConstraintChecker, check_conflict, open_intervals
from .errors import InvalidService, InvalidStep, MissingService, SchedulingError
from .recurrence import RecurrenceExpander
from .slots import DEFAULT_STEP_MINUTES, SlotGenerator

logger = logging.getLogger(__name__)


def booking_cutoff(now: datetime, allow_same_day_booking: bool = True, min_notice_hours: int = 24) -> datetime:
    """
    Earliest bookable instant. With same-day booking only times that have not passed
    are offered; without it, bookings need `min_notice_hours` of notice.
    """
    if allow_same_day_booking:
        return now
    return now + timedelta(hours=min_notice_hours)


class AvailabilityEngine:
    """
    Main availability engine.
    Ingests a snapshot (services, appointments, time-off, hours), outputs bookable
    slots and conflict verdicts.
    """

    def __init__(self, clock: BusinessClock, default_step_minutes: int = DEFAULT_STEP_MINUTES):
        if default_step_minutes is None or default_step_minutes <= 0:
            raise InvalidStep(default_step_minutes)

        self.clock = clock
        self.default_step_minutes = default_step_minutes

        # Initialize Helpers
        self.expander = RecurrenceExpander(clock)
        self.checker = ConstraintChecker(clock)

    # --- Occupied Time ---

    def get_occupied_intervals(
        self,
        day: date_type,
        appointments: Iterable[Appointment],
        time_off_list: Iterable[TimeOff],
        services: Mapping[str, Service]
    ) -> List[OccupiedInterval]:
        """
        Every block of unavailable time touching `day`: appointments first (input order),
        then time-off occurrences (input order, chronological per entry).
        Overlaps are not merged so each block keeps its source id.
        """
        window = self.clock.day_window(day)
        occupied: List[OccupiedInterval] = []

        # 1. Appointments (canceled / no-show free their slot)
        for appointment in appointments:
            if not appointment.occupies_calendar:
                continue
            try:
                buffered = BufferedAppointment.resolve(self.localized(appointment), services)
                block = buffered.as_occupied_interval()
            except SchedulingError as e:
                # One dangling reference must not block scheduling for the whole day
                logger.warning(f"Skipping appointment {appointment.id}: {e}")
                continue
            if block.interval.overlaps(window):
                occupied.append(block)

        # 2. Time-off
        for time_off in time_off_list:
            if not time_off.is_active:
                continue
            try:
                intervals = self.expander.expand(time_off, window)
            except SchedulingError as e:
                logger.warning(f"Skipping time-off {time_off.id}: {e}")
                continue
            occupied.extend(
                OccupiedInterval(interval, OccupancyReason.TIME_OFF, time_off.id)
                for interval in intervals
            )

        logger.debug(f"{day.isoformat()}: {len(occupied)} occupied interval(s)")
        return occupied

    # --- Slot Listing ---

    def find_available_slots(
        self,
        day: date_type,
        service: Service,
        business_hours: BusinessHours,
        occupied: Sequence[OccupiedInterval],
        step_minutes: Optional[int] = None,
        not_before: Optional[datetime] = None
    ) -> List[datetime]:
        """
        Bookable start times for `service` on `day`, ascending, in business-local time.
        Raises InvalidStep for a non-positive step and InvalidService for a service that
        cannot be booked.
        """
        self._validate_requested_service(service)
        generator = SlotGenerator(self.default_step_minutes if step_minutes is None else step_minutes)

        windows = open_intervals(day, business_hours, self.clock)
        if not windows:
            logger.debug(f"{day.isoformat()}: closed")
            return []

        slots = [
            self.clock.to_local(s)
            for s in generator.generate(windows, service, occupied, not_before=not_before)
        ]
        logger.debug(f"{day.isoformat()}: {len(slots)} slot(s) for {service.id}")
        return slots

    def available_slots(
        self,
        day: date_type,
        service_id: str,
        business_hours: BusinessHours,
        appointments: Sequence[Appointment],
        time_off_list: Sequence[TimeOff],
        services: Mapping[str, Service],
        step_minutes: Optional[int] = None,
        not_before: Optional[datetime] = None
    ) -> List[datetime]:
        """Full pipeline for one (date, service id) request."""
        service = self.resolve_service(service_id, services)
        occupied = self.get_occupied_intervals(day, appointments, time_off_list, services)
        return self.find_available_slots(day, service, business_hours, occupied, step_minutes, not_before)

    def available_slots_by_day(
        self,
        start_date: date_type,
        end_date: date_type,
        service_id: str,
        business_hours: BusinessHours,
        appointments: Sequence[Appointment],
        time_off_list: Sequence[TimeOff],
        services: Mapping[str, Service],
        step_minutes: Optional[int] = None,
        not_before: Optional[datetime] = None
    ) -> Dict[date_type, List[datetime]]:
        """
        Slots for every day in [start_date, end_date], keyed by date in order.
        Days without a single slot are omitted.
        """
        result = {}
        current = start_date
        while current <= end_date:
            slots = self.available_slots(
                current, service_id, business_hours, appointments, time_off_list, services,
                step_minutes=step_minutes, not_before=not_before
            )
            if slots:
                result[current] = slots
            current += timedelta(days=1)
        return result

    # --- Conflict Verdicts ---

    def check_conflict(self, proposed: Interval, occupied: Sequence[OccupiedInterval]) -> ConflictResult:
        """
        Authoritative overlap check. Callers re-run this immediately before persisting
        a booking, against a freshly fetched occupied set. Naive bounds are business
        wall clock.
        """
        proposed = Interval(self.clock.to_local(proposed.start), self.clock.to_local(proposed.end))
        return check_conflict(proposed, occupied)

    def check_booking(
        self,
        start: datetime,
        service: Service,
        business_hours: BusinessHours,
        occupied: Sequence[OccupiedInterval]
    ) -> BookingDecision:
        """Opening hours plus conflict check for a proposed start of `service`."""
        self._validate_requested_service(service)
        return self.checker.check_booking(start, service, business_hours, occupied)

    def find_time_off_conflicts(
        self,
        time_off: TimeOff,
        appointments: Iterable[Appointment],
        services: Mapping[str, Service],
        window: Interval
    ) -> List[Appointment]:
        """
        Active appointments whose buffered block would collide with a proposed time-off
        inside `window`. Used before saving a new or edited time-off entry.
        """
        occurrences = self.expander.expand(time_off, window)
        if not occurrences:
            return []

        clashes = []
        for appointment in appointments:
            if not appointment.occupies_calendar:
                continue
            try:
                block = BufferedAppointment.resolve(self.localized(appointment), services).occupied
            except MissingService as e:
                logger.warning(f"Skipping appointment {appointment.id}: {e}")
                continue
            if any(block.overlaps(occ) for occ in occurrences):
                clashes.append(appointment)
        return clashes

    # --- Helpers ---

    def resolve_service(self, service_id: str, services: Mapping[str, Service]) -> Service:
        """Look up the requested service. A missing one is a caller error."""
        service = services.get(service_id)
        if service is None:
            raise MissingService(service_id)
        return service

    def _validate_requested_service(self, service: Service) -> None:
        # Only reachable for services built with model_construct, which skips validation
        if service.duration_minutes <= 0:
            raise InvalidService(f"Service {service.id!r} must have a positive duration")
        if not service.is_active:
            raise InvalidService(f"Service {service.id!r} is not active")

    def localized(self, appointment: Appointment) -> Appointment:
        """Treat naive appointment times as business wall clock."""
        if appointment.start.tzinfo is not None and appointment.end.tzinfo is not None:
            return appointment
        return appointment.model_copy(update={
            "start": self.clock.to_local(appointment.start),
            "end": self.clock.to_local(appointment.end),
        })
