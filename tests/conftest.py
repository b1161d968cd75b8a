"""Pytest configuration and fixtures."""

from datetime import date, datetime, time

import pytest

from models import Appointment, BusinessHours, Service, TimeOff, RecurrencePattern
from scheduler.clock import BusinessClock
from scheduler.engine import AvailabilityEngine

# 2025-03-03 is a Monday; US DST starts 2025-03-09
MONDAY = date(2025, 3, 3)
TUESDAY = date(2025, 3, 4)
WEDNESDAY = date(2025, 3, 5)
SUNDAY = date(2025, 3, 9)


@pytest.fixture
def clock() -> BusinessClock:
    return BusinessClock("America/New_York")


@pytest.fixture
def engine(clock) -> AvailabilityEngine:
    return AvailabilityEngine(clock)


@pytest.fixture
def at(clock):
    """Factory for business-local aware instants: at(day, hour, minute)."""
    def _at(day: date, hour: int, minute: int = 0) -> datetime:
        return clock.localize(day, time(hour, minute))
    return _at


@pytest.fixture
def weekday_hours() -> BusinessHours:
    """Monday to Friday, 09:00-17:00."""
    return BusinessHours.weekly(time(9, 0), time(17, 0))


@pytest.fixture
def services():
    return {
        "svc_60": Service(id="svc_60", name="Signature Facial", duration_minutes=60),
        "svc_30": Service(id="svc_30", name="Brow Shaping", duration_minutes=30),
        "svc_buffered": Service(
            id="svc_buffered",
            name="Lash Lift",
            duration_minutes=30,
            buffer_before_minutes=15,
            buffer_after_minutes=15,
        ),
        "svc_retired": Service(id="svc_retired", name="Old Peel", duration_minutes=45, is_active=False),
    }


@pytest.fixture
def make_appointment(at, services):
    """Factory: make_appointment(id, service_id, day, hour, minute=0, **extra)."""
    def _make(id: str, service_id: str, day: date, hour: int, minute: int = 0, **extra) -> Appointment:
        service = services[service_id]
        return Appointment.for_service(id, service, at(day, hour, minute), **extra)
    return _make


@pytest.fixture
def daily_lunch(at) -> TimeOff:
    """Open-ended daily 12:00-13:00 block anchored on Monday."""
    return TimeOff(
        id="to_lunch",
        title="Lunch",
        start=at(MONDAY, 12),
        end=at(MONDAY, 13),
        is_recurring=True,
        pattern=RecurrencePattern.DAILY,
    )
