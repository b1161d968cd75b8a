"""
Data models package for the Availability Engine.

This package exports the three groups of the data architecture:
1. Catalog & Bookings (Service, Appointment, AppointmentStatus)
2. Exclusions & Hours (TimeOff, RecurrencePattern, BusinessHours, OpenWindow)
3. Engine Values (Interval, OccupiedInterval, OccupancyReason)
"""

from .service import Service

from .appointment import (
    Appointment,
    AppointmentStatus
)

from .time_off import (
    TimeOff,
    RecurrencePattern
)

from .business_hours import (
    BusinessHours,
    OpenWindow
)

from .interval import (
    Interval,
    OccupiedInterval,
    OccupancyReason
)

__all__ = [
    # --- Catalog & Booking Models ---
    "Service",
    "Appointment",
    "AppointmentStatus",

    # --- Exclusion & Hours Models ---
    "TimeOff",
    "RecurrencePattern",
    "BusinessHours",
    "OpenWindow",

    # --- Engine Values ---
    "Interval",
    "OccupiedInterval",
    "OccupancyReason",
]
