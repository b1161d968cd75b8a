"""
Typed failures raised by the Availability Engine.

Input errors (bad interval, bad step, unknown or unusable requested service) propagate
to the caller. Data-quality problems on secondary records are caught by the engine and
logged instead. A conflict is a normal result, except on the ledger's commit path where
it becomes SlotUnavailable.
"""


class SchedulingError(Exception):
    """Base class for all engine errors."""


class InvalidInterval(SchedulingError):
    """An interval whose start is not strictly before its end."""

    def __init__(self, start, end):
        self.start = start
        self.end = end
        super().__init__(f"Interval end must be strictly after start (start={start}, end={end})")


class InvalidStep(SchedulingError):
    """Slot granularity that is zero or negative."""

    def __init__(self, step_minutes):
        self.step_minutes = step_minutes
        super().__init__(f"Slot step must be a positive number of minutes, got {step_minutes}")


class MissingService(SchedulingError):
    """A service id that cannot be resolved from the catalog."""

    def __init__(self, service_id: str):
        self.service_id = service_id
        super().__init__(f"Service {service_id!r} not found in catalog")


class InvalidService(SchedulingError):
    """A requested service that cannot be booked (zero duration, inactive)."""


class SlotUnavailable(SchedulingError):
    """Raised when a booking commit finds the slot already taken."""

    def __init__(self, conflict):
        self.conflict = conflict
        occupied = conflict.conflicting
        super().__init__(
            f"Time slot is already booked: clashes with {occupied.reason.value} "
            f"{occupied.source_id} {occupied.interval}"
        )
