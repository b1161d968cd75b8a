"""
Slot Generation.

Walks a day's open windows at a fixed granularity and keeps the start times whose
buffered block is free and stays inside the window.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from models import Interval, OccupiedInterval, Service
from .constraints import fits_open_hours, sort_occupied
from .errors import InvalidStep

DEFAULT_STEP_MINUTES = 15


class SlotGenerator:
    """Stepping function over open windows."""

    def __init__(self, step_minutes: int = DEFAULT_STEP_MINUTES):
        if step_minutes is None or step_minutes <= 0:
            raise InvalidStep(step_minutes)
        self.step = timedelta(minutes=step_minutes)

    def generate(
        self,
        windows: Sequence[Interval],
        service: Service,
        occupied: Sequence[OccupiedInterval],
        not_before: Optional[datetime] = None
    ) -> List[datetime]:
        """
        Candidate starts, ascending. For each window, candidates run from the opening
        time to closing - duration in `step` increments; a candidate survives when
        [s - buffer_before, s + duration + buffer_after) fits in the window and overlaps
        nothing in `occupied`.
        """
        duration = timedelta(minutes=service.duration_minutes)
        blocks = [o.interval for o in sort_occupied(occupied)]
        slots = set()

        for window in windows:
            last_start = window.end - duration
            candidate = window.start

            while candidate <= last_start:
                if not_before is None or candidate >= not_before:
                    required = Interval(candidate, candidate + duration).expand(
                        service.buffer_before_minutes,
                        service.buffer_after_minutes
                    )
                    if fits_open_hours(required, [window]) and not self._is_blocked(required, blocks):
                        slots.add(candidate)
                candidate += self.step

        return sorted(slots)

    @staticmethod
    def _is_blocked(required: Interval, blocks: Sequence[Interval]) -> bool:
        for block in blocks:
            if block.start >= required.end:
                # Sorted by start: nothing later can overlap
                break
            if block.overlaps(required):
                return True
        return False
