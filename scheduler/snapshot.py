"""
Snapshot loading.

Rehydrates pydantic models from a JSON snapshot of the business's data:

    {
      "services": [...],
      "appointments": [...],
      "time_off": [...],
      "business_hours": {"1": ["09:00", "17:00"], ...}
    }

Flat and per-day business hours use the stored weekday numbering, 0=Sunday.
Structured hours (weekday -> [{"open_time": ..., "close_time": ...}]) are the
model's own form and use Python weekdays, 0=Monday.

A bad row is skipped with a warning so one corrupt record cannot take down
availability for everyone.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Type, Union

from pydantic import BaseModel, ValidationError

from models import Appointment, BusinessHours, Service, TimeOff

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    """Read-only inputs for one availability computation."""
    services: Dict[str, Service] = field(default_factory=dict)
    appointments: List[Appointment] = field(default_factory=list)
    time_off: List[TimeOff] = field(default_factory=list)
    business_hours: BusinessHours = field(default_factory=BusinessHours)


def _load_rows(rows: List[Dict[str, Any]], model_class: Type[BaseModel], label: str) -> List[Any]:
    valid_items = []
    for i, item in enumerate(rows):
        try:
            valid_items.append(model_class(**item))
        except ValidationError as e:
            logger.warning(f"Skipping invalid {label} row {i} ({item.get('id', '?')}): {e.errors()}")
        except TypeError as e:
            # e.g. a naive and an aware datetime in the same row
            logger.warning(f"Skipping invalid {label} row {i} ({item.get('id', '?')}): {e}")
    return valid_items


def _load_business_hours(raw: Any) -> BusinessHours:
    if not raw:
        return BusinessHours()
    # Stored per-day records: [{"dayOfWeek": 1, "isOpen": true, "timeSlots": [...]}, ...]
    if isinstance(raw, list):
        return BusinessHours.from_day_records(raw)
    # Flat storage format, 0=Sunday: weekday -> ["09:00", "12:00", "13:00", "17:00"]
    if all(isinstance(v, list) and all(isinstance(s, str) for s in v) for v in raw.values()):
        return BusinessHours.from_time_slots({int(k): v for k, v in raw.items()})
    return BusinessHours(days=raw)


def load_snapshot(source: Union[str, Path, Dict[str, Any]]) -> Snapshot:
    """
    Build a Snapshot from a JSON file path or an already-parsed dict.
    Business hours are a primary input: invalid hours raise ValidationError.
    """
    if isinstance(source, (str, Path)):
        with open(source, 'r') as f:
            data = json.load(f)
        logger.info(f"Loading snapshot from {source}...")
    else:
        data = source

    services = _load_rows(data.get('services', []), Service, "service")
    appointments = _load_rows(data.get('appointments', []), Appointment, "appointment")
    time_off = _load_rows(data.get('time_off', []), TimeOff, "time-off")

    snapshot = Snapshot(
        services={s.id: s for s in services},
        appointments=appointments,
        time_off=time_off,
        business_hours=_load_business_hours(data.get('business_hours')),
    )
    logger.info(
        f"Snapshot loaded: {len(snapshot.services)} services, "
        f"{len(snapshot.appointments)} appointments, {len(snapshot.time_off)} time-off entries"
    )
    return snapshot
