"""
Availability Engine package.

- Recurring time-off expansion (recurrence.py)
- Buffered appointments (buffers.py)
- Conflict detection and booking validation (constraints.py)
- Slot stepping (slots.py)
- Orchestration (engine.py)
- Booking commit path (state.py)
"""
