# dayplan - Day scheduling engine
"""
Exports for the calendar view and other consumers.
"""

from .scheduling import (
    ScheduleContext,
    Scheduler,
    find_free_slot,
    is_slot_free,
    merge_intervals,
    resolve_duration_minutes,
)

__version__ = "0.1.0"

__all__ = [
    "ScheduleContext",
    "Scheduler",
    "find_free_slot",
    "is_slot_free",
    "merge_intervals",
    "resolve_duration_minutes",
]
