"""
Scheduling Module

Finds open time for a task on a calendar day, or checks that a chosen time
is free.

Objects:
- SchedulableTask (start_time, time_estimate, status, deleted_at)
- ExternalEvent (read-only events from calendar subscriptions)
- BusyInterval (half-open [start, end) in epoch milliseconds)
- WorkingWindow (08:00-23:00 local)

Invariants:
- Every interval and every result lies inside the working window
- Back-to-back blocks (end == next start) do not conflict
- A task never conflicts with itself
- All-day events do not occupy timed slots
"""

from .duration import TimeEstimate, parse_estimate, resolve_duration_minutes
from .engine import ceil_to_minutes, find_free_slot, is_slot_free
from .intervals import extract_busy_intervals, merge_intervals, overlaps, working_window
from .models import (
    BusyInterval,
    ExternalEvent,
    SchedulableTask,
    ScheduleContext,
    TaskStatus,
    WorkingWindow,
)
from .records import load_context
from .reminders import is_due_within_minutes, next_scheduled_at, upcoming_schedules
from .scheduler import ScheduleError, ScheduleResult, Scheduler, parse_time_of_day

__all__ = [
    "BusyInterval",
    "ExternalEvent",
    "SchedulableTask",
    "ScheduleContext",
    "ScheduleError",
    "ScheduleResult",
    "Scheduler",
    "TaskStatus",
    "TimeEstimate",
    "WorkingWindow",
    "ceil_to_minutes",
    "extract_busy_intervals",
    "find_free_slot",
    "is_due_within_minutes",
    "is_slot_free",
    "load_context",
    "merge_intervals",
    "next_scheduled_at",
    "overlaps",
    "parse_estimate",
    "parse_time_of_day",
    "resolve_duration_minutes",
    "upcoming_schedules",
    "working_window",
]
