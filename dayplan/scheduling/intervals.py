"""
Busy-interval extraction and merging for a single day.

Tasks and external events are reduced to half-open [start, end) intervals
in epoch milliseconds, clipped to the working window. Merging produces the
sorted, disjoint busy set the free-slot finder walks.
"""

import logging
from collections.abc import Iterable
from datetime import date

from .duration import resolve_duration_minutes
from .models import (
    MINUTE_MS,
    BusyInterval,
    ExternalEvent,
    SchedulableTask,
    WorkingWindow,
    day_bounds,
    local_date,
    to_epoch_ms,
)

logger = logging.getLogger(__name__)


def working_window(day: date) -> WorkingWindow:
    """Working window (08:00-23:00 local) for a day."""
    return WorkingWindow.for_day(day)


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open overlap: back-to-back ranges do not overlap."""
    return a_start < b_end and a_end > b_start


def task_interval(task: SchedulableTask, window: WorkingWindow) -> BusyInterval | None:
    """Clipped block a planned task occupies on the window's day, if any."""
    if task.start_time is None:
        return None
    start_ms = to_epoch_ms(task.start_time)
    if local_date(start_ms) != window.day:
        return None
    end_ms = start_ms + resolve_duration_minutes(task.time_estimate) * MINUTE_MS
    return window.clip(start_ms, end_ms)


def event_interval(event: ExternalEvent, window: WorkingWindow) -> BusyInterval | None:
    """Clipped block a timed external event occupies on the window's day, if any."""
    if event.all_day:
        return None
    start_ms = to_epoch_ms(event.start)
    end_ms = to_epoch_ms(event.end)
    day_start, day_end = day_bounds(window.day)
    if not (start_ms < day_end and end_ms > day_start):
        return None
    return window.clip(start_ms, end_ms)


def extract_busy_intervals(
    day: date,
    tasks: Iterable[SchedulableTask],
    external_events: Iterable[ExternalEvent],
    exclude_task_id: str | None = None,
) -> list[BusyInterval]:
    """
    Collect the busy intervals for a day.

    A task contributes when it is not deleted, not done, is not the task
    being edited, and its start time falls on the day. All-day events are
    ignored. Every interval is clipped to the working window; empty
    intersections are dropped.

    Args:
        day: Target calendar day
        tasks: Tasks from the store
        external_events: Events from calendar subscriptions
        exclude_task_id: Task being scheduled (never conflicts with itself)

    Returns:
        Unsorted list of BusyInterval
    """
    window = working_window(day)
    intervals: list[BusyInterval] = []

    for task in tasks:
        if task.is_deleted or task.is_completed:
            continue
        if exclude_task_id is not None and task.id == exclude_task_id:
            continue
        interval = task_interval(task, window)
        if interval is not None:
            intervals.append(interval)

    for event in external_events:
        interval = event_interval(event, window)
        if interval is not None:
            intervals.append(interval)

    logger.debug("Extracted %d busy intervals for %s", len(intervals), day.isoformat())
    return intervals


def merge_intervals(intervals: Iterable[BusyInterval]) -> list[BusyInterval]:
    """
    Coalesce overlapping or touching intervals.

    Returns:
        Intervals sorted by start, pairwise disjoint (end_i <= start_i+1)
    """
    merged: list[BusyInterval] = []
    for interval in sorted(intervals, key=lambda i: (i.start_ms, i.end_ms)):
        if merged and interval.start_ms <= merged[-1].end_ms:
            last = merged[-1]
            merged[-1] = BusyInterval(last.start_ms, max(last.end_ms, interval.end_ms))
        else:
            merged.append(interval)
    return merged
