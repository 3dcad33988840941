"""
Day scheduling engine.

Two questions, both answered against the same busy set:
- find_free_slot: earliest start (first fit) for a block of a given length
- is_slot_free: whether a caller-chosen start is inside working hours and
  clear of every task and timed external event

Both are pure given (day, context). Negative answers are values (None /
False), never exceptions; only malformed arguments raise ValueError.
"""

import logging
from datetime import date, datetime

from dayplan import config

from .intervals import extract_busy_intervals, merge_intervals, overlaps, working_window
from .models import MINUTE_MS, ScheduleContext, as_day, from_epoch_ms, local_date, to_epoch_ms

logger = logging.getLogger(__name__)


def _check_duration(duration_minutes: int) -> None:
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise ValueError(f"duration_minutes must be an int, got {duration_minutes!r}")
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be positive, got {duration_minutes}")


def ceil_to_minutes(ms: int, step_minutes: int) -> int:
    """Round epoch milliseconds up to the next multiple of step_minutes."""
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be positive, got {step_minutes}")
    step_ms = step_minutes * MINUTE_MS
    return -(-ms // step_ms) * step_ms


def earliest_start_ms(day: date, now: datetime) -> int:
    """Window start, or now (if the day is today), rounded up to the slot step."""
    window = working_window(day)
    now_ms = to_epoch_ms(now)
    start_ms = window.start_ms
    if local_date(now_ms) == day:
        start_ms = max(start_ms, now_ms)
    return ceil_to_minutes(start_ms, config.SLOT_STEP_MINUTES)


def find_free_slot(
    day: date | datetime,
    duration_minutes: int,
    context: ScheduleContext,
    exclude_task_id: str | None = None,
) -> datetime | None:
    """
    Find the earliest free start for a block on a day.

    Args:
        day: Target day (a datetime is reduced to its local date)
        duration_minutes: Block length, must be positive
        context: Tasks, external events and the current time
        exclude_task_id: Task being scheduled, ignored as an obstacle

    Returns:
        Naive local datetime of the first feasible start, or None when the
        working window has no gap long enough
    """
    _check_duration(duration_minutes)
    day = as_day(day)
    window = working_window(day)
    duration_ms = duration_minutes * MINUTE_MS

    busy = merge_intervals(
        extract_busy_intervals(day, context.tasks, context.external_events, exclude_task_id)
    )

    cursor = earliest_start_ms(day, context.now)
    for interval in busy:
        if cursor + duration_ms <= interval.start_ms:
            break
        cursor = max(cursor, interval.end_ms)

    if cursor + duration_ms > window.end_ms:
        logger.debug(
            "No %d-minute slot on %s (%d busy intervals)",
            duration_minutes,
            day.isoformat(),
            len(busy),
        )
        return None

    slot = from_epoch_ms(cursor)
    logger.debug("Free %d-minute slot on %s at %s", duration_minutes, day.isoformat(), slot)
    return slot


def is_slot_free(
    day: date | datetime,
    candidate_start: datetime,
    duration_minutes: int,
    context: ScheduleContext,
    exclude_task_id: str | None = None,
) -> bool:
    """
    Check a caller-chosen start time against working hours and the busy set.

    Busy intervals are tested one by one; no merge is needed for a single
    yes/no answer.

    Returns:
        False if the block leaves the working window or overlaps anything
    """
    _check_duration(duration_minutes)
    day = as_day(day)
    window = working_window(day)

    start_ms = to_epoch_ms(candidate_start)
    end_ms = start_ms + duration_minutes * MINUTE_MS
    if not window.contains(start_ms, end_ms):
        return False

    for interval in extract_busy_intervals(
        day, context.tasks, context.external_events, exclude_task_id
    ):
        if overlaps(start_ms, end_ms, interval.start_ms, interval.end_ms):
            logger.debug("Candidate %s overlaps busy interval %s", candidate_start, interval)
            return False
    return True
