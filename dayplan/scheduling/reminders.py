"""
Upcoming schedule lookups used to drive local notifications.
"""

from datetime import datetime

from .models import SchedulableTask, TaskStatus, to_epoch_ms

# Statuses that never raise a reminder
_SILENT_STATUSES = frozenset((TaskStatus.DONE, TaskStatus.ARCHIVED, TaskStatus.REFERENCE))


def next_scheduled_at(
    task: SchedulableTask, now: datetime, include_review_at: bool = False
) -> datetime | None:
    """Earliest of start/due (and optionally review) strictly after now."""
    if task.is_deleted or task.status in _SILENT_STATUSES:
        return None

    now_ms = to_epoch_ms(now)
    candidates = [task.start_time, task.due_date]
    if include_review_at:
        candidates.append(task.review_at)

    upcoming = [c for c in candidates if c is not None and to_epoch_ms(c) > now_ms]
    if not upcoming:
        return None
    return min(upcoming, key=to_epoch_ms)


def upcoming_schedules(
    tasks: list[SchedulableTask], now: datetime, include_review_at: bool = False
) -> list[tuple[SchedulableTask, datetime]]:
    """(task, next time) pairs for tasks with something ahead, soonest first."""
    pairs = []
    for task in tasks:
        at = next_scheduled_at(task, now, include_review_at)
        if at is not None:
            pairs.append((task, at))
    pairs.sort(key=lambda pair: to_epoch_ms(pair[1]))
    return pairs


def is_due_within_minutes(
    task: SchedulableTask, minutes: int, now: datetime, include_review_at: bool = False
) -> bool:
    at = next_scheduled_at(task, now, include_review_at)
    if at is None:
        return False
    diff_ms = to_epoch_ms(at) - to_epoch_ms(now)
    return 0 <= diff_ms <= minutes * 60_000
