"""
Scheduler - Turn engine verdicts into schedule results for a task.

Used by the calendar view when a task is dropped onto a day (auto-pick the
first free slot) or when its start time is typed in by hand (validate the
chosen time). The scheduler never writes: the caller persists
`result.start` onto the task.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum

from .duration import resolve_duration_minutes
from .engine import find_free_slot, is_slot_free
from .models import ScheduleContext, as_day

logger = logging.getLogger(__name__)


class ScheduleError(Enum):
    """Why a schedule request produced no start time."""

    NO_FREE_SLOT = "no_free_slot"
    SLOT_CONFLICT = "slot_conflict"
    TASK_NOT_FOUND = "task_not_found"
    INVALID_TIME = "invalid_time"


ERROR_MESSAGES = {
    ScheduleError.NO_FREE_SLOT: "No free time available",
    ScheduleError.SLOT_CONFLICT: "Time overlaps existing schedule",
    ScheduleError.TASK_NOT_FOUND: "Task not found",
    ScheduleError.INVALID_TIME: "Invalid time, expected HH:MM",
}


@dataclass
class ScheduleResult:
    task_id: str
    task_title: str
    start: datetime | None
    success: bool
    message: str
    error: ScheduleError | None = None

    @classmethod
    def failed(cls, task_id: str, task_title: str, error: ScheduleError) -> "ScheduleResult":
        return cls(
            task_id=task_id,
            task_title=task_title,
            start=None,
            success=False,
            message=ERROR_MESSAGES[error],
            error=error,
        )

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "task_title": self.task_title,
            "start": self.start.isoformat() if self.start else None,
            "success": self.success,
            "message": self.message,
            "error": self.error.value if self.error else None,
        }


def parse_time_of_day(
    value: str | None, fallback: tuple[int, int] | None
) -> tuple[int, int] | None:
    """
    Parse "HH:MM" into (hour, minute).

    Returns fallback when the value is missing, malformed, or out of range.
    """
    if not value:
        return fallback
    parts = value.strip().split(":")
    if len(parts) != 2:
        return fallback
    try:
        hour = int(parts[0])
        minute = int(parts[1])
    except ValueError:
        return fallback
    if not 0 <= hour <= 23 or not 0 <= minute <= 59:
        return fallback
    return hour, minute


class Scheduler:
    """
    Schedules tasks from a ScheduleContext onto a calendar day.

    A task never conflicts with its own existing block: every query
    excludes the task being scheduled.
    """

    def __init__(self, context: ScheduleContext):
        self.context = context

    def schedule_task(self, task_id: str, day: date | datetime) -> ScheduleResult:
        """
        Propose the first free slot on a day for a task.

        Args:
            task_id: Task to schedule
            day: Target day

        Returns:
            ScheduleResult with the proposed start, or NO_FREE_SLOT
        """
        task = self.context.find_task(task_id)
        if task is None:
            return ScheduleResult.failed(task_id, "", ScheduleError.TASK_NOT_FOUND)

        title = task.title[:50]
        duration = resolve_duration_minutes(task.time_estimate)
        slot = find_free_slot(day, duration, self.context, exclude_task_id=task.id)
        if slot is None:
            logger.info("No free slot for task %s on %s", task.id, as_day(day).isoformat())
            return ScheduleResult.failed(task.id, title, ScheduleError.NO_FREE_SLOT)

        return ScheduleResult(
            task_id=task.id,
            task_title=title,
            start=slot,
            success=True,
            message=f"Scheduled at {slot.strftime('%H:%M')}",
        )

    def reschedule_task(self, task_id: str, day: date | datetime, time_text: str) -> ScheduleResult:
        """
        Validate a manually entered start time for a task.

        Args:
            task_id: Task being edited
            day: Day the task is shown on
            time_text: "HH:MM" as typed by the user

        Returns:
            ScheduleResult with the accepted start, or INVALID_TIME / SLOT_CONFLICT
        """
        task = self.context.find_task(task_id)
        if task is None:
            return ScheduleResult.failed(task_id, "", ScheduleError.TASK_NOT_FOUND)

        title = task.title[:50]
        parsed = parse_time_of_day(time_text, None)
        if parsed is None:
            return ScheduleResult.failed(task.id, title, ScheduleError.INVALID_TIME)

        day = as_day(day)
        candidate = datetime.combine(day, time(*parsed))
        duration = resolve_duration_minutes(task.time_estimate)
        if not is_slot_free(day, candidate, duration, self.context, exclude_task_id=task.id):
            logger.info("Rejected %s for task %s: overlap or outside hours", candidate, task.id)
            return ScheduleResult.failed(task.id, title, ScheduleError.SLOT_CONFLICT)

        return ScheduleResult(
            task_id=task.id,
            task_title=title,
            start=candidate,
            success=True,
            message=f"Moved to {candidate.strftime('%H:%M')}",
        )
