"""
Scheduling view-models.

Every object here is a transient, immutable value recomputed per query.
Inside the engine time is carried as integer epoch milliseconds; datetimes
only appear at the edges (task/event records in, proposed start out).
Naive datetimes are local wall-clock time.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum

from dayplan import config

from .duration import TimeEstimate

MINUTE_MS = 60_000


class TaskStatus(Enum):
    """Lifecycle status of a task."""

    INBOX = "inbox"
    TODO = "todo"
    NEXT = "next"
    IN_PROGRESS = "in-progress"
    WAITING = "waiting"
    SOMEDAY = "someday"
    DONE = "done"
    ARCHIVED = "archived"
    REFERENCE = "reference"


# =============================================================================
# TIME CONVERSION
# =============================================================================


def to_epoch_ms(value: datetime) -> int:
    """Epoch milliseconds for a datetime (naive values are local time)."""
    return round(value.timestamp() * 1000)


def from_epoch_ms(ms: int) -> datetime:
    """Naive local datetime for epoch milliseconds."""
    return datetime.fromtimestamp(ms / 1000)


def to_local_naive(value: datetime) -> datetime:
    """Drop tzinfo after converting an aware datetime to local wall-clock time."""
    if value.tzinfo is None:
        return value
    return from_epoch_ms(to_epoch_ms(value))


def local_date(ms: int) -> date:
    return from_epoch_ms(ms).date()


def as_day(value: date | datetime) -> date:
    """Calendar day of a date or (local) datetime."""
    if isinstance(value, datetime):
        return to_local_naive(value).date()
    return value


def local_ms(day: date, hour: int, minute: int = 0) -> int:
    """Epoch milliseconds for a local wall-clock time on a day."""
    return to_epoch_ms(datetime.combine(day, time(hour, minute)))


# =============================================================================
# INTERVALS
# =============================================================================


@dataclass(frozen=True)
class BusyInterval:
    """Half-open occupied range [start_ms, end_ms)."""

    start_ms: int
    end_ms: int

    def __post_init__(self):
        if self.start_ms >= self.end_ms:
            raise ValueError(
                f"BusyInterval requires start < end (got {self.start_ms} >= {self.end_ms})"
            )

    @property
    def duration_minutes(self) -> int:
        return (self.end_ms - self.start_ms) // MINUTE_MS

    def overlaps(self, other: "BusyInterval") -> bool:
        return self.start_ms < other.end_ms and other.start_ms < self.end_ms


@dataclass(frozen=True)
class WorkingWindow:
    """A day's scheduling bounds, 08:00-23:00 local time."""

    day: date
    start_ms: int
    end_ms: int

    @classmethod
    def for_day(cls, day: date) -> "WorkingWindow":
        return cls(
            day=day,
            start_ms=local_ms(day, config.WORK_DAY_START_HOUR),
            end_ms=local_ms(day, config.WORK_DAY_END_HOUR),
        )

    def contains(self, start_ms: int, end_ms: int) -> bool:
        return self.start_ms <= start_ms and end_ms <= self.end_ms

    def clip(self, start_ms: int, end_ms: int) -> BusyInterval | None:
        """Intersection with the window, or None when it is empty."""
        s = max(start_ms, self.start_ms)
        e = min(end_ms, self.end_ms)
        if e <= s:
            return None
        return BusyInterval(s, e)


def day_bounds(day: date) -> tuple[int, int]:
    """Calendar day [00:00, next 00:00) in epoch milliseconds."""
    start = to_epoch_ms(datetime.combine(day, time()))
    end = to_epoch_ms(datetime.combine(day + timedelta(days=1), time()))
    return start, end


# =============================================================================
# INPUTS
# =============================================================================


@dataclass(frozen=True)
class SchedulableTask:
    """The subset of a task the scheduler cares about."""

    id: str
    title: str = ""
    status: TaskStatus = TaskStatus.INBOX
    start_time: datetime | None = None
    time_estimate: TimeEstimate | None = None
    due_date: datetime | None = None
    review_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.DONE


@dataclass(frozen=True)
class ExternalEvent:
    """A read-only event from a calendar subscription."""

    id: str
    source_id: str
    start: datetime
    end: datetime
    title: str = ""
    all_day: bool = False


@dataclass(frozen=True)
class ScheduleContext:
    """Everything a scheduling query reads. `now` is never taken from the clock."""

    tasks: list[SchedulableTask]
    external_events: list[ExternalEvent]
    now: datetime

    def find_task(self, task_id: str) -> SchedulableTask | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None
