"""
Record parsing for tasks and external events.

Records arrive from the task store and the calendar collaborator as
camelCase JSON with ISO-8601 strings. They are validated with Pydantic
and converted into the engine's immutable dataclasses. Dates that fail to
parse become None, so a bad timestamp removes one block from the calendar
instead of failing the whole query.
"""

import logging
from datetime import date, datetime, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .duration import TimeEstimate, parse_estimate
from .models import ExternalEvent, SchedulableTask, ScheduleContext, TaskStatus, to_local_naive

logger = logging.getLogger(__name__)

REVIEW_DEFAULT_TIME = time(9, 0)
DUE_DEFAULT_TIME = time(23, 59)


def has_time_component(value: str | None) -> bool:
    return bool(value) and ":" in value


def safe_parse_datetime(value: Any, default_time: time = time()) -> datetime | None:
    """
    Parse an ISO-8601 date or datetime into a naive local datetime.

    Date-only values are placed at default_time. Returns None for anything
    unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_local_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, default_time)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        if not has_time_component(text):
            return datetime.combine(date.fromisoformat(text[:10]), default_time)
        return to_local_naive(datetime.fromisoformat(text))
    except ValueError:
        logger.debug("Unparseable timestamp %r", value)
        return None


class TaskRecord(BaseModel):
    """A stored task as the sync layer hands it over."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    title: str = ""
    status: TaskStatus = TaskStatus.INBOX
    start_time: datetime | None = Field(default=None, alias="startTime")
    time_estimate: TimeEstimate | None = Field(default=None, alias="timeEstimate")
    due_date: datetime | None = Field(default=None, alias="dueDate")
    review_at: datetime | None = Field(default=None, alias="reviewAt")
    deleted_at: datetime | None = Field(default=None, alias="deletedAt")

    @field_validator("start_time", "deleted_at", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> datetime | None:
        return safe_parse_datetime(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def _parse_due(cls, value: Any) -> datetime | None:
        return safe_parse_datetime(value, DUE_DEFAULT_TIME)

    @field_validator("review_at", mode="before")
    @classmethod
    def _parse_review(cls, value: Any) -> datetime | None:
        return safe_parse_datetime(value, REVIEW_DEFAULT_TIME)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> TaskStatus:
        # unknown statuses still occupy the calendar
        try:
            return TaskStatus(value)
        except ValueError:
            logger.debug("Unknown task status %r, treating as inbox", value)
            return TaskStatus.INBOX

    @field_validator("time_estimate", mode="before")
    @classmethod
    def _parse_estimate(cls, value: Any) -> TimeEstimate | None:
        if isinstance(value, TimeEstimate):
            return value
        return parse_estimate(value if isinstance(value, str) else None)

    def to_task(self) -> SchedulableTask:
        return SchedulableTask(
            id=self.id,
            title=self.title,
            status=self.status,
            start_time=self.start_time,
            time_estimate=self.time_estimate,
            due_date=self.due_date,
            review_at=self.review_at,
            deleted_at=self.deleted_at,
        )


class EventRecord(BaseModel):
    """An event parsed from a calendar subscription."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    source_id: str = Field(default="", alias="sourceId")
    title: str = ""
    start: datetime | None = None
    end: datetime | None = None
    all_day: bool = Field(default=False, alias="allDay")

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> datetime | None:
        return safe_parse_datetime(value)

    def to_event(self) -> ExternalEvent | None:
        if self.start is None or self.end is None:
            return None
        return ExternalEvent(
            id=self.id,
            source_id=self.source_id,
            title=self.title,
            start=self.start,
            end=self.end,
            all_day=self.all_day,
        )


def _record_id(item: Any) -> str:
    return str(item.get("id", "?")) if isinstance(item, dict) else "?"


def parse_tasks(items: list[dict]) -> list[SchedulableTask]:
    """Validate task records, skipping (and logging) invalid ones."""
    tasks = []
    for item in items:
        try:
            tasks.append(TaskRecord.model_validate(item).to_task())
        except ValidationError as e:
            logger.warning("Skipping invalid task record %s: %s", _record_id(item), e)
    return tasks


def parse_events(items: list[dict]) -> list[ExternalEvent]:
    """Validate event records, dropping invalid ones and those without a time range."""
    events = []
    for item in items:
        try:
            event = EventRecord.model_validate(item).to_event()
        except ValidationError as e:
            logger.warning("Skipping invalid event record %s: %s", _record_id(item), e)
            continue
        if event is not None:
            events.append(event)
    return events


def load_context(payload: dict, now: datetime) -> ScheduleContext:
    """
    Build a ScheduleContext from a store snapshot.

    Args:
        payload: {"tasks": [...], "externalEvents": [...]}
        now: Current time for the query

    Returns:
        ScheduleContext
    """
    return ScheduleContext(
        tasks=parse_tasks(payload.get("tasks") or []),
        external_events=parse_events(payload.get("externalEvents") or []),
        now=now,
    )
