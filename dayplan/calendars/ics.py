"""
iCalendar subscription reader built on the ``ics`` library.

Only what the calendar view needs: each VEVENT's UID, SUMMARY, start,
end (or start + DURATION) and whether it is an all-day event. Recurrence
rules are not expanded. Timed values are converted to naive local time;
all-day events keep their calendar date.
"""

import logging
from datetime import datetime, time, timedelta

import ics

from dayplan.scheduling.models import ExternalEvent, to_local_naive

logger = logging.getLogger(__name__)


def _event_times(event: ics.Event) -> tuple[datetime, datetime]:
    if event.all_day:
        start = datetime.combine(event.begin.date(), time())
        end = datetime.combine(event.end.date(), time()) if event.end else start
        # single-day events may carry no (or an inclusive) DTEND
        if end <= start:
            end = start + timedelta(days=1)
        return start, end

    start = to_local_naive(event.begin.datetime)
    end = to_local_naive(event.end.datetime) if event.end else start
    return start, end


def to_external_event(event: ics.Event, source_id: str) -> ExternalEvent | None:
    """Convert a parsed VEVENT, or None when it has no usable time range."""
    if event.begin is None:
        return None
    try:
        start, end = _event_times(event)
    except (ValueError, OverflowError) as e:
        logger.debug("Skipping malformed event %s in %s: %s", event.uid, source_id, e)
        return None
    if end <= start:
        return None

    return ExternalEvent(
        id=f"{source_id}:{event.uid}:{start.isoformat()}",
        source_id=source_id,
        title=event.name or "",
        start=start,
        end=end,
        all_day=event.all_day,
    )


def parse_ics(
    text: str,
    source_id: str,
    range_start: datetime | None = None,
    range_end: datetime | None = None,
) -> list[ExternalEvent]:
    """
    Parse VEVENTs from iCalendar text.

    Args:
        text: Raw .ics body
        source_id: Subscription the events belong to
        range_start: Drop events ending at or before this time
        range_end: Drop events starting at or after this time

    Returns:
        Events sorted by start. Events without a usable time range are skipped.

    Raises:
        Whatever ``ics.Calendar`` raises for a document it cannot parse
    """
    if not text.strip():
        return []

    range_start = to_local_naive(range_start) if range_start else None
    range_end = to_local_naive(range_end) if range_end else None

    events = []
    for vevent in ics.Calendar(text).events:
        event = to_external_event(vevent, source_id)
        if event is None:
            continue
        if range_start and event.end <= range_start:
            continue
        if range_end and event.start >= range_end:
            continue
        events.append(event)

    events.sort(key=lambda e: (e.start, e.id))
    return events


def looks_like_calendar(text: str) -> bool:
    return "BEGIN:VCALENDAR" in text[:1024].upper()
