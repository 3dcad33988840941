"""
External calendar fetcher.

Fetches every enabled subscription concurrently, each with its own
timeout. Sources settle independently: a timeout, HTTP error or unparseable
body from one subscription is recorded in FetchResult.failures and the
other subscriptions' events are still returned. The event list is
assembled once, after every source has settled.

A CancellationToken lets the caller drop a batch whose range went stale
(e.g. the visible month changed) before the result is applied.
"""

import contextvars
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import date, datetime, time

import httpx

from dayplan import config
from dayplan.observability import QueryContext, get_query_id
from dayplan.scheduling.models import ExternalEvent

from .ics import looks_like_calendar, parse_ics
from .subscriptions import ExternalCalendarSubscription

logger = logging.getLogger(__name__)


class SourceFetchError(Exception):
    """A single subscription could not be loaded."""

    def __init__(self, source_id: str, message: str):
        super().__init__(f"{source_id}: {message}")
        self.source_id = source_id


class CancellationToken:
    """Set by the caller when a pending fetch result is no longer wanted."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class FetchResult:
    calendars: list[ExternalCalendarSubscription]
    events: list[ExternalEvent] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)
    cancelled: bool = False

    def to_dict(self) -> dict:
        return {
            "calendars": [c.id for c in self.calendars],
            "events": len(self.events),
            "failures": dict(self.failures),
            "cancelled": self.cancelled,
        }


def month_range(day: date) -> tuple[datetime, datetime]:
    """[first of month 00:00, first of next month 00:00) around a day."""
    first = day.replace(day=1)
    if first.month == 12:
        next_first = first.replace(year=first.year + 1, month=1)
    else:
        next_first = first.replace(month=first.month + 1)
    return datetime.combine(first, time()), datetime.combine(next_first, time())


def normalize_url(url: str) -> str:
    """webcal:// links are plain HTTPS feeds."""
    if url.lower().startswith("webcal://"):
        return "https://" + url[len("webcal://") :]
    return url


def fetch_text(
    url: str,
    timeout_seconds: float = config.FETCH_TIMEOUT_SECONDS,
    client: httpx.Client | None = None,
) -> str:
    """
    GET a subscription URL.

    Raises:
        httpx.HTTPError: transport failure, timeout, or non-2xx status
    """
    if client is None:
        with httpx.Client(follow_redirects=True) as own_client:
            return fetch_text(url, timeout_seconds, own_client)

    response = client.get(normalize_url(url), timeout=timeout_seconds)
    response.raise_for_status()
    return response.text


def fetch_and_parse(
    subscription: ExternalCalendarSubscription,
    range_start: datetime,
    range_end: datetime,
    timeout_seconds: float = config.FETCH_TIMEOUT_SECONDS,
    client: httpx.Client | None = None,
) -> list[ExternalEvent]:
    """
    Fetch one subscription and parse its events within a range.

    Raises:
        httpx.HTTPError: the request failed
        SourceFetchError: the body is not an iCalendar document
    """
    text = fetch_text(subscription.url, timeout_seconds, client)
    if not looks_like_calendar(text):
        raise SourceFetchError(subscription.id, "response is not an iCalendar document")
    events = parse_ics(text, subscription.id, range_start, range_end)
    logger.debug("Parsed %d events from %s", len(events), subscription.id)
    return events


def fetch_external_events(
    subscriptions: list[ExternalCalendarSubscription],
    range_start: datetime,
    range_end: datetime,
    cancel_token: CancellationToken | None = None,
    timeout_seconds: float = config.FETCH_TIMEOUT_SECONDS,
    max_workers: int = config.FETCH_MAX_WORKERS,
    client: httpx.Client | None = None,
) -> FetchResult:
    """
    Fetch all enabled subscriptions concurrently with partial-failure tolerance.

    Args:
        subscriptions: Configured subscriptions (disabled ones are skipped)
        range_start: Start of the visible range
        range_end: End of the visible range
        cancel_token: Checked before the result is returned
        timeout_seconds: Per-subscription timeout
        max_workers: Thread pool size
        client: Shared httpx client (one is created if omitted)

    Returns:
        FetchResult; cancelled batches carry no events
    """
    calendars = list(subscriptions)
    enabled = [s for s in calendars if s.enabled]
    if cancel_token is not None and cancel_token.cancelled:
        return FetchResult(calendars=calendars, cancelled=True)
    if not enabled:
        return FetchResult(calendars=calendars)

    with QueryContext(get_query_id()):
        owns_client = client is None
        if owns_client:
            client = httpx.Client(follow_redirects=True)

        events_by_source: dict[str, list[ExternalEvent]] = {}
        failures: dict[str, str] = {}
        executor = ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(enabled))))
        try:
            futures = {}
            for sub in enabled:
                # Workers log under the batch's query id
                ctx = contextvars.copy_context()
                future = executor.submit(
                    ctx.run,
                    fetch_and_parse,
                    sub,
                    range_start,
                    range_end,
                    timeout_seconds,
                    client,
                )
                futures[future] = sub

            for future in as_completed(futures):
                sub = futures[future]
                try:
                    events_by_source[sub.id] = future.result()
                except Exception as e:
                    failures[sub.id] = str(e) or type(e).__name__
                    logger.warning(
                        "Calendar %s failed to load: %s", sub.id, failures[sub.id],
                        extra={"source_id": sub.id},
                    )
        finally:
            executor.shutdown(wait=True)
            if owns_client:
                client.close()

        if cancel_token is not None and cancel_token.cancelled:
            logger.info("Discarding calendar fetch for stale range %s", range_start.date())
            return FetchResult(calendars=calendars, failures=failures, cancelled=True)

        events = [e for sub in enabled for e in events_by_source.get(sub.id, [])]
        logger.info(
            "Fetched %d events from %d/%d calendars",
            len(events),
            len(events_by_source),
            len(enabled),
        )
        return FetchResult(calendars=calendars, events=events, failures=failures)
