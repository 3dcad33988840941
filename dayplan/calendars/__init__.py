"""
External calendar subscriptions: configuration, ICS parsing and fetching.

Events produced here are read-only inputs to the scheduling engine.
"""

from .fetcher import (
    CancellationToken,
    FetchResult,
    SourceFetchError,
    fetch_and_parse,
    fetch_external_events,
    fetch_text,
    month_range,
)
from .ics import parse_ics
from .subscriptions import ExternalCalendarSubscription, SubscriptionStore

__all__ = [
    "CancellationToken",
    "ExternalCalendarSubscription",
    "FetchResult",
    "SourceFetchError",
    "SubscriptionStore",
    "fetch_and_parse",
    "fetch_external_events",
    "fetch_text",
    "month_range",
    "parse_ics",
]
