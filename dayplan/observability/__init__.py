"""
Observability module: structured logging and query IDs.

Usage:
    from dayplan.observability import get_logger, QueryContext

    logger = get_logger(__name__)
    logger.info("Fetching calendars", extra={"count": 3})

    with QueryContext() as ctx:
        logger.info("Batch started")
"""

from .context import QueryContext, get_query_id
from .logging import HumanFormatter, JSONFormatter, configure_logging, get_logger

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "JSONFormatter",
    "HumanFormatter",
    # Context
    "QueryContext",
    "get_query_id",
]
