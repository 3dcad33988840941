"""
External calendar subscriptions.

Subscriptions are user configuration, kept in calendars.yaml:

    calendars:
      - id: work
        name: Work
        url: https://example.com/work.ics
        enabled: true
"""

import logging
from dataclasses import asdict, dataclass
from pathlib import Path

import yaml

from dayplan import paths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExternalCalendarSubscription:
    id: str
    name: str
    url: str
    enabled: bool = True


class SubscriptionStore:
    """Loads and saves the subscription list."""

    def __init__(self, config_path: Path | None = None):
        self.config_path = config_path or paths.subscriptions_path()

    def load(self) -> list[ExternalCalendarSubscription]:
        """Load subscriptions, returning an empty list when missing or unreadable."""
        if not self.config_path.exists():
            logger.warning("Calendar subscriptions not found at %s", self.config_path)
            return []
        try:
            with open(self.config_path) as f:
                data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, OSError) as exc:
            logger.error("Failed to load calendar subscriptions: %s", exc)
            return []

        entries = data.get("calendars") if isinstance(data, dict) else None
        subscriptions = []
        for entry in entries or []:
            if not isinstance(entry, dict) or not entry.get("id") or not entry.get("url"):
                logger.warning("Skipping malformed calendar subscription: %r", entry)
                continue
            subscriptions.append(
                ExternalCalendarSubscription(
                    id=str(entry["id"]),
                    name=str(entry.get("name") or entry["id"]),
                    url=str(entry["url"]),
                    enabled=bool(entry.get("enabled", True)),
                )
            )
        return subscriptions

    def save(self, subscriptions: list[ExternalCalendarSubscription]) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w") as f:
            yaml.safe_dump(
                {"calendars": [asdict(s) for s in subscriptions]},
                f,
                default_flow_style=False,
                sort_keys=False,
            )

    def enabled(self) -> list[ExternalCalendarSubscription]:
        return [s for s in self.load() if s.enabled]
