"""
Task duration resolution from coarse time-estimate labels.

The label set is closed: every label maps to a fixed number of minutes,
and a task without an estimate is treated as a 30-minute block.
"""

from enum import Enum

from dayplan import config


class TimeEstimate(Enum):
    """Coarse time-estimate labels shown in the task editor."""

    MIN_5 = "5min"
    MIN_10 = "10min"
    MIN_15 = "15min"
    MIN_30 = "30min"
    HR_1 = "1hr"
    HR_2 = "2hr"
    HR_3 = "3hr"
    HR_4 = "4hr"
    HR_4_PLUS = "4hr+"


ESTIMATE_MINUTES: dict[TimeEstimate, int] = {
    TimeEstimate.MIN_5: 5,
    TimeEstimate.MIN_10: 10,
    TimeEstimate.MIN_15: 15,
    TimeEstimate.MIN_30: 30,
    TimeEstimate.HR_1: 60,
    TimeEstimate.HR_2: 120,
    TimeEstimate.HR_3: 180,
    TimeEstimate.HR_4: 240,
    # Open-ended; scheduled as a 4-hour block
    TimeEstimate.HR_4_PLUS: 240,
}


def parse_estimate(label: str | None) -> TimeEstimate | None:
    """Map a stored label to a TimeEstimate, or None if absent/unknown."""
    if not label:
        return None
    try:
        return TimeEstimate(label.strip())
    except ValueError:
        return None


def resolve_duration_minutes(estimate: TimeEstimate | None) -> int:
    """
    Resolve a time estimate to minutes.

    Args:
        estimate: Estimate label, or None when the task has no estimate

    Returns:
        Duration in minutes (30 when no estimate is set)
    """
    if estimate is None:
        return config.DEFAULT_DURATION_MINUTES
    return ESTIMATE_MINUTES[estimate]
