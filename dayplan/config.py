"""
Centralized configuration for dayplan.

Scheduling constants are fixed; fetch and logging settings can be
overridden via environment variables where marked.
"""

import os

# ============================================================
# Working window
# ============================================================

WORK_DAY_START_HOUR: int = 8
"""Earliest local hour a slot may start (08:00)."""

WORK_DAY_END_HOUR: int = 23
"""Local hour by which every slot must end (23:00)."""

SLOT_STEP_MINUTES: int = 5
"""Proposed start times are rounded up to this step."""

DEFAULT_DURATION_MINUTES: int = 30
"""Duration used when a task carries no time estimate."""

# ============================================================
# External calendars
# ============================================================

FETCH_TIMEOUT_SECONDS: float = float(os.environ.get("DAYPLAN_FETCH_TIMEOUT_SECONDS", "15"))
"""Per-subscription HTTP timeout."""

FETCH_MAX_WORKERS: int = int(os.environ.get("DAYPLAN_FETCH_MAX_WORKERS", "4"))
"""Upper bound on concurrent subscription fetches."""

# ============================================================
# Logging
# ============================================================

LOG_LEVEL: str = os.environ.get("DAYPLAN_LOG_LEVEL", "INFO")
"""Root log level for the CLI."""
