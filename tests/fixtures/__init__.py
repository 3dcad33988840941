"""
Test fixtures for deterministic scheduling tests.

This module provides:
- at: naive local datetimes on the fixture day
- make_task / make_event: engine inputs with sensible defaults
- make_context: a ScheduleContext with "now" pinned before the window
"""

from .schedule import FIXTURE_DAY, at, make_context, make_event, make_task

__all__ = ["FIXTURE_DAY", "at", "make_context", "make_event", "make_task"]
