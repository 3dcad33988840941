"""
dayplan CLI - schedule a task from a store snapshot.

    python -m dayplan slot  --tasks tasks.json --date 2025-03-04 --task-id t1
    python -m dayplan check --tasks tasks.json --date 2025-03-04 --task-id t1 --time 10:30
    python -m dayplan events --date 2025-03-04
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime

from dayplan import config
from dayplan.calendars import SubscriptionStore, fetch_external_events, month_range
from dayplan.observability import QueryContext, configure_logging
from dayplan.scheduling import ScheduleContext, Scheduler, load_context

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """The task snapshot file is missing or not a JSON object."""


def _load_snapshot(path: str) -> dict:
    try:
        with open(path) as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SnapshotError(f"cannot read snapshot {path}: {e}") from e
    if not isinstance(payload, dict):
        raise SnapshotError(f"snapshot {path} must be a JSON object")
    return payload


def _build_context(args) -> ScheduleContext:
    now = args.now or datetime.now()
    context = load_context(_load_snapshot(args.tasks), now)
    if not args.fetch:
        return context

    range_start, range_end = month_range(args.date)
    fetched = fetch_external_events(SubscriptionStore().load(), range_start, range_end)
    for source_id, error in fetched.failures.items():
        print(f"  {source_id} unavailable: {error}", file=sys.stderr)
    return ScheduleContext(
        tasks=context.tasks,
        external_events=[*context.external_events, *fetched.events],
        now=context.now,
    )


def cmd_slot(args) -> int:
    result = Scheduler(_build_context(args)).schedule_task(args.task_id, args.date)
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.success else 1


def cmd_check(args) -> int:
    result = Scheduler(_build_context(args)).reschedule_task(args.task_id, args.date, args.time)
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.success else 1


def cmd_events(args) -> int:
    range_start, range_end = month_range(args.date)
    result = fetch_external_events(SubscriptionStore().load(), range_start, range_end)
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if not result.failures else 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="dayplan", description="Day scheduling engine")
    p.add_argument("--log-level", default=config.LOG_LEVEL)
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_context_args(sp):
        sp.add_argument("--tasks", required=True, help="JSON snapshot with tasks/externalEvents")
        sp.add_argument("--date", required=True, type=date.fromisoformat)
        sp.add_argument("--task-id", required=True)
        sp.add_argument(
            "--now", type=datetime.fromisoformat, help="Override current time (ISO-8601)"
        )
        sp.add_argument("--fetch", action="store_true", help="Include subscribed calendars")

    slot = sub.add_parser("slot", help="Find the first free slot for a task")
    add_context_args(slot)
    slot.set_defaults(func=cmd_slot)

    check = sub.add_parser("check", help="Validate a manually chosen start time")
    add_context_args(check)
    check.add_argument("--time", required=True, help="HH:MM")
    check.set_defaults(func=cmd_check)

    events = sub.add_parser("events", help="Fetch subscribed calendars for a month")
    events.add_argument("--date", required=True, type=date.fromisoformat)
    events.set_defaults(func=cmd_events)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    with QueryContext():
        try:
            return args.func(args)
        except SnapshotError as e:
            print(f"dayplan: error: {e}", file=sys.stderr)
            return 2


if __name__ == "__main__":
    sys.exit(main())
