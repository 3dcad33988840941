"""Tests for task/event record parsing."""

from datetime import UTC, datetime

from dayplan.scheduling import (
    TaskStatus,
    TimeEstimate,
    find_free_slot,
    is_slot_free,
    load_context,
)
from dayplan.scheduling.models import to_local_naive
from dayplan.scheduling.records import (
    EventRecord,
    TaskRecord,
    parse_events,
    parse_tasks,
    safe_parse_datetime,
)
from tests.fixtures import at


class TestSafeParseDatetime:
    def test_naive_iso(self):
        assert safe_parse_datetime("2025-03-04T09:30:00") == at(9, 30)

    def test_utc_converted_to_local(self):
        expected = to_local_naive(datetime(2025, 3, 4, 9, 30, tzinfo=UTC))
        assert safe_parse_datetime("2025-03-04T09:30:00.000Z") == expected

    def test_date_only_uses_default_time(self):
        assert safe_parse_datetime("2025-03-04") == at(0)

    def test_garbage_is_none(self):
        assert safe_parse_datetime("not a date") is None
        assert safe_parse_datetime("") is None
        assert safe_parse_datetime(None) is None
        assert safe_parse_datetime(42) is None


class TestTaskRecord:
    def test_camel_case_fields(self):
        record = TaskRecord.model_validate(
            {
                "id": "t1",
                "title": "Plan sprint",
                "status": "in-progress",
                "startTime": "2025-03-04T10:00:00",
                "timeEstimate": "2hr",
                "tags": ["ignored"],
            }
        )
        task = record.to_task()
        assert task.id == "t1"
        assert task.status is TaskStatus.IN_PROGRESS
        assert task.start_time == at(10)
        assert task.time_estimate is TimeEstimate.HR_2

    def test_unknown_estimate_becomes_none(self):
        task = TaskRecord.model_validate({"id": "t", "timeEstimate": "2hr+"}).to_task()
        assert task.time_estimate is None

    def test_bad_start_time_becomes_none(self):
        task = TaskRecord.model_validate({"id": "t", "startTime": "tomorrow"}).to_task()
        assert task.start_time is None

    def test_date_only_due_is_end_of_day(self):
        task = TaskRecord.model_validate({"id": "t", "dueDate": "2025-03-04"}).to_task()
        assert task.due_date == at(23, 59)

    def test_date_only_review_is_nine(self):
        task = TaskRecord.model_validate({"id": "t", "reviewAt": "2025-03-04"}).to_task()
        assert task.review_at == at(9)

    def test_deleted_at(self):
        task = TaskRecord.model_validate(
            {"id": "t", "deletedAt": "2025-03-04T08:00:00"}
        ).to_task()
        assert task.is_deleted is True


class TestEventRecord:
    def test_to_event(self):
        event = EventRecord.model_validate(
            {
                "id": "e1",
                "sourceId": "work",
                "title": "Sync",
                "start": "2025-03-04T11:00:00",
                "end": "2025-03-04T11:30:00",
                "allDay": False,
            }
        ).to_event()
        assert event.source_id == "work"
        assert event.start == at(11)
        assert event.end == at(11, 30)
        assert event.all_day is False

    def test_missing_end_yields_none(self):
        event = EventRecord.model_validate({"id": "e", "start": "2025-03-04T11:00:00"})
        assert event.to_event() is None


class TestParsing:
    def test_invalid_task_records_skipped(self):
        tasks = parse_tasks(
            [
                {"id": "ok", "status": "next"},
                {"title": "no id"},
                {"id": "odd-status", "status": "exploded"},
            ]
        )
        assert [t.id for t in tasks] == ["ok", "odd-status"]
        assert tasks[1].status is TaskStatus.INBOX

    def test_events_without_times_dropped(self):
        events = parse_events(
            [
                {"id": "e1", "start": "2025-03-04T11:00:00", "end": "2025-03-04T12:00:00"},
                {"id": "e2", "start": "garbage", "end": "2025-03-04T12:00:00"},
            ]
        )
        assert [e.id for e in events] == ["e1"]

    def test_load_context(self):
        context = load_context(
            {
                "tasks": [{"id": "t", "startTime": "2025-03-04T09:00:00"}],
                "externalEvents": [
                    {"id": "e", "start": "2025-03-04T10:00:00", "end": "2025-03-04T11:00:00"}
                ],
            },
            now=at(7),
        )
        assert len(context.tasks) == 1
        assert len(context.external_events) == 1
        assert context.now == at(7)

    def test_load_context_empty_payload(self):
        context = load_context({}, now=at(7))
        assert context.tasks == []
        assert context.external_events == []

    def test_unknown_status_task_still_blocks_its_slot(self):
        context = load_context(
            {
                "tasks": [
                    {
                        "id": "legacy",
                        "status": "blocked-on-vendor",
                        "startTime": "2025-03-04T09:00:00",
                        "timeEstimate": "1hr",
                    }
                ]
            },
            now=at(7),
        )
        assert not is_slot_free(at(0).date(), at(9), 30, context)
        assert find_free_slot(at(0).date(), 120, context) == at(10)
