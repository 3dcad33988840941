"""Tests for the dayplan CLI."""

import json
import logging

import pytest

from dayplan.cli import main


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def snapshot(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(
        json.dumps(
            {
                "tasks": [
                    {"id": "deep", "title": "Deep work", "status": "next",
                     "startTime": "2025-03-04T08:00:00", "timeEstimate": "2hr"},
                    {"id": "mail", "title": "Inbox zero", "status": "next", "timeEstimate": "30min"},
                ],
                "externalEvents": [
                    {"id": "e1", "sourceId": "work", "title": "Sync",
                     "start": "2025-03-04T10:00:00", "end": "2025-03-04T10:30:00"},
                ],
            }
        )
    )
    return str(path)


def run(capsys, *argv) -> tuple[int, dict]:
    code = main(list(argv))
    return code, json.loads(capsys.readouterr().out)


class TestSlotCommand:
    def test_finds_slot(self, snapshot, capsys):
        code, out = run(
            capsys, "slot", "--tasks", snapshot, "--date", "2025-03-04",
            "--task-id", "mail", "--now", "2025-03-04T07:00:00",
        )
        assert code == 0
        assert out["start"] == "2025-03-04T10:30:00"

    def test_unknown_task(self, snapshot, capsys):
        code, out = run(
            capsys, "slot", "--tasks", snapshot, "--date", "2025-03-04",
            "--task-id", "nope", "--now", "2025-03-04T07:00:00",
        )
        assert code == 1
        assert out["error"] == "task_not_found"


class TestCheckCommand:
    def test_free(self, snapshot, capsys):
        code, out = run(
            capsys, "check", "--tasks", snapshot, "--date", "2025-03-04",
            "--task-id", "mail", "--time", "11:00", "--now", "2025-03-04T07:00:00",
        )
        assert code == 0
        assert out["success"] is True

    def test_conflict(self, snapshot, capsys):
        code, out = run(
            capsys, "check", "--tasks", snapshot, "--date", "2025-03-04",
            "--task-id", "mail", "--time", "10:15", "--now", "2025-03-04T07:00:00",
        )
        assert code == 1
        assert out["error"] == "slot_conflict"


class TestEventsCommand:
    def test_no_subscriptions(self, capsys):
        code, out = run(capsys, "events", "--date", "2025-03-04")
        assert code == 0
        assert out == {"calendars": [], "events": 0, "failures": {}, "cancelled": False}


class TestBadInput:
    def test_missing_snapshot_file(self, tmp_path, capsys):
        code = main(
            ["slot", "--tasks", str(tmp_path / "missing.json"), "--date", "2025-03-04",
             "--task-id", "mail"]
        )
        assert code == 2
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "cannot read snapshot" in captured.err

    def test_snapshot_not_an_object(self, tmp_path, capsys):
        path = tmp_path / "list.json"
        path.write_text("[]")
        code = main(["slot", "--tasks", str(path), "--date", "2025-03-04", "--task-id", "mail"])
        assert code == 2
        assert "must be a JSON object" in capsys.readouterr().err

    def test_malformed_now_is_a_usage_error(self, snapshot, capsys):
        with pytest.raises(SystemExit) as exc:
            main(
                ["slot", "--tasks", snapshot, "--date", "2025-03-04",
                 "--task-id", "mail", "--now", "yesterday-ish"]
            )
        assert exc.value.code == 2
        assert "--now" in capsys.readouterr().err
