"""Tests for the calendar subscription store."""

import yaml

from dayplan import paths
from dayplan.calendars import ExternalCalendarSubscription, SubscriptionStore


class TestSubscriptionStore:
    def test_missing_file_is_empty(self, tmp_path):
        assert SubscriptionStore(tmp_path / "none.yaml").load() == []

    def test_default_path_under_app_home(self, isolated_home):
        store = SubscriptionStore()
        assert store.config_path == paths.subscriptions_path()
        assert str(store.config_path).startswith(str(isolated_home))

    def test_round_trip(self, tmp_path):
        store = SubscriptionStore(tmp_path / "calendars.yaml")
        subs = [
            ExternalCalendarSubscription("work", "Work", "https://example.com/w.ics"),
            ExternalCalendarSubscription("home", "Home", "https://example.com/h.ics", False),
        ]
        store.save(subs)
        assert store.load() == subs
        assert [s.id for s in store.enabled()] == ["work"]

    def test_defaults_and_malformed_entries(self, tmp_path):
        path = tmp_path / "calendars.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "calendars": [
                        {"id": "work", "url": "https://example.com/w.ics"},
                        {"id": "no-url"},
                        "just a string",
                    ]
                }
            )
        )
        (only,) = SubscriptionStore(path).load()
        assert only.name == "work"
        assert only.enabled is True

    def test_invalid_yaml_is_empty(self, tmp_path):
        path = tmp_path / "calendars.yaml"
        path.write_text("calendars: [unclosed")
        assert SubscriptionStore(path).load() == []

    def test_unexpected_shape_is_empty(self, tmp_path):
        path = tmp_path / "calendars.yaml"
        path.write_text("- just\n- a list\n")
        assert SubscriptionStore(path).load() == []

    def test_example_config_parses(self):
        example = paths.project_root() / "config" / "calendars.example.yaml"
        subs = SubscriptionStore(example).load()
        assert [s.id for s in subs] == ["work", "holidays"]
        assert subs[1].enabled is False
