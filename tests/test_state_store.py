import json
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest import mock

from reviewproctor.counters import EventCounters
from reviewproctor.errors import StateStoreError
from reviewproctor.state import InMemoryStateStore, JsonFileStateStore, NamespacedState


class InMemoryStateStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStateStore()

    def test_absent_is_distinct_from_zero_and_empty(self):
        self.assertIsNone(self.store.get_int("app.uses_count"))
        self.assertIsNone(self.store.get_string("app.app_id"))
        self.store.set_int("app.uses_count", 0)
        self.store.set_string("app.app_id", "")
        self.assertEqual(self.store.get_int("app.uses_count"), 0)
        self.assertEqual(self.store.get_string("app.app_id"), "")

    def test_typed_getters_ignore_other_types(self):
        self.store.set_string("app.uses_count", "12")
        self.assertIsNone(self.store.get_int("app.uses_count"))
        self.assertIsNone(self.store.get_timestamp("app.uses_count"))

    def test_naive_timestamps_are_taken_as_utc(self):
        self.store.set_timestamp("app.install_date", datetime(2024, 3, 1, 12, 0))
        self.assertEqual(
            self.store.get_timestamp("app.install_date"),
            datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc),
        )

    def test_remove(self):
        self.store.set_int("app.uses_count", 3)
        self.store.remove("app.uses_count")
        self.store.remove("app.never_written")
        self.assertIsNone(self.store.get_int("app.uses_count"))
        self.assertEqual(list(self.store.keys()), [])


class NamespacedStateTests(unittest.TestCase):
    def test_namespaces_do_not_collide(self):
        store = InMemoryStateStore()
        first = EventCounters(NamespacedState(store, "com.example.first"))
        second = EventCounters(NamespacedState(store, "com.example.second"))
        for _ in range(3):
            first.record_use()
        second.record_use()
        self.assertEqual(first.uses, 3)
        self.assertEqual(second.uses, 1)
        self.assertEqual(
            list(store.keys()), ["com.example.first.uses_count", "com.example.second.uses_count"]
        )

    def test_empty_namespace_rejected(self):
        with self.assertRaises(ValueError):
            NamespacedState(InMemoryStateStore(), "")


class JsonFileStateStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "nested" / "state.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_values_survive_reload(self):
        stamp = datetime(2024, 5, 1, 8, 30, tzinfo=timezone(timedelta(hours=2)))
        store = JsonFileStateStore(self.path)
        store.set_int("app.uses_count", 4)
        store.set_string("app.app_id", "123456")
        store.set_timestamp("app.install_date", stamp)

        reloaded = JsonFileStateStore(self.path)
        self.assertEqual(reloaded.get_int("app.uses_count"), 4)
        self.assertEqual(reloaded.get_string("app.app_id"), "123456")
        self.assertEqual(reloaded.get_timestamp("app.install_date"), stamp)
        self.assertEqual(reloaded.get_timestamp("app.install_date").tzinfo, timezone.utc)

    def test_file_layout(self):
        store = JsonFileStateStore(self.path)
        store.set_timestamp("app.refusal_date", datetime(2024, 1, 2, tzinfo=timezone.utc))
        store.set_int("app.events_count", 2)
        with self.path.open(encoding="utf-8") as handle:
            raw = json.load(handle)
        self.assertEqual(
            raw,
            {
                "app.events_count": 2,
                "app.refusal_date": {"$timestamp": "2024-01-02T00:00:00+00:00"},
            },
        )

    def test_remove_is_persisted(self):
        store = JsonFileStateStore(self.path)
        store.set_timestamp("app.reminder_date", datetime(2024, 1, 2, tzinfo=timezone.utc))
        store.remove("app.reminder_date")
        self.assertIsNone(JsonFileStateStore(self.path).get_timestamp("app.reminder_date"))

    def test_failed_write_keeps_previous_value(self):
        store = JsonFileStateStore(self.path)
        store.set_int("app.uses_count", 1)
        with mock.patch("reviewproctor.state.store.os.replace", side_effect=OSError("disk full")):
            with self.assertRaises(StateStoreError):
                store.set_int("app.uses_count", 2)
            with self.assertRaises(StateStoreError):
                store.set_string("app.app_id", "123456")
        self.assertEqual(store.get_int("app.uses_count"), 1)
        self.assertNotIn("app.app_id", list(store.keys()))
        self.assertEqual(JsonFileStateStore(self.path).get_int("app.uses_count"), 1)
        self.assertEqual(list(self.path.parent.glob(".state-*")), [])

    def test_failed_remove_keeps_value(self):
        stamp = datetime(2024, 1, 2, tzinfo=timezone.utc)
        store = JsonFileStateStore(self.path)
        store.set_timestamp("app.reminder_date", stamp)
        with mock.patch("reviewproctor.state.store.os.replace", side_effect=OSError("disk full")):
            with self.assertRaises(StateStoreError):
                store.remove("app.reminder_date")
        self.assertEqual(store.get_timestamp("app.reminder_date"), stamp)
        self.assertEqual(JsonFileStateStore(self.path).get_timestamp("app.reminder_date"), stamp)

    def test_missing_file_starts_empty(self):
        store = JsonFileStateStore(self.path)
        self.assertEqual(list(store.keys()), [])
        self.assertFalse(self.path.exists())

    def test_invalid_json_raises(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(StateStoreError):
            JsonFileStateStore(self.path)

    def test_non_object_root_raises(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("[1, 2]", encoding="utf-8")
        with self.assertRaises(StateStoreError):
            JsonFileStateStore(self.path)

    def test_malformed_timestamp_is_treated_as_absent(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({"app.install_date": {"$timestamp": "yesterday"}}), encoding="utf-8")
        with self.assertLogs("reviewproctor.state.store", level="WARNING"):
            store = JsonFileStateStore(self.path)
        self.assertIsNone(store.get_timestamp("app.install_date"))


if __name__ == "__main__":
    unittest.main()
