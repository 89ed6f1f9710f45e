import unittest

from reviewproctor.counters import EventCounters
from reviewproctor.state import InMemoryStateStore, NamespacedState


class EventCountersTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStateStore()
        self.counters = EventCounters(NamespacedState(self.store, "com.example.app"))

    def test_record_use_n_times(self):
        for expected in range(1, 8):
            self.assertEqual(self.counters.record_use(), expected)
        self.assertEqual(self.counters.uses, 7)
        self.assertEqual(self.store.get_int("com.example.app.uses_count"), 7)

    def test_record_significant_event(self):
        self.counters.record_significant_event()
        self.counters.record_significant_event()
        self.assertEqual(self.counters.significant_events, 2)
        self.assertEqual(self.counters.uses, 0)

    def test_absent_counters_read_as_zero(self):
        self.assertEqual(self.counters.uses, 0)
        self.assertEqual(self.counters.significant_events, 0)
        self.assertIsNone(self.store.get_int("com.example.app.events_count"))

    def test_bulk_increment(self):
        self.counters.record_use(5)
        self.assertEqual(self.counters.record_use(2), 7)

    def test_count_must_be_positive(self):
        with self.assertRaises(ValueError):
            self.counters.record_use(0)
        with self.assertRaises(ValueError):
            self.counters.record_significant_event(-1)


if __name__ == "__main__":
    unittest.main()
