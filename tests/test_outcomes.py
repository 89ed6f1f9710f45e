import unittest
from datetime import datetime, timedelta, timezone

from reviewproctor.outcomes import OutcomeRecorder
from reviewproctor.presentation import UserResponse
from reviewproctor.state import InMemoryStateStore, NamespacedState


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class OutcomeRecorderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock(datetime(2024, 6, 1, tzinfo=timezone.utc))
        self.state = NamespacedState(InMemoryStateStore(), "com.example.app")
        self.recorder = OutcomeRecorder(self.state, self.clock)

    def test_install_date_written_once(self):
        self.assertTrue(self.recorder.record_install())
        first = self.state.get_timestamp("install_date")
        self.clock.now += timedelta(days=3)
        self.assertFalse(self.recorder.record_install())
        self.assertEqual(self.state.get_timestamp("install_date"), first)

    def test_accept_resets_usage_conditions(self):
        self.state.set_int("uses_count", 12)
        self.state.set_int("events_count", 40)
        self.state.set_timestamp("refusal_date", self.clock.now - timedelta(days=100))
        self.state.set_timestamp("reminder_date", self.clock.now - timedelta(days=2))
        self.state.set_timestamp("install_date", self.clock.now - timedelta(days=200))

        self.recorder.handle(UserResponse.ACCEPT)

        self.assertEqual(self.state.get_int("uses_count"), 0)
        self.assertEqual(self.state.get_int("events_count"), 0)
        self.assertIsNone(self.state.get_timestamp("refusal_date"))
        self.assertIsNone(self.state.get_timestamp("reminder_date"))
        self.assertEqual(self.state.get_timestamp("last_review_date"), self.clock.now)
        self.assertEqual(
            self.state.get_timestamp("install_date"), self.clock.now - timedelta(days=200)
        )

    def test_decline_records_refusal(self):
        self.recorder.handle(UserResponse.DECLINE)
        self.assertEqual(self.state.get_timestamp("refusal_date"), self.clock.now)
        self.clock.now += timedelta(days=1)
        self.recorder.decline()
        self.assertEqual(self.state.get_timestamp("refusal_date"), self.clock.now)

    def test_defer_records_reminder_without_touching_counters(self):
        self.state.set_int("uses_count", 5)
        self.recorder.handle(UserResponse.DEFER)
        self.assertEqual(self.state.get_timestamp("reminder_date"), self.clock.now)
        self.assertEqual(self.state.get_int("uses_count"), 5)
        self.assertIsNone(self.state.get_timestamp("refusal_date"))

    def test_review_shown(self):
        self.recorder.record_review_shown()
        self.assertEqual(self.state.get_timestamp("last_review_date"), self.clock.now)


if __name__ == "__main__":
    unittest.main()
