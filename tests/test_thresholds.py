import unittest

from reviewproctor.config import ThresholdDefaults
from reviewproctor.errors import UnknownThresholdError
from reviewproctor.state import InMemoryStateStore, NamespacedState
from reviewproctor.thresholds import Threshold, ThresholdSettings


class ThresholdSettingsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStateStore()
        self.settings = ThresholdSettings(NamespacedState(self.store, "com.example.app"))

    def test_defaults_when_never_set(self):
        self.assertEqual(
            self.settings.as_dict(),
            {
                "significant_events": 30,
                "uses": 10,
                "days_since_install": 10,
                "days_since_last_review": 30,
                "reminder_days": 1,
            },
        )

    def test_returns_last_value_set(self):
        for threshold in Threshold:
            self.settings.set(threshold, 3)
            self.settings.set(threshold, 7)
            self.assertEqual(self.settings.get(threshold), 7)

    def test_zero_and_negative_values_are_kept(self):
        self.settings.set("uses", 0)
        self.settings.set(Threshold.REMINDER_DAYS, -2)
        self.assertEqual(self.settings.get(Threshold.USES), 0)
        self.assertEqual(self.settings.get("reminder_days"), -2)

    def test_none_leaves_previous_value(self):
        self.settings.set(Threshold.USES, 4)
        self.settings.set(Threshold.USES, None)
        self.assertEqual(self.settings.get(Threshold.USES), 4)
        self.settings.set(Threshold.SIGNIFICANT_EVENTS, None)
        self.assertEqual(self.settings.get(Threshold.SIGNIFICANT_EVENTS), 30)

    def test_persisted_under_namespace(self):
        self.settings.set(Threshold.DAYS_SINCE_INSTALL, 2)
        self.assertEqual(self.store.get_int("com.example.app.threshold.days_since_install"), 2)

    def test_unknown_name_raises(self):
        with self.assertRaises(UnknownThresholdError):
            self.settings.get("launches")
        with self.assertRaises(ValueError):
            self.settings.set("launches", 1)

    def test_non_integer_value_raises(self):
        with self.assertRaises(TypeError):
            self.settings.set(Threshold.USES, "5")
        with self.assertRaises(TypeError):
            self.settings.set(Threshold.USES, True)

    def test_configured_defaults_replace_compiled_ones(self):
        settings = ThresholdSettings(
            NamespacedState(self.store, "com.example.other"), ThresholdDefaults(uses=2)
        )
        self.assertEqual(settings.get(Threshold.USES), 2)
        self.assertEqual(settings.get(Threshold.SIGNIFICANT_EVENTS), 30)

    def test_name_parsing_accepts_dashes(self):
        self.assertIs(Threshold.parse("days-since-install"), Threshold.DAYS_SINCE_INSTALL)


if __name__ == "__main__":
    unittest.main()
