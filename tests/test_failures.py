import unittest
from unittest.mock import MagicMock

from airtime.exceptions import UnknownFailureTypeError
from airtime.failures import (
    FailureTracker, EMERGENCY_RESPONSE, RUNWAY_CLOSURE, CRITICAL_DELAY,
    FLIGHT_CANCELLATION, FINANCIAL_SHORTFALL,
)


class TestFailureTracker(unittest.TestCase):
    def setUp(self):
        self.logger = MagicMock()
        self.tracker = FailureTracker(self.logger)
        self.game_over = MagicMock()
        self.tracker.on_game_over(self.game_over)

    def test_default_thresholds(self):
        self.assertEqual(self.tracker.threshold(EMERGENCY_RESPONSE), 3)
        self.assertEqual(self.tracker.threshold(RUNWAY_CLOSURE), 5)
        self.assertEqual(self.tracker.threshold(CRITICAL_DELAY), 10)
        self.assertEqual(self.tracker.threshold(FLIGHT_CANCELLATION), 7)
        self.assertEqual(self.tracker.threshold(FINANCIAL_SHORTFALL), 3)

    def test_only_threshold_call_triggers(self):
        results = [self.tracker.record_failure(RUNWAY_CLOSURE, f"#{i}") for i in range(8)]
        self.assertEqual(results, [False, False, False, False, True, False, False, False])
        self.game_over.assert_called_once()
        kind, reason = self.game_over.call_args[0]
        self.assertEqual(kind, RUNWAY_CLOSURE)
        self.assertTrue(reason)
        self.assertEqual(self.tracker.count(RUNWAY_CLOSURE), 8)

    def test_game_over_state(self):
        self.assertFalse(self.tracker.is_game_over)
        for _ in range(3):
            self.tracker.record_failure(FINANCIAL_SHORTFALL)
        self.assertTrue(self.tracker.is_game_over)
        self.assertEqual(self.tracker.game_over_type, FINANCIAL_SHORTFALL)
        self.assertIsNotNone(self.tracker.game_over_reason)

    def test_second_category_does_not_retrigger(self):
        for _ in range(3):
            self.tracker.record_failure(EMERGENCY_RESPONSE)
        for _ in range(3):
            self.tracker.record_failure(FINANCIAL_SHORTFALL)
        self.game_over.assert_called_once()
        self.assertEqual(self.tracker.game_over_type, EMERGENCY_RESPONSE)

    def test_unknown_type(self):
        with self.assertRaises(UnknownFailureTypeError):
            self.tracker.record_failure("ALIENS")
        with self.assertRaises(UnknownFailureTypeError):
            self.tracker.count("ALIENS")

    def test_counts_is_a_copy(self):
        self.tracker.record_failure(CRITICAL_DELAY)
        counts = self.tracker.counts()
        counts[CRITICAL_DELAY] = 99
        self.assertEqual(self.tracker.count(CRITICAL_DELAY), 1)

    def test_percentage(self):
        self.tracker.record_failure(CRITICAL_DELAY)
        self.assertAlmostEqual(self.tracker.percentage(CRITICAL_DELAY), 10.0)

    def test_custom_thresholds(self):
        tracker = FailureTracker(self.logger, {RUNWAY_CLOSURE: 1})
        self.assertTrue(tracker.record_failure(RUNWAY_CLOSURE))
        with self.assertRaises(UnknownFailureTypeError):
            tracker.record_failure(CRITICAL_DELAY)


if __name__ == "__main__":
    unittest.main()
