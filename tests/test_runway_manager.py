import random
import unittest
from unittest.mock import MagicMock

from airtime.exceptions import UnknownRunwayError, UnknownTierError
from airtime.objects.aircraft import Aircraft
from airtime.objects.runway import Runway, runway_for_tier, REASON_LANDING, REASON_REPAIR, STATUS_CLOSED
from airtime.runway_manager import RunwayManager, repair_cost


class TestRunway(unittest.TestCase):
    def test_tier_defaults(self):
        runway = runway_for_tier(2)
        self.assertEqual(runway.name, "02R")
        self.assertEqual(runway.length, 2000)
        self.assertEqual(runway.landing_duration, 4)

    def test_unknown_tier(self):
        with self.assertRaises(UnknownTierError):
            runway_for_tier(9)
        with self.assertRaises(UnknownTierError):
            Runway("X", 1000, tier=0)

    def test_occupancy_countdown_clears_everything(self):
        runway = runway_for_tier(1)
        runway.occupy(2, REASON_LANDING, "BA101")
        self.assertFalse(runway.update_status())
        self.assertTrue(runway.occupied)
        self.assertTrue(runway.update_status())
        self.assertFalse(runway.occupied)
        self.assertIsNone(runway.occupation_reason)
        self.assertIsNone(runway.occupied_by)
        self.assertEqual(runway.occupied_countdown, 0)

    def test_wear_clamped(self):
        runway = runway_for_tier(1)
        self.assertEqual(runway.add_wear(70), 70)
        self.assertEqual(runway.add_wear(70), 30)
        self.assertEqual(runway.wear, 100)
        self.assertEqual(runway.status, STATUS_CLOSED)


class TestRunwayManager(unittest.TestCase):
    def setUp(self):
        self.logger = MagicMock()
        self.rng = random.Random(7)
        self.manager = RunwayManager(self.logger, self.rng)
        self.short = self.manager.unlock_tier(1)
        self.long = self.manager.unlock_tier(2)
        self.large = Aircraft("L1", "LARGE")
        self.small = Aircraft("S1", "SMALL")

    def test_first_eligible_in_registration_order(self):
        self.assertIs(self.manager.available_runway(self.small), self.short)
        self.assertEqual(self.manager.available_runways(self.small), [self.short, self.long])
        self.assertEqual(self.manager.available_runways(self.large), [self.long])

    def test_can_land_false_when_all_short_or_occupied(self):
        self.long.occupy(1, REASON_LANDING)
        self.assertFalse(self.manager.can_land(self.large))
        self.manager.update_status()
        self.assertTrue(self.manager.can_land(self.large))

    def test_can_land_false_when_closed(self):
        self.long.add_wear(100)
        self.assertFalse(self.manager.can_land(self.large))
        self.assertTrue(self.manager.has_runway_for(self.large))

    def test_unknown_runway(self):
        with self.assertRaises(UnknownRunwayError):
            self.manager.get_runway("09Z")
        with self.assertRaises(UnknownRunwayError):
            self.manager.apply_wear("09Z", 0, 0)

    def test_lookup_is_case_insensitive(self):
        self.assertIs(self.manager.get_runway("02r"), self.long)

    def test_wear_formula(self):
        rng = MagicMock()
        rng.randint.return_value = 3
        manager = RunwayManager(self.logger, rng)
        runway = manager.unlock_tier(1)
        # 10 + 3 + (25 traffic + 2 impact * 5) // 10
        added = manager.apply_wear(runway.name, weather_impact=2, traffic_volume=25)
        self.assertEqual(added, 16)
        rng.randint.assert_called_with(0, 5)

    def test_weather_resistance_reduces_weather_term(self):
        rng = MagicMock()
        rng.randint.return_value = 0
        manager = RunwayManager(self.logger, rng)
        runway = manager.unlock_tier(1)
        self.assertEqual(manager.apply_wear(runway.name, 5, 5, weather_resistance=0.0), 13)
        runway.reset_wear()
        self.assertEqual(manager.apply_wear(runway.name, 5, 5, weather_resistance=1.0), 10)

    def test_wear_monotonic_and_bounded(self):
        previous = 0
        for _ in range(30):
            self.manager.apply_wear(self.short.name, 5, 40)
            self.assertGreaterEqual(self.short.wear, previous)
            self.assertLessEqual(self.short.wear, 100)
            previous = self.short.wear
        self.assertEqual(self.short.wear, 100)

    def test_closure_notified_once(self):
        closed = MagicMock()
        self.manager.on_closure(closed)
        for _ in range(20):
            self.manager.apply_wear(self.short.name, 0, 0)
        closed.assert_called_once_with(self.short)

    def test_repair_resets_and_occupies(self):
        self.short.add_wear(85)
        self.manager.repair(self.short.name)
        self.assertEqual(self.short.wear, 0)
        self.assertTrue(self.short.occupied)
        self.assertEqual(self.short.occupation_reason, REASON_REPAIR)
        self.assertEqual(self.short.occupied_countdown, 10)

    def test_repair_without_occupying(self):
        self.short.add_wear(40)
        self.manager.repair(self.short.name, occupy=False)
        self.assertEqual(self.short.wear, 0)
        self.assertTrue(self.short.is_available())

    def test_repair_cost(self):
        self.assertEqual(repair_cost(50), 750.0)
        self.assertAlmostEqual(repair_cost(80), 80 * 15 * 1.3)
        self.assertEqual(self.manager.repair_cost(0), 0)

    def test_handle_landing_uses_duration_factor(self):
        self.manager.reduce_landing_duration(0.5)
        self.manager.handle_landing(self.long.name, 0, 0, "BA101")
        self.assertEqual(self.long.occupied_countdown, 2)
        self.assertEqual(self.long.occupied_by, "BA101")
        self.assertEqual(self.manager.landing_count(self.long.name), 1)
        self.assertGreater(self.long.wear, 0)

    def test_landing_duration_minimum_one_tick(self):
        self.manager.reduce_landing_duration(0.01)
        self.manager.handle_landing(self.short.name, 0, 0)
        self.assertEqual(self.short.occupied_countdown, 1)

    def test_weather_resistance_capped(self):
        self.manager.add_weather_resistance(0.5)
        self.manager.add_weather_resistance(0.5)
        self.assertAlmostEqual(self.manager.weather_resistance, 0.9)
        with self.assertRaises(ValueError):
            self.manager.add_weather_resistance(0)

    def test_reduce_landing_duration_range(self):
        with self.assertRaises(ValueError):
            self.manager.reduce_landing_duration(1.5)
        with self.assertRaises(ValueError):
            self.manager.reduce_landing_duration(0)

    def test_perform_maintenance(self):
        treasury = MagicMock()
        treasury.balance = 5000.0
        treasury.deduct_funds.return_value = True
        self.short.add_wear(60)
        self.long.add_wear(10)
        repaired = self.manager.perform_maintenance(treasury)
        self.assertEqual(repaired, [self.short])
        treasury.deduct_funds.assert_called_once_with(900.0, "Maintenance for 01L")
        self.assertEqual(self.short.wear, 0)

    def test_maintenance_refused_keeps_wear(self):
        treasury = MagicMock()
        treasury.deduct_funds.return_value = False
        self.short.add_wear(60)
        self.assertFalse(self.manager.repair_with_funds(self.short.name, treasury))
        self.assertEqual(self.short.wear, 60)

    def test_maintenance_skips_what_it_cannot_afford(self):
        treasury = MagicMock()
        treasury.balance = 1000.0
        treasury.deduct_funds.return_value = True
        self.short.add_wear(60)
        self.long.add_wear(90)
        repaired = self.manager.perform_maintenance(treasury)
        self.assertEqual(repaired, [self.short])
        treasury.deduct_funds.assert_called_once_with(900.0, "Maintenance for 01L")
        self.assertEqual(self.long.wear, 90)


if __name__ == "__main__":
    unittest.main()
