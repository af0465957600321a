import unittest

from airtime.exceptions import InvalidModifierError, UnknownFlightTypeError
from airtime.modifiers import ModifierManager
from airtime.objects.aircraft import Aircraft
from airtime.objects.flight import Flight


def make_flight(flight_type="COMMERCIAL", passengers=100, tick=10, special=False):
    priority = "EMERGENCY" if flight_type == "EMERGENCY" else "STANDARD"
    return Flight("BA1", Aircraft("BA1"), flight_type, priority, tick, passengers, is_special=special)


class TestModifierManager(unittest.TestCase):
    def setUp(self):
        self.modifiers = ModifierManager()

    def test_unmodified_on_time_revenue(self):
        result = self.modifiers.calculate_revenue(make_flight(), tick=10)
        self.assertEqual(result.base, 1000.0)
        self.assertEqual(result.final, 1000.0)
        self.assertEqual(result.steps, ())

    def test_delay_multiplier(self):
        self.assertAlmostEqual(self.modifiers.delay_multiplier(25), 0.90)
        self.assertAlmostEqual(self.modifiers.delay_multiplier(1000), 0.60)

    def test_delayed_flight_penalised(self):
        flight = make_flight()
        flight.delay(25)
        result = self.modifiers.calculate_revenue(flight, tick=flight.scheduled_tick)
        self.assertAlmostEqual(result.final, 900.0)
        self.assertEqual(len(result.steps), 1)
        self.assertAlmostEqual(result.steps[0].delta, -100.0)

    def test_order_delay_then_type_then_global(self):
        flight = make_flight()
        flight.delay(10)
        self.modifiers.add_modifier("Reputation", 2.0)
        self.modifiers.add_flight_type_modifier("COMMERCIAL", 1.5, "Commercial Specialist")
        result = self.modifiers.calculate_revenue(flight, tick=flight.scheduled_tick)
        self.assertEqual(result.causes(), ["Delay penalty (10 ticks)", "Commercial Specialist", "Reputation"])
        self.assertAlmostEqual(result.final, 1000 * 0.95 * 1.5 * 2.0)
        self.assertAlmostEqual(result.steps[1].before, 950.0)

    def test_type_modifier_only_applies_to_its_type(self):
        self.modifiers.add_flight_type_modifier("CARGO", 3.0)
        result = self.modifiers.calculate_revenue(make_flight(), tick=10)
        self.assertEqual(result.final, 1000.0)

    def test_additive_bonuses_before_multipliers(self):
        self.modifiers.add_modifier("Double", 2.0)
        result = self.modifiers.calculate_revenue(make_flight(), tick=10, on_time=True, perfect_landing=True)
        # (1000 + 100 + 200) * 2
        self.assertAlmostEqual(result.final, 2600.0)
        self.assertEqual(result.causes(), ["On-time bonus", "Perfect landing bonus", "Double"])

    def test_special_flight_doubles(self):
        result = self.modifiers.calculate_revenue(make_flight(special=True), tick=10)
        self.assertEqual(result.final, 2000.0)

    def test_base_fares(self):
        self.assertEqual(self.modifiers.calculate_revenue(make_flight("CARGO"), 10).final, 750.0)
        self.assertEqual(self.modifiers.calculate_revenue(make_flight("VIP"), 10).final, 2000.0)
        self.assertEqual(self.modifiers.calculate_revenue(make_flight("EMERGENCY"), 10).final, 1500.0)

    def test_invalid_modifiers(self):
        with self.assertRaises(InvalidModifierError):
            self.modifiers.add_modifier("Broken", 0)
        with self.assertRaises(InvalidModifierError):
            self.modifiers.add_flight_type_modifier("CARGO", -1.0)
        with self.assertRaises(UnknownFlightTypeError):
            self.modifiers.add_flight_type_modifier("GLIDER", 1.2)

    def test_remove_modifier(self):
        self.modifiers.add_modifier("Temp", 1.5)
        self.assertTrue(self.modifiers.remove_modifier("Temp"))
        self.assertFalse(self.modifiers.remove_modifier("Temp"))
        self.assertEqual(self.modifiers.modifiers(), ())

    def test_accessors_are_read_only(self):
        self.modifiers.add_flight_type_modifier("VIP", 1.2)
        self.assertIsInstance(self.modifiers.flight_type_modifiers("VIP"), tuple)
        self.assertIsInstance(self.modifiers.modifiers(), tuple)


if __name__ == "__main__":
    unittest.main()
