import random
import unittest
from unittest.mock import MagicMock

from airtime.generator import FlightGenerator, FlightGenerationService
from airtime.runway_manager import RunwayManager
from airtime.scheduler import FlightScheduler
from constants import FLIGHT_TYPES


class TestFlightGenerator(unittest.TestCase):
    def test_flights_are_valid_and_unique(self):
        generator = FlightGenerator(random.Random(3))
        flights = generator.generate_flights(100, 200)
        numbers = [f.flight_number for f in flights]
        self.assertEqual(len(numbers), len(set(numbers)))
        for flight in flights:
            self.assertIn(flight.flight_type, FLIGHT_TYPES)
            self.assertTrue(105 <= flight.scheduled_tick <= 115)
            self.assertTrue(50 <= flight.passengers <= 300)
            if flight.flight_type == "EMERGENCY":
                self.assertEqual(flight.priority, "EMERGENCY")
            elif flight.flight_type == "VIP":
                self.assertEqual(flight.priority, "VIP")
            else:
                self.assertEqual(flight.priority, "STANDARD")

    def test_same_seed_same_flights(self):
        a = FlightGenerator(random.Random(11)).generate_flights(0, 5)
        b = FlightGenerator(random.Random(11)).generate_flights(0, 5)
        self.assertEqual([f.flight_number for f in a], [f.flight_number for f in b])

    def test_number_space_exhausted(self):
        generator = FlightGenerator(random.Random(1), {"Tiny": {"IATA": "TY"}})
        generator.generate_flights(0, 900)
        with self.assertRaises(RuntimeError):
            generator.generate_flight(0)


class TestFlightGenerationService(unittest.TestCase):
    def setUp(self):
        self.logger = MagicMock()
        self.runways = RunwayManager(self.logger, random.Random(0))
        self.runways.unlock_tier(1)
        self.runways.unlock_tier(2)
        self.scheduler = FlightScheduler()
        self.service = FlightGenerationService(
            FlightGenerator(random.Random(5)), self.scheduler, self.runways, self.logger
        )

    def test_batch_size(self):
        self.assertEqual(self.service.batch_size(), 5)

    def test_staggered_batch(self):
        scheduled = MagicMock()
        self.service.on_scheduled(scheduled)

        self.assertEqual(len(self.service.generate_if_needed(12)), 1)
        self.assertEqual(self.service.pending_count(), 4)
        spawned = []
        # remaining flights due at 15, 18, 21 and 24
        for tick in range(13, 24):
            spawned += self.service.generate_if_needed(tick)
        self.assertEqual(len(spawned), 3)
        self.assertEqual(self.service.pending_count(), 1)
        self.assertEqual(self.scheduler.count(), 4)
        self.assertEqual(scheduled.call_count, 4)

        # next batch starts at 24 alongside the last straggler
        self.assertEqual(len(self.service.generate_if_needed(24)), 2)
        self.assertEqual(self.service.pending_count(), 4)

    def test_nothing_between_intervals(self):
        self.assertEqual(self.service.generate_if_needed(5), [])
        self.assertEqual(self.scheduler.count(), 0)


if __name__ == "__main__":
    unittest.main()
