import math
import random
from collections import defaultdict
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from airtime.objects.aircraft import Aircraft
from airtime.objects.flight import Flight
from constants import (
    AIRLINES, PLANE_SIZES,
    GENERATION_INTERVAL, FLIGHTS_PER_RUNWAY, SCHEDULE_OFFSET_RANGE,
    PASSENGER_RANGE, WEIGHT_RANGE,
    SPECIAL_FLIGHT_PROBABILITY, EMERGENCY_FLIGHT_PROBABILITY,
)

if TYPE_CHECKING:
    from airtime.logger import GameLogger
    from airtime.runway_manager import RunwayManager
    from airtime.scheduler import FlightScheduler

_REGULAR_TYPES = ("COMMERCIAL", "CARGO", "VIP")


class FlightGenerator:
    """Random inbound flights. Flight numbers are unique per generator."""

    def __init__(self, rng: Optional[random.Random] = None, airlines: dict = None):
        self.rng = rng or random.Random()
        self._prefixes = [data["IATA"] for data in (airlines or AIRLINES).values()]
        self._issued = set()

    def _flight_number(self) -> str:
        capacity = len(self._prefixes) * 900
        if len(self._issued) >= capacity:
            raise RuntimeError("Flight number space exhausted")
        while True:
            number = f"{self.rng.choice(self._prefixes)}{self.rng.randint(100, 999)}"
            if number not in self._issued:
                self._issued.add(number)
                return number

    def _type_and_priority(self):
        if self.rng.random() < EMERGENCY_FLIGHT_PROBABILITY:
            return "EMERGENCY", "EMERGENCY"
        flight_type = self.rng.choice(_REGULAR_TYPES)
        priority = "VIP" if flight_type == "VIP" else "STANDARD"
        return flight_type, priority

    def generate_flight(self, tick: int, passengers: Optional[int] = None) -> Flight:
        number = self._flight_number()
        aircraft = Aircraft(number, self.rng.choice(PLANE_SIZES), float(self.rng.randint(*WEIGHT_RANGE)))
        flight_type, priority = self._type_and_priority()
        if passengers is None:
            passengers = self.rng.randint(*PASSENGER_RANGE)
        return Flight(
            flight_number=number,
            aircraft=aircraft,
            flight_type=flight_type,
            priority=priority,
            scheduled_tick=tick + self.rng.randint(*SCHEDULE_OFFSET_RANGE),
            passengers=passengers,
            is_special=self.rng.random() < SPECIAL_FLIGHT_PROBABILITY,
        )

    def generate_flights(self, tick: int, count: int) -> List[Flight]:
        return [self.generate_flight(tick) for _ in range(count)]


class FlightGenerationService:
    """Every `interval` ticks, queue a staggered batch sized to the runway count."""

    def __init__(self, generator: FlightGenerator, scheduler: "FlightScheduler",
                 runway_manager: "RunwayManager", logger: "GameLogger",
                 interval: int = GENERATION_INTERVAL, flights_per_runway: float = FLIGHTS_PER_RUNWAY):
        self.generator = generator
        self.scheduler = scheduler
        self.runway_manager = runway_manager
        self.logger = logger
        self.interval = interval
        self.flights_per_runway = flights_per_runway
        self._pending: Dict[int, List[Callable[[int], Flight]]] = defaultdict(list)
        self._scheduled_listeners: List[Callable[[Flight], None]] = []

    def on_scheduled(self, callback: Callable[[Flight], None]):
        self._scheduled_listeners.append(callback)

    def batch_size(self) -> int:
        return max(1, math.ceil(self.runway_manager.runway_count() * self.flights_per_runway))

    def pending_count(self) -> int:
        return sum(len(events) for events in self._pending.values())

    def spawn(self, tick: int) -> Flight:
        flight = self.generator.generate_flight(tick)
        self.scheduler.schedule_flight(flight, flight.scheduled_tick)
        self.logger.log(
            f"Scheduled {flight.flight_number} ({flight.flight_type}, {flight.priority}) "
            f"with {flight.passengers} passengers for tick {flight.scheduled_tick}"
        )
        for callback in self._scheduled_listeners:
            callback(flight)
        return flight

    def generate_if_needed(self, tick: int) -> List[Flight]:
        if tick % self.interval == 0:
            count = self.batch_size()
            self.logger.log(
                f"Generating {count} flights ({self.flights_per_runway} x {self.runway_manager.runway_count()} runways)"
            )
            stagger = math.ceil(self.interval / count)
            for i in range(count):
                self._pending[tick + i * stagger].append(self.spawn)

        spawned = []
        for due in sorted(t for t in self._pending if t <= tick):
            for event in self._pending.pop(due):
                spawned.append(event(tick))
        return spawned
