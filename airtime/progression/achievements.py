import dataclasses
from typing import Callable, Dict, List, Optional, Tuple, TYPE_CHECKING

from constants import (
    FLIGHT_TYPES, ACHIEVEMENT_THRESHOLDS, WEATHER_MASTER_THRESHOLDS,
    PASSENGER_MILESTONE_EXPONENTS, PASSENGER_MILESTONE_TITLES, WORN_RUNWAY_WEAR,
)

if TYPE_CHECKING:
    from airtime.logger import GameLogger
    from airtime.objects.flight import Flight

FLIGHT_TYPE = "FLIGHT_TYPE"
PERFECT_LANDINGS = "PERFECT_LANDINGS"
RUNWAY_EXPERT = "RUNWAY_EXPERT"
PASSENGER_MILESTONE = "PASSENGER_MILESTONE"
WEATHER_MASTER = "WEATHER_MASTER"
NIGHT_FLIGHT = "NIGHT_FLIGHT"
CONSECUTIVE_FLIGHTS = "CONSECUTIVE_FLIGHTS"
SIMULTANEOUS_FLIGHTS = "SIMULTANEOUS_FLIGHTS"
EMERGENCY_LANDINGS = "EMERGENCY_LANDINGS"

# kind: (id prefix, display name, description template)
_TIERED = {
    PERFECT_LANDINGS: ("PerfectPilot", "Perfect Pilot", "Land {n} flights without any delays"),
    RUNWAY_EXPERT: ("RunwayExpert", "Runway Expert", "Land {n} flights on runways with high wear (>50%)"),
    NIGHT_FLIGHT: ("NightFlight", "Night Owl", "Land {n} flights during night time"),
    CONSECUTIVE_FLIGHTS: ("ConsecutiveFlights", "Air Traffic Controller",
                          "Land {n} flights consecutively without any cancellations"),
    SIMULTANEOUS_FLIGHTS: ("SimultaneousFlights", "Air Traffic Coordinator",
                           "Successfully manage {n} flights in the air simultaneously"),
    EMERGENCY_LANDINGS: ("EmergencyLandings", "Emergency Responder", "Successfully land {n} emergency flights"),
}


@dataclasses.dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    description: str
    required: int
    kind: str
    key: Optional[str] = None
    tier: int = 1


@dataclasses.dataclass(frozen=True)
class AchievementStatus:
    achievement: Achievement
    unlocked: bool
    progress: int

    @property
    def percentage(self) -> float:
        return min(100.0, self.progress / self.achievement.required * 100.0)


def build_catalogue() -> List[Achievement]:
    catalogue = []

    for flight_type in FLIGHT_TYPES:
        title = flight_type.title()
        for tier, n in enumerate(ACHIEVEMENT_THRESHOLDS[FLIGHT_TYPE], start=1):
            catalogue.append(Achievement(
                f"{title}Specialist_{tier}", f"{title} Specialist {tier}",
                f"Land {n} {title} flights", n, FLIGHT_TYPE, flight_type, tier,
            ))

    for kind, (prefix, name, description) in _TIERED.items():
        for tier, n in enumerate(ACHIEVEMENT_THRESHOLDS[kind], start=1):
            catalogue.append(Achievement(
                f"{prefix}_{tier}", f"{name} {tier}", description.format(n=n), n, kind, None, tier,
            ))

    low, high = PASSENGER_MILESTONE_EXPONENTS
    for exponent in range(low, high + 1):
        count = 2 ** exponent
        title = PASSENGER_MILESTONE_TITLES.get(exponent, f"Passenger Milestone {exponent}")
        catalogue.append(Achievement(
            f"PassengerMilestone_{count}", title, f"Welcome {count:,} passengers to your airport",
            count, PASSENGER_MILESTONE, None, exponent - low + 1,
        ))

    for weather, thresholds in WEATHER_MASTER_THRESHOLDS.items():
        title = weather.title()
        for tier, n in enumerate(thresholds, start=1):
            catalogue.append(Achievement(
                f"WeatherMaster_{title}_{tier}", f"{title} Master {tier}",
                f"Land {n} flights during {title} weather", n, WEATHER_MASTER, weather, tier,
            ))

    return catalogue


class AchievementSystem:
    """Counts landing milestones and unlocks each tiered achievement once."""

    def __init__(self, logger: "GameLogger", catalogue: List[Achievement] = None,
                 worn_runway_wear: int = WORN_RUNWAY_WEAR):
        self.logger = logger
        self.worn_runway_wear = worn_runway_wear
        self._achievements = list(catalogue or build_catalogue())
        self._unlocked: Dict[str, Achievement] = {}
        self._counters: Dict[Tuple[str, Optional[str]], int] = {}
        self._listeners: List[Callable[[Achievement], None]] = []

    def on_unlocked(self, callback: Callable[[Achievement], None]):
        self._listeners.append(callback)

    def counter(self, kind: str, key: Optional[str] = None) -> int:
        return self._counters.get((kind, key), 0)

    def _set(self, kind: str, key: Optional[str], value: int) -> List[Achievement]:
        self._counters[(kind, key)] = value
        unlocked = []
        for achievement in self._achievements:
            if achievement.kind != kind or achievement.key != key:
                continue
            if achievement.id in self._unlocked or value < achievement.required:
                continue
            self._unlocked[achievement.id] = achievement
            unlocked.append(achievement)
            self.logger.log(f"Achievement unlocked: {achievement.name} - {achievement.description}")
            for callback in self._listeners:
                callback(achievement)
        return unlocked

    def _bump(self, kind: str, key: Optional[str] = None, amount: int = 1) -> List[Achievement]:
        return self._set(kind, key, self.counter(kind, key) + amount)

    def record_flight_landed(self, flight: "Flight", perfect: bool = False, runway_wear: int = 0,
                             weather: str = "CLEAR", night: bool = False,
                             simultaneous: int = 0) -> List[Achievement]:
        unlocked = []
        if perfect:
            unlocked += self._bump(PERFECT_LANDINGS)
        if runway_wear > self.worn_runway_wear:
            unlocked += self._bump(RUNWAY_EXPERT)

        unlocked += self._bump(PASSENGER_MILESTONE, amount=flight.passengers)

        weather = str(weather)
        if weather != "CLEAR":
            unlocked += self._bump(WEATHER_MASTER, weather)
        if night:
            unlocked += self._bump(NIGHT_FLIGHT)

        unlocked += self._bump(CONSECUTIVE_FLIGHTS)

        if simultaneous > self.counter(SIMULTANEOUS_FLIGHTS):
            self.logger.log(f"New record: {simultaneous} flights managed simultaneously!")
            unlocked += self._set(SIMULTANEOUS_FLIGHTS, None, simultaneous)

        if flight.is_emergency:
            unlocked += self._bump(EMERGENCY_LANDINGS)

        unlocked += self._bump(FLIGHT_TYPE, flight.flight_type)
        count = self.counter(FLIGHT_TYPE, flight.flight_type)
        if count in (10, 30, 100, 500) or count % 1000 == 0:
            self.logger.log(f"Milestone: {count} {flight.flight_type} flights landed!")
        return unlocked

    def reset_consecutive(self):
        self._counters[(CONSECUTIVE_FLIGHTS, None)] = 0

    def unlocked_ids(self) -> frozenset:
        return frozenset(self._unlocked)

    def unlocked(self) -> Tuple[Achievement, ...]:
        return tuple(self._unlocked.values())

    def all_achievements(self) -> List[AchievementStatus]:
        return [
            AchievementStatus(a, a.id in self._unlocked, self.counter(a.kind, a.key))
            for a in self._achievements
        ]
