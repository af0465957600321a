import random
from typing import Callable, List, Optional, TYPE_CHECKING

from airtime.exceptions import UnknownRunwayError
from airtime.objects.aircraft import Aircraft
from airtime.objects.runway import Runway, runway_for_tier, REASON_LANDING, REASON_REPAIR
from constants import (
    WEAR_INCREMENT_PER_LANDING, WEAR_RANDOM_MAX, WEATHER_IMPACT_MULTIPLIER,
    CRITICAL_WEAR_THRESHOLD, FULL_DEGRADATION_THRESHOLD,
    REPAIR_DURATION, REPAIR_BASE_RATE, REPAIR_HIGH_WEAR_LEVEL, REPAIR_HIGH_WEAR_MULTIPLIER,
    MAX_WEATHER_RESISTANCE,
)

if TYPE_CHECKING:
    from airtime.logger import GameLogger
    from airtime.treasury import Treasury


def repair_cost(wear_level: int, base_rate: float = REPAIR_BASE_RATE) -> float:
    cost = wear_level * base_rate
    if wear_level >= REPAIR_HIGH_WEAR_LEVEL:
        cost *= REPAIR_HIGH_WEAR_MULTIPLIER
    return cost


class RunwayManager:
    """Allocates runways to aircraft and owns their wear and occupancy."""

    def __init__(self, logger: "GameLogger", rng: Optional[random.Random] = None,
                 repair_duration: int = REPAIR_DURATION, wear_random_max: int = WEAR_RANDOM_MAX):
        self.logger = logger
        self.rng = rng or random.Random()
        self.repair_duration = repair_duration
        self.wear_random_max = wear_random_max
        self.weather_resistance = 0.0
        self.landing_duration_factor = 1.0
        self._runways: List[Runway] = []
        self._closure_listeners: List[Callable[[Runway], None]] = []
        self._landings = {}

    # ---- registration ----

    def unlock_runway(self, runway: Runway) -> Runway:
        if self.find_runway(runway.name):
            raise ValueError(f"Runway {runway.name} already unlocked")
        self._runways.append(runway)
        self._landings[runway.name] = 0
        self.logger.log(f"Unlocked runway {runway.name} (tier {runway.tier}, {runway.length}m)")
        return runway

    def unlock_tier(self, tier: int, name: Optional[str] = None) -> Runway:
        runway = runway_for_tier(tier, name)
        if name is None and self.find_runway(runway.name):
            runway.name = f"{runway.name}-{len(self._runways) + 1}"
        return self.unlock_runway(runway)

    def on_closure(self, callback: Callable[[Runway], None]):
        self._closure_listeners.append(callback)

    # ---- queries ----

    def runways(self) -> tuple:
        return tuple(self._runways)

    def runway_count(self) -> int:
        return len(self._runways)

    def find_runway(self, name: str) -> Optional[Runway]:
        key = name.strip().upper()
        return next((r for r in self._runways if r.name.upper() == key), None)

    def get_runway(self, name: str) -> Runway:
        runway = self.find_runway(name)
        if runway is None:
            raise UnknownRunwayError(name)
        return runway

    def landing_count(self, name: str) -> int:
        return self._landings.get(self.get_runway(name).name, 0)

    def can_land(self, aircraft: Aircraft) -> bool:
        return any(r.can_accept(aircraft) for r in self._runways)

    def available_runway(self, aircraft: Aircraft) -> Optional[Runway]:
        return next((r for r in self._runways if r.can_accept(aircraft)), None)

    def available_runways(self, aircraft: Aircraft) -> List[Runway]:
        return [r for r in self._runways if r.can_accept(aircraft)]

    def has_runway_for(self, aircraft: Aircraft) -> bool:
        """True if any runway is long enough, free or not."""
        return any(r.fits(aircraft) for r in self._runways)

    # ---- per-tick ----

    def update_status(self) -> List[Runway]:
        freed = []
        for runway in self._runways:
            reason = runway.occupation_reason
            if runway.update_status():
                freed.append(runway)
                if reason == REASON_REPAIR:
                    self.logger.log(f"Runway {runway.name} repair complete, back in service")
        return freed

    # ---- landings and wear ----

    def landing_duration_for(self, runway: Runway) -> int:
        return max(1, round(runway.landing_duration * self.landing_duration_factor))

    def handle_landing(self, runway_name: str, weather_impact: int, traffic_volume: int,
                       flight_number: Optional[str] = None) -> int:
        runway = self.get_runway(runway_name)
        runway.occupy(self.landing_duration_for(runway), REASON_LANDING, flight_number)
        self._landings[runway.name] += 1
        return self.apply_wear(runway.name, weather_impact, traffic_volume)

    def apply_wear(self, runway_name: str, weather_impact: int, traffic_volume: int,
                   weather_resistance: Optional[float] = None) -> int:
        runway = self.get_runway(runway_name)
        resistance = self.weather_resistance if weather_resistance is None else weather_resistance
        resistance = max(0.0, min(1.0, resistance))

        effective_weather = int(weather_impact * WEATHER_IMPACT_MULTIPLIER * (1.0 - resistance))
        traffic = max(0, traffic_volume) + effective_weather
        increase = WEAR_INCREMENT_PER_LANDING + self.rng.randint(0, self.wear_random_max) + traffic // 10

        was_closed = runway.is_closed
        was_critical = runway.wear >= CRITICAL_WEAR_THRESHOLD
        added = runway.add_wear(increase)

        if runway.wear >= FULL_DEGRADATION_THRESHOLD and not was_closed:
            self.logger.log(f"Runway {runway.name} is fully degraded and is now CLOSED for use")
            for callback in self._closure_listeners:
                callback(runway)
        elif runway.wear >= CRITICAL_WEAR_THRESHOLD and not was_critical:
            self.logger.log(f"Warning: runway {runway.name} is at {runway.wear}% wear and needs maintenance soon")
        return added

    # ---- maintenance ----

    def repair(self, runway_name: str, occupy: bool = True) -> Runway:
        runway = self.get_runway(runway_name)
        runway.reset_wear()
        if occupy:
            runway.occupy(self.repair_duration, REASON_REPAIR)
            self.logger.log(f"Runway {runway.name} under repair for {self.repair_duration} ticks")
        else:
            self.logger.log(f"Runway {runway.name} has been fully repaired")
        return runway

    def repair_cost(self, wear_level: int) -> float:
        return repair_cost(wear_level)

    def repair_with_funds(self, runway_name: str, treasury: "Treasury", occupy: bool = True) -> bool:
        runway = self.get_runway(runway_name)
        if runway.occupied:
            self.logger.log(f"Runway {runway.name} is busy ({runway.occupation_reason}), repair postponed")
            return False
        cost = self.repair_cost(runway.wear)
        if not treasury.deduct_funds(cost, f"Maintenance for {runway.name}"):
            self.logger.log(f"Insufficient funds ({cost:.2f}) to repair runway {runway.name}")
            return False
        self.repair(runway.name, occupy=occupy)
        return True

    def perform_maintenance(self, treasury: "Treasury") -> List[Runway]:
        """Repair every worn, idle runway the treasury can pay for; skip the rest."""
        repaired = []
        for runway in self._runways:
            if runway.wear < CRITICAL_WEAR_THRESHOLD or runway.occupied:
                continue
            cost = self.repair_cost(runway.wear)
            if treasury.balance < cost:
                self.logger.log(
                    f"Maintenance skipped for {runway.name}: need {cost:.2f}, have {treasury.balance:.2f}"
                )
                continue
            if self.repair_with_funds(runway.name, treasury):
                repaired.append(runway)
        return repaired

    # ---- upgrades ----

    def add_weather_resistance(self, resistance: float):
        if resistance <= 0:
            raise ValueError(f"Weather resistance must be positive: {resistance}")
        self.weather_resistance = min(MAX_WEATHER_RESISTANCE, self.weather_resistance + resistance)
        self.logger.log(f"Runway weather resistance now {self.weather_resistance:.0%}")

    def reduce_repair_duration(self, factor: float):
        if not 0 < factor <= 1:
            raise ValueError(f"Repair duration factor must be in (0, 1]: {factor}")
        self.repair_duration = max(1, round(self.repair_duration * factor))
        self.logger.log(f"Runway repairs now take {self.repair_duration} ticks")

    def reduce_landing_duration(self, factor: float):
        if not 0 < factor <= 1:
            raise ValueError(f"Landing duration factor must be in (0, 1]: {factor}")
        self.landing_duration_factor *= factor
        self.logger.log(f"Landing duration factor now {self.landing_duration_factor:.2f}")
