import dataclasses
from typing import Dict, List, Tuple

from airtime.exceptions import InvalidModifierError, UnknownFlightTypeError
from airtime.objects.flight import Flight, delay_penalty_multiplier
from constants import (
    BASE_FARES, FLIGHT_TYPES,
    TICKS_PER_PENALTY_PERIOD, PENALTY_PER_PERIOD, MAX_DELAY_PENALTY,
    ON_TIME_BONUS_PER_PASSENGER, PERFECT_LANDING_BONUS_PER_PASSENGER,
    SPECIAL_FLIGHT_MULTIPLIER,
)


@dataclasses.dataclass(frozen=True)
class Modifier:
    name: str
    value: float


@dataclasses.dataclass(frozen=True)
class RevenueStep:
    cause: str
    before: float
    after: float

    @property
    def delta(self) -> float:
        return self.after - self.before


@dataclasses.dataclass(frozen=True)
class RevenueBreakdown:
    base: float
    final: float
    steps: Tuple[RevenueStep, ...] = ()

    def causes(self) -> List[str]:
        return [step.cause for step in self.steps]


class ModifierManager:
    """Named multiplicative revenue modifiers, global and per flight type.

    Revenue runs: base fare × passengers, additive on-time/perfect bonuses,
    special-flight doubling, delay penalty, flight-type modifiers, global
    modifiers. Each application that moves the value is kept as a step.
    """

    def __init__(self, base_fares: Dict[str, float] = None,
                 ticks_per_period: int = TICKS_PER_PENALTY_PERIOD,
                 penalty_per_period: float = PENALTY_PER_PERIOD,
                 max_penalty: float = MAX_DELAY_PENALTY):
        self.base_fares = dict(base_fares or BASE_FARES)
        self.ticks_per_period = ticks_per_period
        self.penalty_per_period = penalty_per_period
        self.max_penalty = max_penalty
        self._global: List[Modifier] = []
        self._by_type: Dict[str, List[Modifier]] = {t: [] for t in FLIGHT_TYPES}

    @staticmethod
    def _check(name, value):
        if value is None or value <= 0:
            raise InvalidModifierError(name, value)

    def _check_type(self, flight_type):
        if flight_type not in self._by_type:
            raise UnknownFlightTypeError(flight_type)

    def add_modifier(self, name: str, value: float):
        self._check(name, value)
        self._global.append(Modifier(name, float(value)))

    def remove_modifier(self, name: str) -> bool:
        before = len(self._global)
        self._global = [m for m in self._global if m.name != name]
        return len(self._global) != before

    def add_flight_type_modifier(self, flight_type: str, value: float, name: str = None):
        self._check_type(flight_type)
        name = name or f"{flight_type.title()} Bonus"
        self._check(name, value)
        self._by_type[flight_type].append(Modifier(name, float(value)))

    def modifiers(self) -> Tuple[Modifier, ...]:
        return tuple(self._global)

    def flight_type_modifiers(self, flight_type: str) -> Tuple[Modifier, ...]:
        self._check_type(flight_type)
        return tuple(self._by_type[flight_type])

    def global_multiplier(self) -> float:
        total = 1.0
        for m in self._global:
            total *= m.value
        return total

    def delay_multiplier(self, delay_ticks: int) -> float:
        return delay_penalty_multiplier(
            delay_ticks, self.ticks_per_period, self.penalty_per_period, self.max_penalty
        )

    def base_fare(self, flight_type: str) -> float:
        if flight_type not in self.base_fares:
            raise UnknownFlightTypeError(flight_type)
        return self.base_fares[flight_type]

    def calculate_revenue(self, flight: Flight, tick: int = None,
                          on_time: bool = False, perfect_landing: bool = False) -> RevenueBreakdown:
        base = self.base_fare(flight.flight_type) * flight.passengers
        value = base
        steps: List[RevenueStep] = []

        def apply(cause, new_value):
            nonlocal value
            if new_value != value:
                steps.append(RevenueStep(cause, value, new_value))
                value = new_value

        if on_time:
            apply("On-time bonus", value + ON_TIME_BONUS_PER_PASSENGER * flight.passengers)
        if perfect_landing:
            apply("Perfect landing bonus", value + PERFECT_LANDING_BONUS_PER_PASSENGER * flight.passengers)
        if flight.is_special:
            apply("Special flight", value * SPECIAL_FLIGHT_MULTIPLIER)

        delay = flight.delay_ticks(tick)
        apply(f"Delay penalty ({delay} ticks)", value * self.delay_multiplier(delay))

        for m in self._by_type[flight.flight_type]:
            apply(m.name, value * m.value)
        for m in self._global:
            apply(m.name, value * m.value)

        return RevenueBreakdown(base=base, final=value, steps=tuple(steps))
