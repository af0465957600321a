from typing import Callable, Dict, List, TYPE_CHECKING

from constants import (
    LEVEL_REQUIREMENTS_BASE, LEVEL_REQUIREMENT_GROWTH, MAX_LEVEL,
    BASE_XP, XP_SIZE_MULTIPLIER, XP_PRIORITY_MULTIPLIER, XP_WEATHER_MULTIPLIER,
    XP_ON_TIME_BONUS, XP_PERFECT_BONUS, XP_SIMULTANEOUS_BONUS,
)

if TYPE_CHECKING:
    from airtime.logger import GameLogger
    from airtime.objects.flight import Flight


def build_level_requirements(base: Dict[int, int] = None, growth: float = LEVEL_REQUIREMENT_GROWTH,
                             max_level: int = MAX_LEVEL) -> Dict[int, int]:
    requirements = dict(base or LEVEL_REQUIREMENTS_BASE)
    for level in range(max(requirements) + 1, max_level + 1):
        requirements[level] = int(requirements[level - 1] * growth)
    return requirements


class ExperienceSystem:
    """Airport XP and level progression."""

    def __init__(self, logger: "GameLogger", requirements: Dict[int, int] = None):
        self.logger = logger
        self.level = 1
        self.xp = 0
        self.xp_multiplier = 1.0
        self._requirements = requirements or build_level_requirements()
        self._listeners: List[Callable[[int], None]] = []

    @property
    def max_level(self) -> int:
        return max(self._requirements)

    def on_level_up(self, callback: Callable[[int], None]):
        self._listeners.append(callback)

    def required_xp_for_level(self, level: int) -> int:
        return self._requirements.get(level, -1)

    def required_xp_for_next_level(self) -> int:
        return self._requirements.get(self.level + 1, self._requirements[self.max_level])

    def add_xp_multiplier(self, multiplier: float):
        # replaces the current multiplier
        self.xp_multiplier = multiplier
        self.logger.log(f"XP multiplier set to {multiplier:.2f}x")

    def add_experience(self, amount: int) -> List[int]:
        """Add XP; returns every level reached on the way."""
        if amount <= 0:
            return []
        self.xp += amount
        self.logger.log(f"Airport gained {amount} XP. Total: {self.xp} XP")

        reached = []
        while self.level < self.max_level and self.xp >= self.required_xp_for_next_level():
            self.level += 1
            reached.append(self.level)
            self.logger.log(f"LEVEL UP! Airport is now level {self.level}")
            for callback in self._listeners:
                callback(self.level)
        return reached

    def calculate_flight_xp(self, flight: "Flight", weather, runway_wear: int,
                            on_time: bool, perfect: bool, simultaneous: int = 0) -> int:
        base = BASE_XP.get(flight.flight_type, 10)
        size = XP_SIZE_MULTIPLIER.get(flight.aircraft.size, 1.0)
        priority = XP_PRIORITY_MULTIPLIER.get(flight.priority, 1.0)
        weather_mult = XP_WEATHER_MULTIPLIER.get(str(weather), 1.0)
        wear_mult = 1.0 + runway_wear / 100.0 * 0.3

        xp = base * size * priority * weather_mult * wear_mult
        if on_time:
            xp += XP_ON_TIME_BONUS
        if perfect:
            xp += XP_PERFECT_BONUS
        xp += simultaneous * XP_SIMULTANEOUS_BONUS

        final = int(max(round(xp), base) * self.xp_multiplier)
        self.logger.log(
            f"XP Earned: {final} [Base: {base}, Size: x{size:.1f}, Priority: x{priority:.1f}, "
            f"Weather: x{weather_mult:.1f}, Runway: x{wear_mult:.2f}, Global: x{self.xp_multiplier:.2f}]"
        )
        return final

    def progress_percentage(self) -> int:
        if self.level >= self.max_level:
            return 100
        current = self._requirements[self.level]
        nxt = self._requirements[self.level + 1]
        return int((self.xp - current) / (nxt - current) * 100)

    def status_string(self) -> str:
        if self.level >= self.max_level:
            return f"Level {self.level} (MAX) - {self.xp} XP"
        return (f"Level {self.level} - {self.xp}/{self.required_xp_for_next_level()} XP "
                f"({self.progress_percentage()}%)")
