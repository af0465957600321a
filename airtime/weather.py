import random
from typing import Optional
from constants import WEATHER_TABLE


class Weather:
    """Current airfield weather, rolled from an injected random source."""

    def __init__(self, rng: Optional[random.Random] = None, current: Optional[str] = None):
        self.rng = rng or random.Random()
        self.current = current or "CLEAR"
        if current is None:
            self.roll()

    def roll(self) -> str:
        value = self.rng.randint(0, 99)
        for upper, name, _ in WEATHER_TABLE:
            if value < upper:
                self.current = name
                break
        return self.current

    def _row(self):
        return next(row for row in WEATHER_TABLE if row[1] == self.current)

    def impact(self) -> int:
        return self._row()[2]

    def __str__(self):
        return self.current
