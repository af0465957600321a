import dataclasses
from airtime.exceptions import AirportError
from constants import PLANE_SIZES, REQUIRED_RUNWAY_LENGTH


@dataclasses.dataclass(frozen=True)
class Aircraft:
    aircraft_id: str
    size: str = "MEDIUM"
    weight: float = 0.0

    def __post_init__(self):
        if self.size not in PLANE_SIZES:
            raise AirportError(f"Unknown aircraft size: {self.size}")

    @property
    def required_runway_length(self) -> int:
        return REQUIRED_RUNWAY_LENGTH[self.size]

    def __repr__(self):
        return f"<Aircraft {self.aircraft_id} {self.size} {int(self.weight)}kg>"
