import dataclasses
from typing import Optional, TYPE_CHECKING
from airtime.exceptions import UnknownTierError
from constants import RUNWAY_TIERS, FULL_DEGRADATION_THRESHOLD, MAX_WEAR

if TYPE_CHECKING:
    from .aircraft import Aircraft

REASON_LANDING = "LANDING"
REASON_REPAIR = "REPAIR"
REASON_MAINTENANCE = "MAINTENANCE"
REASON_EMERGENCY = "EMERGENCY"

STATUS_AVAILABLE = "AVAILABLE"
STATUS_OCCUPIED = "OCCUPIED"
STATUS_CLOSED = "CLOSED"


def tier_defaults(tier: int) -> dict:
    if tier not in RUNWAY_TIERS:
        raise UnknownTierError(tier)
    return RUNWAY_TIERS[tier]


def runway_for_tier(tier: int, name: Optional[str] = None) -> "Runway":
    defaults = tier_defaults(tier)
    return Runway(
        name=name or defaults["name"],
        length=defaults["length"],
        tier=tier,
        landing_duration=defaults["landing_duration"],
    )


@dataclasses.dataclass(eq=False)
class Runway:
    name: str
    length: int
    tier: int = 1
    landing_duration: int = 3
    wear: int = 0
    occupied: bool = False
    occupied_countdown: int = 0
    occupation_reason: Optional[str] = None
    occupied_by: Optional[str] = None

    def __post_init__(self):
        tier_defaults(self.tier)

    @property
    def status(self) -> str:
        if self.wear >= FULL_DEGRADATION_THRESHOLD:
            return STATUS_CLOSED
        return STATUS_OCCUPIED if self.occupied else STATUS_AVAILABLE

    @property
    def is_closed(self) -> bool:
        return self.wear >= FULL_DEGRADATION_THRESHOLD

    def fits(self, aircraft: "Aircraft") -> bool:
        return aircraft.required_runway_length <= self.length

    def is_available(self) -> bool:
        return not self.occupied and not self.is_closed

    def can_accept(self, aircraft: "Aircraft") -> bool:
        return self.fits(aircraft) and self.is_available()

    def occupy(self, duration: int, reason: str, holder: Optional[str] = None):
        self.occupied = True
        self.occupied_countdown = max(1, int(duration))
        self.occupation_reason = reason
        self.occupied_by = holder

    def release(self):
        self.occupied = False
        self.occupied_countdown = 0
        self.occupation_reason = None
        self.occupied_by = None

    def update_status(self) -> bool:
        """Count down one tick of occupancy; True when the runway frees up."""
        if not self.occupied:
            return False
        self.occupied_countdown -= 1
        if self.occupied_countdown <= 0:
            self.release()
            return True
        return False

    def add_wear(self, amount: int) -> int:
        added = max(0, min(int(amount), MAX_WEAR - self.wear))
        self.wear += added
        return added

    def reset_wear(self):
        self.wear = 0

    def detailed_status(self) -> str:
        if self.is_closed:
            return f"{self.name}: CLOSED (wear {self.wear}%)"
        if self.occupied:
            holder = f" by {self.occupied_by}" if self.occupied_by else ""
            return f"{self.name}: {self.occupation_reason}{holder} ({self.occupied_countdown} ticks left)"
        return f"{self.name}: available (wear {self.wear}%)"

    def __repr__(self):
        return f"<Runway {self.name} T{self.tier} {self.length}m wear={self.wear} {self.status}>"
