from typing import List, Optional

from airtime.objects.flight import Flight
from airtime.objects.runway import Runway
from constants import CRITICAL_WEAR_THRESHOLD


class DispatchPolicy:
    """Automated stand-in for the controller in manual landing mode.

    Picks the least-worn runway that can take the aircraft, preferring the
    shortest one that fits so long runways stay free for heavies. Holds
    non-emergency traffic instead of landing on a runway past the critical
    wear level when `hold_on_worn` is set.
    """

    def __init__(self, hold_on_worn: bool = False, wear_limit: int = CRITICAL_WEAR_THRESHOLD):
        self.hold_on_worn = hold_on_worn
        self.wear_limit = wear_limit

    def __call__(self, flight: Flight, runways: List[Runway]) -> Optional[Runway]:
        return self._choose_runway_for(flight, runways)

    def _choose_runway_for(self, flight: Flight, runways: List[Runway]) -> Optional[Runway]:
        if not runways:
            return None

        candidates = []
        for rw in runways:
            if not rw.can_accept(flight.aircraft):
                continue
            slack = rw.length - flight.aircraft.required_runway_length
            candidates.append((rw, rw.wear, slack))

        if not candidates:
            return None

        candidates.sort(key=lambda t: (t[1], t[2]))
        best_runway, wear, _ = candidates[0]

        if self.hold_on_worn and wear >= self.wear_limit and not flight.is_emergency:
            return None
        return best_runway
