import dataclasses
from typing import Dict, List, Tuple, TYPE_CHECKING

from airtime.failures import FailureTracker, EMERGENCY_RESPONSE
from airtime.objects.flight import Flight, CANCEL_EMERGENCY_EXPIRED
from constants import EMERGENCY_RESPONSE_WINDOW

if TYPE_CHECKING:
    from airtime.logger import GameLogger


@dataclasses.dataclass
class EmergencyRecord:
    flight: Flight
    detected_tick: int
    deadline: int


class EmergencyTracker:
    """Response deadlines for emergency flights, independent of the scheduler.

    An expired record cancels its flight and counts one emergency-response
    failure. A flight that was already cancelled some other way (delay
    threshold) is dropped without a failure.
    """

    def __init__(self, failures: FailureTracker, logger: "GameLogger",
                 window: int = EMERGENCY_RESPONSE_WINDOW):
        self.failures = failures
        self.logger = logger
        self.window = window
        self._records: Dict[str, EmergencyRecord] = {}

    def register(self, flight: Flight, tick: int) -> bool:
        if not flight.is_emergency or flight.is_terminal:
            return False
        if flight.flight_number in self._records:
            return False
        deadline = tick + self.window
        self._records[flight.flight_number] = EmergencyRecord(flight, tick, deadline)
        self.logger.log(f"EMERGENCY: Flight {flight.flight_number} requires landing by tick {deadline}")
        return True

    def process_emergencies(self, tick: int) -> List[Flight]:
        expired = []
        for number, record in list(self._records.items()):
            flight = record.flight
            if flight.is_terminal:
                del self._records[number]
                continue
            if record.deadline < tick:
                del self._records[number]
                flight.cancel(
                    f"Emergency not handled within {self.window} ticks",
                    cause=CANCEL_EMERGENCY_EXPIRED,
                )
                self.failures.record_failure(
                    EMERGENCY_RESPONSE, f"Emergency flight {number} was not landed in time"
                )
                expired.append(flight)
        return expired

    def mark_handled(self, flight_number: str) -> bool:
        return self._records.pop(flight_number, None) is not None

    def is_active(self, flight_number: str) -> bool:
        return flight_number in self._records

    def active_count(self) -> int:
        return len(self._records)

    def active_emergencies(self, tick: int) -> List[Tuple[str, int, Flight]]:
        return [
            (number, record.deadline - tick, record.flight)
            for number, record in self._records.items()
        ]
