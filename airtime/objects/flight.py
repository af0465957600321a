import dataclasses
from typing import Callable, List, Optional
from airtime.exceptions import UnknownFlightTypeError, AirportError
from airtime.objects.aircraft import Aircraft
from constants import (
    FLIGHT_TYPES, FLIGHT_PRIORITIES,
    FLIGHT_CANCEL_DELAY_THRESHOLD,
    TICKS_PER_PENALTY_PERIOD, PENALTY_PER_PERIOD, MAX_DELAY_PENALTY,
)

STATUS_SCHEDULED = "SCHEDULED"
STATUS_DELAYED = "DELAYED"
STATUS_LANDED = "LANDED"
STATUS_CANCELED = "CANCELED"
TERMINAL_STATUSES = (STATUS_LANDED, STATUS_CANCELED)

CANCEL_DELAY_THRESHOLD = "DELAY_THRESHOLD"
CANCEL_EMERGENCY_EXPIRED = "EMERGENCY_EXPIRED"
CANCEL_MANUAL = "MANUAL"


def delay_penalty_multiplier(delay_ticks: int,
                             ticks_per_period: int = TICKS_PER_PENALTY_PERIOD,
                             penalty_per_period: float = PENALTY_PER_PERIOD,
                             max_penalty: float = MAX_DELAY_PENALTY) -> float:
    periods = max(0, delay_ticks) // ticks_per_period
    return 1.0 - min(max_penalty, periods * penalty_per_period)


@dataclasses.dataclass(eq=False)
class Flight:
    flight_number: str
    aircraft: Aircraft
    flight_type: str
    priority: str
    scheduled_tick: int
    passengers: int
    is_special: bool = False
    status: str = STATUS_SCHEDULED
    cancel_threshold: int = FLIGHT_CANCEL_DELAY_THRESHOLD
    original_scheduled_tick: int = dataclasses.field(init=False)
    cancel_reason: Optional[str] = dataclasses.field(init=False, default=None)
    cancel_cause: Optional[str] = dataclasses.field(init=False, default=None)
    landed_tick: Optional[int] = dataclasses.field(init=False, default=None)
    critical_delay_reported: bool = dataclasses.field(init=False, default=False)
    _cancel_listeners: List[Callable[["Flight"], None]] = dataclasses.field(
        init=False, default_factory=list, repr=False, compare=False
    )

    def __post_init__(self):
        if self.flight_type not in FLIGHT_TYPES:
            raise UnknownFlightTypeError(self.flight_type)
        if self.priority not in FLIGHT_PRIORITIES:
            raise AirportError(f"Unknown flight priority: {self.priority}")
        self.original_scheduled_tick = self.scheduled_tick

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_emergency(self) -> bool:
        return self.flight_type == "EMERGENCY" or self.priority == "EMERGENCY"

    def on_cancel(self, callback: Callable[["Flight"], None]):
        self._cancel_listeners.append(callback)

    def delay_ticks(self, current_tick: Optional[int] = None) -> int:
        """Scheduled delay plus any overrun while still airborne."""
        scheduled_delay = self.scheduled_tick - self.original_scheduled_tick
        if current_tick is not None and not self.is_terminal:
            return scheduled_delay + max(0, current_tick - self.scheduled_tick)
        return scheduled_delay

    def is_delayed(self) -> bool:
        return self.delay_ticks() > 0

    def is_overdue(self, current_tick: int) -> bool:
        return not self.is_terminal and current_tick > self.scheduled_tick

    def delay(self, ticks: int):
        if self.is_terminal or ticks <= 0:
            return
        self.scheduled_tick += ticks
        self.status = STATUS_DELAYED

        if self.delay_ticks() > self.cancel_threshold:
            self.cancel(
                f"Exceeded cancellation threshold of {self.cancel_threshold} delay ticks",
                cause=CANCEL_DELAY_THRESHOLD,
            )

    def cancel(self, reason: str, cause: str = CANCEL_MANUAL):
        if self.is_terminal:
            return
        self.status = STATUS_CANCELED
        self.cancel_reason = reason
        self.cancel_cause = cause
        for callback in list(self._cancel_listeners):
            callback(self)

    def mark_landed(self, tick: int) -> bool:
        if self.is_terminal:
            return False
        self.status = STATUS_LANDED
        self.landed_tick = tick
        return True

    def delay_penalty_multiplier(self, **kwargs) -> float:
        return delay_penalty_multiplier(self.delay_ticks(), **kwargs)

    def __str__(self):
        special = " [SPECIAL]" if self.is_special else ""
        return (
            f"Flight {self.flight_number} ({self.flight_type}, {self.priority}){special} - "
            f"Scheduled: {self.scheduled_tick} (Original: {self.original_scheduled_tick}), "
            f"Passengers: {self.passengers}, Delay: {self.delay_ticks()} ticks, "
            f"Status: {self.status}"
        )
