import dataclasses
from typing import Callable, List, Optional, Sequence, TYPE_CHECKING

from airtime.failures import CRITICAL_DELAY
from airtime.objects.flight import Flight
from airtime.objects.runway import Runway
from constants import NO_RUNWAY_RETRY_DELAY, CRITICAL_DELAY_TICKS

if TYPE_CHECKING:
    from airtime.clock import Clock
    from airtime.emergency import EmergencyTracker
    from airtime.failures import FailureTracker
    from airtime.logger import GameLogger
    from airtime.modifiers import ModifierManager, RevenueBreakdown
    from airtime.runway_manager import RunwayManager
    from airtime.treasury import Treasury
    from airtime.weather import Weather

# (flight, eligible runways) -> chosen runway, or None to hold
RunwayDecision = Callable[[Flight, List[Runway]], Optional[Runway]]

_INVALID = object()


class LandingMode:
    AUTOMATIC = "AUTOMATIC"
    MANUAL = "MANUAL"


@dataclasses.dataclass(frozen=True)
class LandingEvent:
    flight: Flight
    runway: Runway
    on_time: bool
    tick: int
    revenue: float
    perfect: bool = False
    breakdown: Optional["RevenueBreakdown"] = None


@dataclasses.dataclass(frozen=True)
class DelayEvent:
    flight: Flight
    ticks: int
    reason: str
    tick: int


class LandingDispatcher:
    """Runs one flight's landing attempt per call.

    Contention never raises: every failed attempt holds the flight for
    `retry_delay` ticks and leaves cancellation to the flight's own delay
    threshold or the emergency tracker. In manual mode the clock is
    paused while the decision source is consulted; anything it returns
    that is not one of the offered runways falls back to automatic
    selection.
    """

    def __init__(self, runway_manager: "RunwayManager", modifiers: "ModifierManager",
                 treasury: "Treasury", weather: "Weather", emergency: "EmergencyTracker",
                 logger: "GameLogger", clock: Optional["Clock"] = None,
                 decision: Optional[RunwayDecision] = None,
                 failures: Optional["FailureTracker"] = None,
                 traffic: Optional[Callable[[], int]] = None,
                 mode: str = LandingMode.AUTOMATIC,
                 force_manual_for_emergencies: bool = True,
                 force_manual_for_special: bool = True,
                 retry_delay: int = NO_RUNWAY_RETRY_DELAY,
                 critical_delay: int = CRITICAL_DELAY_TICKS,
                 award_landing_bonuses: bool = False):
        self.runway_manager = runway_manager
        self.modifiers = modifiers
        self.treasury = treasury
        self.weather = weather
        self.emergency = emergency
        self.logger = logger
        self.clock = clock
        self.decision = decision
        self.failures = failures
        self.traffic = traffic or (lambda: 0)
        self.mode = mode
        self.force_manual_for_emergencies = force_manual_for_emergencies
        self.force_manual_for_special = force_manual_for_special
        self.retry_delay = retry_delay
        self.critical_delay = critical_delay
        self.award_landing_bonuses = award_landing_bonuses
        self._landed_listeners: List[Callable[[LandingEvent], None]] = []
        self._delay_listeners: List[Callable[[DelayEvent], None]] = []

    # ---- observers ----

    def on_landed(self, callback: Callable[[LandingEvent], None]):
        self._landed_listeners.append(callback)

    def on_delay(self, callback: Callable[[DelayEvent], None]):
        self._delay_listeners.append(callback)

    # ---- mode ----

    def set_decision_source(self, decision: Optional[RunwayDecision]):
        self.decision = decision

    def toggle_mode(self) -> str:
        self.mode = LandingMode.MANUAL if self.mode == LandingMode.AUTOMATIC else LandingMode.AUTOMATIC
        self.logger.log(f"Landing mode switched to {self.mode}.")
        return self.mode

    def requires_manual(self, flight: Flight) -> bool:
        if self.mode == LandingMode.MANUAL:
            return True
        if flight.is_emergency and self.force_manual_for_emergencies:
            return True
        return flight.is_special and self.force_manual_for_special

    # ---- dispatch ----

    def process_flight(self, flight: Flight, tick: int) -> bool:
        if flight.is_terminal:
            return False

        overdue = tick - flight.scheduled_tick
        on_time = overdue <= 0
        if overdue > 0:
            self.logger.log(f"Flight {flight.flight_number} is {overdue} ticks past scheduled landing time.")
            self._delay(flight, overdue, "Past scheduled landing time", tick)
            if flight.is_terminal:
                return False

        if flight.is_emergency and not self.emergency.is_active(flight.flight_number):
            self.emergency.register(flight, tick)

        if not self.runway_manager.can_land(flight.aircraft):
            self.logger.log(f"Flight {flight.flight_number} delayed, no available runway.")
            self._delay(flight, self.retry_delay, "No available runway", tick)
            return False

        if flight.is_special:
            self.logger.log(f"SPECIAL FLIGHT {flight.flight_number} inbound, double revenue!")

        if self.requires_manual(flight):
            return self._land_manual(flight, tick, on_time)
        return self._land_automatic(flight, tick, on_time)

    def _land_automatic(self, flight: Flight, tick: int, on_time: bool) -> bool:
        runway = self.runway_manager.available_runway(flight.aircraft)
        if runway is None:
            self.logger.log(f"Flight {flight.flight_number} delayed, no runway found for automatic landing.")
            self._delay(flight, self.retry_delay, "No suitable runway for automatic landing", tick)
            return False
        return self._commit(flight, runway, tick, on_time)

    def _land_manual(self, flight: Flight, tick: int, on_time: bool) -> bool:
        eligible = self.runway_manager.available_runways(flight.aircraft)
        if not eligible:
            self.logger.log(f"Flight {flight.flight_number} delayed, no runways available for manual selection.")
            self._delay(flight, self.retry_delay, "No available runways for manual selection", tick)
            return False

        if self.decision is None:
            self.logger.log(f"No controller for flight {flight.flight_number}, selecting runway automatically")
            return self._land_automatic(flight, tick, on_time)

        choice = self._ask(flight, eligible)

        if choice is None:
            self._delay(flight, self.retry_delay, "Controller decision", tick)
            return False
        if not isinstance(choice, Runway) or not any(r is choice for r in eligible):
            self.logger.log(f"Invalid runway selection for flight {flight.flight_number}, selecting automatically")
            return self._land_automatic(flight, tick, on_time)
        return self._commit(flight, choice, tick, on_time)

    def _ask(self, flight: Flight, eligible: Sequence[Runway]):
        was_running = self.clock is not None and self.clock.is_running()
        if was_running:
            self.clock.pause()
            self.logger.log(f"Game paused for runway selection (Flight {flight.flight_number})")
        try:
            return self.decision(flight, list(eligible))
        except Exception as e:
            self.logger.log(f"Runway selection for flight {flight.flight_number} failed: {e}")
            return _INVALID
        finally:
            if was_running:
                self.clock.start()
                self.logger.log("Game resumed after runway selection")

    def _commit(self, flight: Flight, runway: Runway, tick: int, on_time: bool) -> bool:
        if not runway.can_accept(flight.aircraft):
            self.logger.log(
                f"Flight {flight.flight_number} delayed, selected runway {runway.name} became occupied."
            )
            self._delay(flight, self.retry_delay, "Selected runway became occupied", tick)
            return False

        perfect = on_time and not flight.is_delayed()
        traffic = self.traffic()
        if not flight.mark_landed(tick):
            return False

        self.runway_manager.handle_landing(runway.name, self.weather.impact(), traffic, flight.flight_number)

        bonuses = self.award_landing_bonuses
        breakdown = self.modifiers.calculate_revenue(
            flight, tick, on_time=bonuses and on_time, perfect_landing=bonuses and perfect
        )
        special = " [SPECIAL FLIGHT - DOUBLE REVENUE]" if flight.is_special else ""
        self.treasury.add_funds(breakdown.final, f"Flight Revenue{special}")
        self.logger.log(
            f"Flight {flight.flight_number}{special} landed successfully on {runway.name} "
            f"and generated {breakdown.final:.2f} in revenue."
        )

        if flight.is_emergency:
            self.emergency.mark_handled(flight.flight_number)

        event = LandingEvent(flight, runway, on_time, tick, breakdown.final, perfect, breakdown)
        for callback in self._landed_listeners:
            callback(event)
        return True

    def _delay(self, flight: Flight, ticks: int, reason: str, tick: int):
        flight.delay(ticks)
        self.logger.log(f"Flight {flight.flight_number} delayed by {ticks} ticks: {reason}")

        if (self.failures is not None and not flight.critical_delay_reported
                and flight.delay_ticks() >= self.critical_delay):
            flight.critical_delay_reported = True
            self.failures.record_failure(
                CRITICAL_DELAY, f"Flight {flight.flight_number} delayed {flight.delay_ticks()} ticks"
            )

        event = DelayEvent(flight, ticks, reason, tick)
        for callback in self._delay_listeners:
            callback(event)

