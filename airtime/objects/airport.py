import dataclasses
import random
from typing import Callable, Dict, List, Optional, Tuple, TYPE_CHECKING

from airtime.dispatcher import LandingDispatcher, LandingEvent, LandingMode, RunwayDecision
from airtime.emergency import EmergencyTracker
from airtime.failures import (
    FailureTracker, RUNWAY_CLOSURE, FLIGHT_CANCELLATION, FINANCIAL_SHORTFALL,
)
from airtime.generator import FlightGenerator, FlightGenerationService
from airtime.metrics import MetricsCollector
from airtime.modifiers import ModifierManager
from airtime.objects.flight import Flight, CANCEL_EMERGENCY_EXPIRED
from airtime.objects.runway import Runway
from airtime.progression import achievements as ach
from airtime.progression.achievements import Achievement, AchievementSystem
from airtime.progression.experience import ExperienceSystem
from airtime.runway_manager import RunwayManager
from airtime.scheduler import FlightScheduler
from airtime.treasury import Treasury
from airtime.utils import is_night_time
from airtime.weather import Weather
from constants import (
    AIRPORT_DEFAULT_NAME, AIRPORT_DEFAULT_ICAO, STARTING_BALANCE, STARTING_RUNWAY_TIERS,
    WEATHER_CHANGE_INTERVAL, TRAFFIC_PER_FLIGHT, LEVEL_UP_GOLD_BONUS, ACHIEVEMENT_REWARDS,
)

if TYPE_CHECKING:
    from airtime.clock import Clock
    from airtime.logger import GameLogger


@dataclasses.dataclass(frozen=True)
class AirportState:
    name: str
    icao: str
    balance: float
    game_over: bool
    game_over_reason: Optional[str]
    level: int
    xp: int
    unlocked_achievements: frozenset
    failure_counts: Tuple[Tuple[str, int], ...]
    tick: int

    def as_dict(self) -> Dict:
        return {
            "name": self.name,
            "icao": self.icao,
            "balance": self.balance,
            "game_over": self.game_over,
            "game_over_reason": self.game_over_reason,
            "level": self.level,
            "xp": self.xp,
            "unlocked_achievements": sorted(self.unlocked_achievements),
            "failure_counts": dict(self.failure_counts),
            "tick": self.tick,
        }


class Airport:
    """The simulation core: owns every subsystem and runs one tick at a time.

    Per tick: emergency deadlines, passive gold, runway countdowns, weather,
    then every due flight through the dispatcher once, then new traffic.
    After game over, ticks are ignored.
    """

    def __init__(self, logger: "GameLogger", name: str = AIRPORT_DEFAULT_NAME,
                 icao: str = AIRPORT_DEFAULT_ICAO, rng: Optional[random.Random] = None,
                 clock: Optional["Clock"] = None, decision: Optional[RunwayDecision] = None,
                 starting_balance: float = STARTING_BALANCE,
                 runway_tiers=STARTING_RUNWAY_TIERS, generate_flights: bool = True,
                 weather: Optional[Weather] = None):
        self.name = name
        self.icao = icao
        self.logger = logger
        self.rng = rng or random.Random()
        self.current_tick = 0
        self.generate_flights = generate_flights

        self.runway_manager = RunwayManager(logger, self.rng)
        self.scheduler = FlightScheduler()
        self.weather = weather or Weather(self.rng)
        self.modifiers = ModifierManager()
        self.treasury = Treasury(logger, starting_balance)
        self.failures = FailureTracker(logger)
        self.emergency = EmergencyTracker(self.failures, logger)
        self.experience = ExperienceSystem(logger)
        self.achievements = AchievementSystem(logger)
        self.metrics = MetricsCollector()
        self.dispatcher = LandingDispatcher(
            self.runway_manager, self.modifiers, self.treasury, self.weather,
            self.emergency, logger, decision=decision, failures=self.failures,
            traffic=self.traffic_volume,
        )
        self.generator = FlightGenerator(self.rng)
        self.generation = FlightGenerationService(self.generator, self.scheduler, self.runway_manager, logger)

        self._tracked = set()
        self._landed_listeners: List[Callable[[LandingEvent], None]] = []
        self._level_listeners: List[Callable[[int], None]] = []
        self._achievement_listeners: List[Callable[[Achievement], None]] = []
        self._game_over_listeners: List[Callable[[str, str], None]] = []

        self.runway_manager.on_closure(self._handle_runway_closed)
        self.treasury.on_shortfall(self._handle_shortfall)
        self.failures.on_game_over(self._handle_game_over)
        self.dispatcher.on_landed(self._handle_flight_landed)
        self.dispatcher.on_delay(self.metrics.record_delay)
        self.experience.on_level_up(self._handle_level_up)
        self.achievements.on_unlocked(self._handle_achievement_unlocked)
        self.generation.on_scheduled(self._track)

        for tier in runway_tiers:
            self.runway_manager.unlock_tier(tier)

        self.clock = None
        if clock is not None:
            self.attach_clock(clock)

    def attach_clock(self, clock: "Clock"):
        self.clock = clock
        self.dispatcher.clock = clock
        clock.on_tick(self.tick)

    # ---- outbound notifications ----

    def on_flight_landed(self, callback: Callable[[LandingEvent], None]):
        self._landed_listeners.append(callback)

    def on_level_up(self, callback: Callable[[int], None]):
        self._level_listeners.append(callback)

    def on_achievement_unlocked(self, callback: Callable[[Achievement], None]):
        self._achievement_listeners.append(callback)

    def on_game_over(self, callback: Callable[[str, str], None]):
        self._game_over_listeners.append(callback)

    # ---- inbound surface ----

    def add_modifier(self, name: str, value: float):
        self.modifiers.add_modifier(name, value)
        self.logger.log(f"Revenue modifier added: {name} x{value:.2f}")

    def add_flight_type_modifier(self, flight_type: str, value: float, name: str = None):
        self.modifiers.add_flight_type_modifier(flight_type, value, name)
        self.logger.log(f"{flight_type} revenue modifier added: x{value:.2f}")

    def add_weather_resistance(self, resistance: float):
        self.runway_manager.add_weather_resistance(resistance)

    def reduce_landing_duration(self, factor: float):
        self.runway_manager.reduce_landing_duration(factor)

    def add_xp_multiplier(self, multiplier: float):
        self.experience.add_xp_multiplier(multiplier)

    # ---- operations ----

    @property
    def is_game_over(self) -> bool:
        return self.failures.is_game_over

    def traffic_volume(self) -> int:
        return self.scheduler.active_count() * TRAFFIC_PER_FLIGHT

    def _track(self, flight: Flight):
        if id(flight) in self._tracked:
            return
        self._tracked.add(id(flight))
        flight.on_cancel(self._handle_flight_cancelled)

    def schedule_flight(self, flight: Flight, tick: Optional[int] = None):
        self._track(flight)
        self.scheduler.schedule_flight(flight, flight.scheduled_tick if tick is None else tick)

    def toggle_landing_mode(self) -> str:
        return self.dispatcher.toggle_mode()

    @property
    def landing_mode(self) -> str:
        return self.dispatcher.mode

    def set_manual(self, manual: bool):
        self.dispatcher.mode = LandingMode.MANUAL if manual else LandingMode.AUTOMATIC

    def unlock_runway(self, tier: int, name: str = None) -> Runway:
        return self.runway_manager.unlock_tier(tier, name)

    def repair_runway(self, name: str) -> bool:
        return self.runway_manager.repair_with_funds(name, self.treasury)

    def perform_maintenance(self) -> List[Runway]:
        return self.runway_manager.perform_maintenance(self.treasury)

    def spawn_flight(self) -> Flight:
        """Schedule one random flight right away, outside the generation cycle."""
        return self.generation.spawn(self.current_tick)

    def tick(self, tick: int):
        if self.failures.is_game_over:
            return
        self.current_tick = tick
        self.logger.set_tick(tick)

        self.emergency.process_emergencies(tick)
        self.treasury.accumulate_gold()
        self.runway_manager.update_status()

        if tick % WEATHER_CHANGE_INTERVAL == 0:
            previous = self.weather.current
            if self.weather.roll() != previous:
                self.logger.log(f"Weather changed from {previous} to {self.weather.current}")

        for flight in self.scheduler.due_flights(tick):
            if self.failures.is_game_over:
                return
            self.dispatcher.process_flight(flight, tick)

        if self.generate_flights and not self.failures.is_game_over:
            self.generation.generate_if_needed(tick)

    def state(self) -> AirportState:
        return AirportState(
            name=self.name,
            icao=self.icao,
            balance=self.treasury.balance,
            game_over=self.failures.is_game_over,
            game_over_reason=self.failures.game_over_reason,
            level=self.experience.level,
            xp=self.experience.xp,
            unlocked_achievements=self.achievements.unlocked_ids(),
            failure_counts=tuple(self.failures.counts().items()),
            tick=self.current_tick,
        )

    # ---- reactions ----

    def _handle_runway_closed(self, runway: Runway):
        self.failures.record_failure(RUNWAY_CLOSURE, f"Runway {runway.name} fully degraded")

    def _handle_shortfall(self, amount: float, reason: str):
        self.failures.record_failure(FINANCIAL_SHORTFALL, f"Could not pay {amount:.2f} for {reason}")

    def _handle_flight_cancelled(self, flight: Flight):
        self.logger.log(f"Flight {flight.flight_number} has been cancelled: {flight.cancel_reason}")
        self.achievements.reset_consecutive()
        self.metrics.record_cancellation(flight)
        if flight.cancel_cause != CANCEL_EMERGENCY_EXPIRED:
            self.failures.record_failure(FLIGHT_CANCELLATION, f"Flight {flight.flight_number} cancelled")

    def _handle_game_over(self, failure_type: str, reason: str):
        for callback in self._game_over_listeners:
            callback(failure_type, reason)

    def _handle_flight_landed(self, event: LandingEvent):
        flight = event.flight
        wear = event.runway.wear
        simultaneous = len(self.scheduler.due_flights(event.tick))
        weather = self.weather.current

        xp = self.experience.calculate_flight_xp(flight, weather, wear, event.on_time, event.perfect, simultaneous)
        self.experience.add_experience(xp)
        self.achievements.record_flight_landed(
            flight, event.perfect, wear, weather, is_night_time(event.tick), simultaneous
        )
        self.metrics.record_landing(event)

        for callback in self._landed_listeners:
            callback(event)

    def _handle_level_up(self, level: int):
        bonus = LEVEL_UP_GOLD_BONUS * level
        self.treasury.add_funds(bonus, f"Level Up Bonus (Level {level})")
        self.logger.log(f"AIRPORT LEVEL UP! Now Level {level}, gold bonus {bonus:.2f}")
        self._unlock_features_for_level(level)
        for callback in self._level_listeners:
            callback(level)

    def _unlock_features_for_level(self, level: int):
        if level == 3:
            self.add_modifier("High Airport Reputation", 1.25)
            self.reduce_landing_duration(0.96)
        elif level in (4, 5, 6):
            self.reduce_landing_duration(0.96)
        elif level == 7:
            self.add_weather_resistance(0.3)
        elif level == 10:
            self.add_modifier("Flight Specialist", 1.5)

        if level > 3 and level % 2 == 0 and level != 10:
            self.add_modifier(f"Level {level} Efficiency", 1.0 + level * 0.01)

    def _handle_achievement_unlocked(self, achievement: Achievement):
        self._apply_reward(achievement)
        for callback in self._achievement_listeners:
            callback(achievement)

    def _apply_reward(self, achievement: Achievement):
        step = ACHIEVEMENT_REWARDS.get(achievement.kind, 0.0) * achievement.tier
        kind = achievement.kind

        if kind == ach.FLIGHT_TYPE:
            self.add_flight_type_modifier(achievement.key, 1.0 + step, achievement.name)
        elif kind == ach.EMERGENCY_LANDINGS:
            self.add_flight_type_modifier("EMERGENCY", 1.0 + step, achievement.name)
        elif kind in (ach.PERFECT_LANDINGS, ach.CONSECUTIVE_FLIGHTS):
            self.add_xp_multiplier(max(self.experience.xp_multiplier, 1.0 + step))
        elif kind == ach.RUNWAY_EXPERT:
            self.runway_manager.reduce_repair_duration(max(0.1, 1.0 - step))
        elif kind == ach.WEATHER_MASTER:
            self.add_weather_resistance(step)
        elif kind == ach.SIMULTANEOUS_FLIGHTS:
            self.reduce_landing_duration(max(0.1, 1.0 - step))
        elif kind in (ach.PASSENGER_MILESTONE, ach.NIGHT_FLIGHT):
            self.add_modifier(achievement.name, 1.0 + step)
