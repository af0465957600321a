import os
import sys
import time
import queue
import random
import argparse
import threading
import traceback

from airtime.ai.controller import DispatchPolicy
from airtime.ai.voice import Announcer
from airtime.clock import Clock
from airtime.command_parser import CommandParser
from airtime.exceptions import AirportError
from airtime.logger import GameLogger, cleanup_old_logs
from airtime.metrics import performance_snapshot
from airtime.objects.airport import Airport
from airtime.objects.command import AUTO, DELAY
from airtime.utils import get_callsign_from_iata, game_time
from constants import (
    SIM_SPEED, MAX_TICKS, ERROR_LOG_FILE, RESPONSE_VOICE, ECHO_LOG,
    LOG_DIR, LOG_RETENTION_DAYS, TICK_INTERVAL_MS,
    AIRPORT_DEFAULT_NAME, AIRPORT_DEFAULT_ICAO,
    PERFORMANCE_REPORT_INTERVAL, RECENT_LOG_LINES, HELP_TEXT,
)

os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "1"

fatal_error = None
_active_clock = None


def handle_exception(exc_type, exc_value, exc_traceback):
    """Log uncaught exceptions and freeze the sim gracefully."""
    global fatal_error

    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
    error_text = "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))
    entry = f"[{timestamp}]\n{error_text}\n{'-' * 60}\n"

    with open(ERROR_LOG_FILE, "a", encoding="utf-8") as f:
        f.write(entry)

    fatal_error = entry
    if _active_clock is not None:
        _active_clock.stop()
    print(f"[ERROR] Fatal error logged, see {ERROR_LOG_FILE}")


class ConsoleInput:
    """Reads stdin on a daemon thread so the tick loop can poll it."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self.lines: "queue.Queue[str | None]" = queue.Queue()
        self._thread = threading.Thread(target=self._reader, daemon=True)

    def start(self):
        self._thread.start()
        return self

    def _reader(self):
        for line in self.stream:
            self.lines.put(line.rstrip("\n"))
        self.lines.put(None)

    def poll(self):
        try:
            return self.lines.get_nowait()
        except queue.Empty:
            return ""

    def wait(self, timeout=None):
        try:
            return self.lines.get(timeout=timeout)
        except queue.Empty:
            return ""


class ConsoleRunwayPrompt:
    """Manual-dispatch decision source backed by the console.

    An unusable answer is handed back as the parsed command rather than a
    runway, which the dispatcher treats as invalid and lands automatically.
    """

    def __init__(self, console: ConsoleInput, parser: CommandParser, airport: Airport,
                 policy: DispatchPolicy = None, timeout: float = None):
        self.console = console
        self.parser = parser
        self.airport = airport
        self.policy = policy or DispatchPolicy()
        self.timeout = timeout

    def __call__(self, flight, runways):
        spoken = get_callsign_from_iata(flight.flight_number)
        print(f"\n{spoken} | {flight}")
        for i, runway in enumerate(runways, start=1):
            print(f"  {i}. {runway.detailed_status()} ({runway.length}m)")
        print("Runway? [L <RWY> | <N> | D | A]")

        text = self.console.wait(self.timeout)
        if text is None:
            return None

        selection = self.parser.resolve(text, runways, self.airport.runway_manager.runways())
        print(f"{spoken}: {selection.ack_msg}")
        if selection.command.type == AUTO:
            return self.policy(flight, runways)
        if selection.command.type == DELAY:
            return None
        return selection.runway or selection.command


def print_status(airport: Airport, logger: GameLogger):
    state = airport.state()
    print("=" * 60)
    print(f"{state.name} ({state.icao})  tick {state.tick}  {game_time(state.tick)}  "
          f"weather {airport.weather}  mode {airport.landing_mode}")
    print(f"Balance {state.balance:.2f} | {airport.experience.status_string()}")
    for runway in airport.runway_manager.runways():
        print(f"  {runway.detailed_status()}")
    for number, remaining, _ in airport.emergency.active_emergencies(state.tick):
        print(f"  EMERGENCY {number}: {remaining} ticks left")
    print(f"Failures: {airport.failures.summary()}")
    for line in logger.recent(RECENT_LOG_LINES):
        print(f"  {line}")


def print_performance(airport: Airport, clock: Clock):
    perf = performance_snapshot()
    print(f"[INFO] {clock.ticks_per_second:.2f} ticks/s x{clock.speed_multiplier:g} | "
          f"CPU {perf['cpu_percent']:.0f}% | MEM {perf['used_mem_mb']:.0f}/{perf['total_mem_mb']:.0f} MB")
    for line in airport.metrics.report_lines(airport.runway_manager):
        print(f"[INFO] {line}")


def handle_console_command(text: str, state: dict) -> None:
    airport, clock, announcer = state["airport"], state["clock"], state["announcer"]
    parts = text.strip().upper().split()
    if not parts:
        return

    cmd = parts[0]
    if cmd == "Q":
        state["quit"] = True
        clock.stop()
    elif cmd == "P":
        if clock.is_running():
            clock.pause()
            print("[INFO] Paused, P to resume")
        else:
            state["resume"] = True
    elif cmd == "M":
        airport.toggle_landing_mode()
    elif cmd == "V":
        print(f"[INFO] Voice read-back {'enabled' if announcer.toggle() else 'disabled'}")
    elif cmd == "S" and len(parts) > 1:
        try:
            clock.set_speed_multiplier(float(parts[1]))
            print(f"[INFO] Sim speed x{clock.speed_multiplier:g}")
        except ValueError as e:
            print(f"[WARN] {e}")
    elif cmd == "R" and len(parts) > 1:
        try:
            airport.repair_runway(parts[1])
        except AirportError as e:
            print(f"[WARN] {e}")
    elif cmd == "R":
        repaired = airport.perform_maintenance()
        print(f"[INFO] Maintenance repaired {len(repaired)} runway(s)")
    elif cmd == "F":
        flight = airport.spawn_flight()
        print(f"[INFO] {flight.flight_number} inbound for tick {flight.scheduled_tick}")
    elif cmd in ("H", "HELP"):
        print(HELP_TEXT)
    elif cmd == "I":
        print_status(airport, airport.logger)
    else:
        print(f"[WARN] Unknown console command '{text.strip()}'")


def build_parser():
    parser = argparse.ArgumentParser(description="Tick-driven airport operations game")
    parser.add_argument("--name", default=AIRPORT_DEFAULT_NAME)
    parser.add_argument("--icao", default=AIRPORT_DEFAULT_ICAO)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--speed", type=float, default=SIM_SPEED)
    parser.add_argument("--ticks", type=int, default=MAX_TICKS)
    parser.add_argument("--manual", action="store_true", help="start in manual landing mode")
    parser.add_argument("--auto-controller", action="store_true",
                        help="answer manual landings with the automated policy instead of the console")
    parser.add_argument("--voice", action="store_true", default=RESPONSE_VOICE)
    parser.add_argument("--quiet", action="store_true", help="do not echo the event log")
    return parser


def main(argv=None):
    global _active_clock
    args = build_parser().parse_args(argv)

    cleanup_old_logs(LOG_DIR, LOG_RETENTION_DAYS)
    logger = GameLogger(LOG_DIR, echo=ECHO_LOG and not args.quiet)
    announcer = Announcer(enabled=args.voice)
    logger.add_listener(announcer)

    clock = Clock(TICK_INTERVAL_MS)
    clock.set_speed_multiplier(args.speed)
    _active_clock = clock

    airport = Airport(logger, args.name, args.icao, rng=random.Random(args.seed))
    console = ConsoleInput().start()
    if args.auto_controller:
        airport.dispatcher.set_decision_source(DispatchPolicy(hold_on_worn=True))
    else:
        airport.dispatcher.set_decision_source(ConsoleRunwayPrompt(console, CommandParser(), airport))
    airport.set_manual(args.manual)

    state = {"airport": airport, "clock": clock, "announcer": announcer, "quit": False, "resume": False}

    def host_tick(tick):
        text = console.poll()
        while text:
            handle_console_command(text, state)
            text = console.poll()
        if text is None:
            state["quit"] = True
            clock.stop()
        if state["quit"]:
            return
        airport.tick(tick)
        if tick % PERFORMANCE_REPORT_INTERVAL == 0:
            print_status(airport, logger)
            print_performance(airport, clock)

    clock.on_tick(host_tick)
    airport.dispatcher.clock = clock
    airport.on_game_over(lambda kind, reason: clock.stop())

    print(HELP_TEXT)
    ran = 0
    while not state["quit"] and not airport.is_game_over and fatal_error is None:
        remaining = None if args.ticks is None else args.ticks - ran
        if remaining is not None and remaining <= 0:
            break
        ran += clock.run(max_ticks=remaining, should_continue=lambda: not state["quit"])

        if clock.is_paused():
            state["resume"] = False
            while not state["resume"] and not state["quit"]:
                text = console.wait()
                if text is None:
                    state["quit"] = True
                else:
                    handle_console_command(text, state)

    print_status(airport, logger)
    print_performance(airport, clock)
    if airport.is_game_over:
        print(f"GAME OVER: {airport.failures.game_over_reason}")
    announcer.shutdown()
    return airport.state()


sys.excepthook = handle_exception

if __name__ == "__main__":
    main()
