import io
import random
import unittest
from unittest.mock import MagicMock, patch

import main
from airtime.ai.controller import DispatchPolicy
from airtime.clock import Clock
from airtime.command_parser import CommandParser
from airtime.dispatcher import LandingMode
from airtime.logger import GameLogger
from airtime.objects.aircraft import Aircraft
from airtime.objects.airport import Airport
from airtime.objects.command import Command
from airtime.objects.flight import Flight


def make_flight(size="SMALL"):
    return Flight("BA101", Aircraft("BA101", size), "COMMERCIAL", "STANDARD", 10, 100)


@patch("builtins.print", MagicMock())
class TestConsoleRunwayPrompt(unittest.TestCase):
    def setUp(self):
        self.airport = Airport(GameLogger(log_dir=None, echo=False), rng=random.Random(1),
                               generate_flights=False)
        self.short, self.long = self.airport.runway_manager.runways()

    def prompt(self, text):
        console = main.ConsoleInput(io.StringIO(text)).start()
        return main.ConsoleRunwayPrompt(console, CommandParser(), self.airport, DispatchPolicy(), timeout=2)

    def test_named_runway(self):
        self.assertIs(self.prompt("L 02R\n")(make_flight(), [self.short, self.long]), self.long)

    def test_index(self):
        self.assertIs(self.prompt("1\n")(make_flight(), [self.short, self.long]), self.short)

    def test_delay(self):
        self.assertIsNone(self.prompt("D\n")(make_flight(), [self.short, self.long]))

    def test_auto_uses_policy(self):
        self.long.add_wear(20)
        self.assertIs(self.prompt("A\n")(make_flight(), [self.long, self.short]), self.short)

    def test_unusable_answer_is_not_a_runway(self):
        answer = self.prompt("L 09Z\n")(make_flight(), [self.short, self.long])
        self.assertIsInstance(answer, Command)

    def test_closed_input_holds(self):
        self.assertIsNone(self.prompt("")(make_flight(), [self.short]))


@patch("builtins.print", MagicMock())
class TestConsoleCommands(unittest.TestCase):
    def setUp(self):
        self.airport = Airport(GameLogger(log_dir=None, echo=False), rng=random.Random(1),
                               generate_flights=False)
        self.clock = MagicMock()
        self.state = {"airport": self.airport, "clock": self.clock, "announcer": MagicMock(),
                      "quit": False, "resume": False}

    def test_toggle_mode(self):
        main.handle_console_command("m", self.state)
        self.assertEqual(self.airport.landing_mode, LandingMode.MANUAL)

    def test_quit(self):
        main.handle_console_command("Q", self.state)
        self.assertTrue(self.state["quit"])
        self.clock.stop.assert_called_once()

    def test_pause_and_resume(self):
        self.clock.is_running.return_value = True
        main.handle_console_command("P", self.state)
        self.clock.pause.assert_called_once()
        self.clock.is_running.return_value = False
        main.handle_console_command("P", self.state)
        self.assertTrue(self.state["resume"])

    def test_speed(self):
        self.clock.speed_multiplier = 2.5
        main.handle_console_command("S 2.5", self.state)
        self.clock.set_speed_multiplier.assert_called_once_with(2.5)

    def test_speed_on_real_clock(self):
        clock = Clock(interval_ms=500, pacer=MagicMock())
        self.state["clock"] = clock
        main.handle_console_command("S 2.5", self.state)
        self.assertEqual(clock.speed_multiplier, 2.5)
        for bad in ("S inf", "S nan", "S 0", "S fast"):
            main.handle_console_command(bad, self.state)
        self.assertEqual(clock.speed_multiplier, 2.5)
        self.assertEqual(clock.interval_ms, 200)

    def test_repair_unknown_runway_is_reported(self):
        main.handle_console_command("R 09Z", self.state)
        self.assertFalse(self.state["quit"])

    def test_repair_spends_gold(self):
        runway = self.airport.runway_manager.runways()[0]
        runway.add_wear(40)
        main.handle_console_command("R 01L", self.state)
        self.assertEqual(runway.wear, 0)
        self.assertEqual(self.airport.treasury.balance, 5000 - 600)

    def test_maintenance_sweep(self):
        short, long = self.airport.runway_manager.runways()
        short.add_wear(60)
        long.add_wear(20)
        main.handle_console_command("r", self.state)
        self.assertEqual(short.wear, 0)
        self.assertEqual(long.wear, 20)
        self.assertEqual(self.airport.treasury.balance, 5000 - 900)

    def test_spawn_flight(self):
        main.handle_console_command("F", self.state)
        self.assertEqual(self.airport.scheduler.count(), 1)
        self.assertEqual(self.airport.scheduler.active_count(), 1)


class TestArgs(unittest.TestCase):
    def test_defaults(self):
        args = main.build_parser().parse_args(["--seed", "3", "--manual", "--ticks", "50"])
        self.assertEqual(args.seed, 3)
        self.assertTrue(args.manual)
        self.assertEqual(args.ticks, 50)
        self.assertFalse(args.auto_controller)


if __name__ == "__main__":
    unittest.main()
