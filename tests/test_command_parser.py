import unittest

from airtime.command_parser import CommandParser
from airtime.objects.command import LAND, DELAY, AUTO, INVALID
from airtime.objects.runway import runway_for_tier
from constants import MSG_NO_INPUT, MSG_DELAY, MSG_AUTO


class TestCommandParser(unittest.TestCase):
    def setUp(self):
        self.parser = CommandParser()
        self.short = runway_for_tier(1)
        self.long = runway_for_tier(2)
        self.all = [self.short, self.long]

    def test_parse(self):
        cases = {
            "L 02R": (LAND, "02R", None),
            "land 01l": (LAND, "01L", None),
            "02r": (LAND, "02R", None),
            "2": (LAND, "2", "INDEX"),
            "hold": (DELAY, None, None),
            "d": (DELAY, None, None),
            "a": (AUTO, None, None),
            "L": (INVALID, "L", None),
            "go around now": (INVALID, "go around now", None),
        }
        for text, expected in cases.items():
            with self.subTest(text=text):
                cmd = self.parser.parse(text)
                self.assertEqual((cmd.type, cmd.value, cmd.extra), expected)

    def test_empty_input_delays(self):
        selection = self.parser.resolve("   ", self.all)
        self.assertEqual(selection.command.type, DELAY)
        self.assertEqual(selection.ack_msg, MSG_NO_INPUT)

    def test_select_by_name(self):
        selection = self.parser.resolve("L 02r", self.all, self.all)
        self.assertIs(selection.runway, self.long)
        self.assertIn("02R", selection.ack_msg)

    def test_select_by_index_is_one_based(self):
        self.assertIs(self.parser.resolve("1", self.all).runway, self.short)
        self.assertIs(self.parser.resolve("2", self.all).runway, self.long)
        bad = self.parser.resolve("3", self.all)
        self.assertIsNone(bad.runway)
        self.assertEqual(bad.command.type, INVALID)

    def test_known_but_not_offered(self):
        selection = self.parser.resolve("01L", [self.long], self.all)
        self.assertIsNone(selection.runway)
        self.assertEqual(selection.command.type, INVALID)
        self.assertIn("cannot accept", selection.ack_msg)

    def test_unknown_runway(self):
        selection = self.parser.resolve("09Z", self.all, self.all)
        self.assertIsNone(selection.runway)
        self.assertIn("not found", selection.ack_msg)

    def test_delay_and_auto_messages(self):
        self.assertEqual(self.parser.resolve("D", self.all).ack_msg, MSG_DELAY)
        self.assertEqual(self.parser.resolve("AUTO", self.all).ack_msg, MSG_AUTO)


if __name__ == "__main__":
    unittest.main()
