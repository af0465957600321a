import unittest
from unittest.mock import MagicMock, patch

from airtime.ai.voice import Announcer


class TestAnnouncer(unittest.TestCase):
    def test_disabled_by_default_is_silent(self):
        announcer = Announcer(enabled=False)
        self.assertFalse(announcer.speak("EMERGENCY: Flight BA1"))

    def test_only_significant_messages(self):
        announcer = Announcer(enabled=True)
        self.assertTrue(announcer.wants("GAME OVER: The airport ran out of money"))
        self.assertFalse(announcer.wants("Flight BA1 landed successfully on 01L"))
        self.assertFalse(announcer.wants("   "))

    @patch("airtime.ai.voice.pyttsx3.init")
    def test_speech_runs_off_thread(self, init):
        engine = MagicMock()
        init.return_value = engine
        announcer = Announcer(enabled=True)

        self.assertTrue(announcer.speak("LEVEL UP! Airport is now level 2"))
        announcer.shutdown()

        engine.say.assert_called_once_with("LEVEL UP! Airport is now level 2")
        engine.runAndWait.assert_called_once()

    def test_toggle(self):
        announcer = Announcer(enabled=False)
        self.assertTrue(announcer.toggle())
        self.assertFalse(announcer.toggle())


if __name__ == "__main__":
    unittest.main()
