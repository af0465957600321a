import queue
import threading
from concurrent.futures import ThreadPoolExecutor

import pyttsx3

from constants import RESPONSE_VOICE

# only these tower messages are worth reading out
SPOKEN_PREFIXES = ("EMERGENCY", "GAME OVER", "LEVEL UP", "Achievement unlocked", "FAILURE", "SPECIAL FLIGHT")


def _create_engine():
    engine = pyttsx3.init()
    engine.setProperty("rate", 175)
    engine.setProperty("volume", 0.9)
    return engine


def _speak_text(text: str):
    engine = _create_engine()
    engine.say(text)
    engine.runAndWait()
    engine.stop()


class Announcer:
    """Spoken read-back of significant log messages.

    Messages go through a queue drained by a daemon worker that hands
    them to a small thread pool, so the tick loop never waits on speech.
    The worker starts on the first accepted message.
    """

    def __init__(self, enabled: bool = RESPONSE_VOICE, prefixes=SPOKEN_PREFIXES, max_workers: int = 3):
        self.enabled = enabled
        self.prefixes = tuple(prefixes)
        self._max_workers = max_workers
        self._queue: "queue.Queue[str | None]" = queue.Queue()
        self._executor = None
        self._thread = None
        self._lock = threading.Lock()

    def set_enabled(self, enabled: bool):
        self.enabled = enabled

    def toggle(self) -> bool:
        self.enabled = not self.enabled
        return self.enabled

    def wants(self, text: str) -> bool:
        return bool(text and text.strip()) and text.startswith(self.prefixes)

    def _ensure_worker(self):
        with self._lock:
            if self._thread is None:
                self._executor = ThreadPoolExecutor(max_workers=self._max_workers)
                self._thread = threading.Thread(target=self._queue_worker, daemon=True)
                self._thread.start()

    def _queue_worker(self):
        while True:
            text = self._queue.get()
            if text is None:
                self._queue.task_done()
                break
            if self.enabled:
                future = self._executor.submit(_speak_text, text)
                future.add_done_callback(self._report)
            self._queue.task_done()

    @staticmethod
    def _report(future):
        error = future.exception()
        if error is not None:
            print(f"[WARN] Voice read-back failed: {error}")

    def speak(self, text: str) -> bool:
        """Queue text to be spoken asynchronously."""
        if not self.enabled or not self.wants(text):
            return False
        self._ensure_worker()
        self._queue.put(str(text))
        return True

    def __call__(self, text: str):
        self.speak(text)

    def shutdown(self):
        if self._thread is None:
            return
        self._queue.put(None)
        self._thread.join(timeout=2.0)
        self._executor.shutdown(wait=True)
        self._thread = None
        self._executor = None
