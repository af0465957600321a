import math
import threading
from typing import Callable, Optional

import pygame

from airtime.exceptions import InvalidSpeedError
from constants import TICK_INTERVAL_MS


class Clock:
    """Monotonic tick counter paced in real time.

    Each tick runs the registered callback to completion before the next
    one is considered, so a slow callback defers ticks instead of
    dropping them. `step()` is serialised with a lock for hosts that
    drive ticks from a timer thread.
    """

    def __init__(self, interval_ms: float = TICK_INTERVAL_MS, pacer=None):
        self.base_interval_ms = interval_ms
        self.interval_ms = float(interval_ms)
        self.speed_multiplier = 1.0
        self.current_tick = 0
        self._callback: Optional[Callable[[int], None]] = None
        self._running = False
        self._paused = False
        self._lock = threading.Lock()
        self._pacer = pacer

    def on_tick(self, callback: Callable[[int], None]):
        self._callback = callback

    def start(self):
        if not self._running:
            self._running = True
            self._paused = False

    def pause(self):
        if self._running:
            self._running = False
            self._paused = True

    def stop(self):
        self._running = False
        self._paused = False

    def is_running(self) -> bool:
        return self._running

    def is_paused(self) -> bool:
        return self._paused

    def set_speed_multiplier(self, factor: float):
        if factor is None or not math.isfinite(factor) or factor <= 0:
            raise InvalidSpeedError(factor)
        self.speed_multiplier = float(factor)
        self.interval_ms = self.base_interval_ms / self.speed_multiplier

    @property
    def ticks_per_second(self) -> float:
        return 1000.0 / self.interval_ms

    def step(self) -> int:
        with self._lock:
            self.current_tick += 1
            if self._callback:
                self._callback(self.current_tick)
            return self.current_tick

    def _wait(self):
        if self._pacer is None:
            self._pacer = pygame.time.Clock()
        self._pacer.tick(self.ticks_per_second)

    def run(self, max_ticks: Optional[int] = None, should_continue: Optional[Callable[[], bool]] = None) -> int:
        """Drive ticks until paused, stopped, `max_ticks` reached or `should_continue` says no."""
        self.start()
        ran = 0
        while self._running:
            if max_ticks is not None and ran >= max_ticks:
                break
            if should_continue is not None and not should_continue():
                break
            self._wait()
            if not self._running:
                break
            self.step()
            ran += 1
        return ran
