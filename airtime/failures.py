from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from airtime.exceptions import UnknownFailureTypeError
from constants import FAILURE_THRESHOLDS, FAILURE_REASONS

if TYPE_CHECKING:
    from airtime.logger import GameLogger

EMERGENCY_RESPONSE = "EMERGENCY_RESPONSE"
RUNWAY_CLOSURE = "RUNWAY_CLOSURE"
CRITICAL_DELAY = "CRITICAL_DELAY"
FLIGHT_CANCELLATION = "FLIGHT_CANCELLATION"
FINANCIAL_SHORTFALL = "FINANCIAL_SHORTFALL"


class FailureTracker:
    """Per-category failure counts with a one-way switch to game over."""

    def __init__(self, logger: "GameLogger", thresholds: Dict[str, int] = None):
        self.logger = logger
        self._thresholds = dict(thresholds or FAILURE_THRESHOLDS)
        self._counts = {t: 0 for t in self._thresholds}
        self._listeners: List[Callable[[str, str], None]] = []
        self.is_game_over = False
        self.game_over_type: Optional[str] = None
        self.game_over_reason: Optional[str] = None

    def _check(self, failure_type):
        if failure_type not in self._thresholds:
            raise UnknownFailureTypeError(failure_type)

    def on_game_over(self, callback: Callable[[str, str], None]):
        self._listeners.append(callback)

    def record_failure(self, failure_type: str, details: str = "") -> bool:
        """Count one failure. True only on the call that ends the game."""
        self._check(failure_type)
        self._counts[failure_type] += 1
        count = self._counts[failure_type]
        threshold = self._thresholds[failure_type]
        self.logger.log(f"FAILURE: {failure_type} ({count}/{threshold}) - {details}")

        if self.is_game_over or count < threshold:
            return False

        self.is_game_over = True
        self.game_over_type = failure_type
        self.game_over_reason = FAILURE_REASONS.get(failure_type, failure_type)
        self.logger.log(f"GAME OVER: {self.game_over_reason}")
        for callback in self._listeners:
            callback(failure_type, self.game_over_reason)
        return True

    def count(self, failure_type: str) -> int:
        self._check(failure_type)
        return self._counts[failure_type]

    def threshold(self, failure_type: str) -> int:
        self._check(failure_type)
        return self._thresholds[failure_type]

    def counts(self) -> Dict[str, int]:
        return dict(self._counts)

    def percentage(self, failure_type: str) -> float:
        return self.count(failure_type) / self.threshold(failure_type) * 100.0

    def summary(self) -> str:
        return ", ".join(f"{t}: {c}/{self._thresholds[t]}" for t, c in self._counts.items())
