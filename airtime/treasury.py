from typing import Callable, List, TYPE_CHECKING

from airtime.exceptions import InvalidAmountError
from constants import STARTING_BALANCE, GOLD_PER_TICK

if TYPE_CHECKING:
    from airtime.logger import GameLogger

TX_INCOME = "INCOME"
TX_EXPENSE = "EXPENSE"
TX_PASSIVE = "PASSIVE"
TX_REFUSED = "REFUSED"


class Treasury:
    """Airport gold balance. Every movement is written to the transaction sink."""

    def __init__(self, sink: "GameLogger", starting_balance: float = STARTING_BALANCE,
                 gold_per_tick: float = GOLD_PER_TICK):
        self.sink = sink
        self._balance = float(starting_balance)
        self.gold_per_tick = gold_per_tick
        self.gold_multiplier = 1.0
        self._shortfall_listeners: List[Callable[[float, str], None]] = []

    @property
    def balance(self) -> float:
        return self._balance

    def on_shortfall(self, callback: Callable[[float, str], None]):
        self._shortfall_listeners.append(callback)

    def add_funds(self, amount: float, source: str, tx_type: str = TX_INCOME):
        if amount < 0:
            raise InvalidAmountError(amount)
        self._balance += amount
        self.sink.record_transaction(amount, source, tx_type, self._balance)

    def deduct_funds(self, amount: float, reason: str) -> bool:
        if amount < 0:
            raise InvalidAmountError(amount)
        if amount > self._balance:
            self.sink.record_transaction(-amount, reason, TX_REFUSED, self._balance, overdraft=True)
            self.sink.log(f"Insufficient funds for {reason}: need {amount:.2f}, have {self._balance:.2f}")
            for callback in self._shortfall_listeners:
                callback(amount, reason)
            return False
        self._balance -= amount
        self.sink.record_transaction(-amount, reason, TX_EXPENSE, self._balance)
        return True

    def accumulate_gold(self) -> float:
        earned = self.gold_per_tick * self.gold_multiplier
        if earned > 0:
            self._balance += earned
            self.sink.record_transaction(earned, "Passive income", TX_PASSIVE, self._balance)
        return earned

    def add_gold_multiplier(self, multiplier: float):
        if multiplier <= 0:
            raise InvalidAmountError(multiplier, "Gold multiplier must be positive")
        self.gold_multiplier *= multiplier
