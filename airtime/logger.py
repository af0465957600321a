import os
import time
import datetime
import dataclasses
from collections import deque
from typing import Callable, List, Optional

from constants import LOG_DIR, LOG_RETENTION_DAYS, LOG_HISTORY_LIMIT, ECHO_LOG


def cleanup_old_logs(log_dir=LOG_DIR, days=LOG_RETENTION_DAYS) -> int:
    if not log_dir or not os.path.exists(log_dir):
        return 0

    now = time.time()
    cutoff = now - (days * 86400)

    deleted = 0
    for fname in os.listdir(log_dir):
        fpath = os.path.join(log_dir, fname)
        if not os.path.isfile(fpath):
            continue

        try:
            if os.path.getmtime(fpath) < cutoff:
                os.remove(fpath)
                deleted += 1
        except OSError as e:
            print(f"[WARN] Could not remove old log {fpath}: {e}")

    if deleted:
        print(f"[INFO] Deleted {deleted} old log file(s) from {log_dir}")
    return deleted


@dataclasses.dataclass(frozen=True)
class Transaction:
    amount: float
    reason: str
    type: str
    balance: float
    overdraft: bool = False
    tick: Optional[int] = None


class GameLogger:
    """Event and transaction sink.

    Every message is stamped, kept in a bounded history, appended to the
    session log file when a log directory is set and passed on to any
    listeners (voice read-back). Transactions are kept separately.
    """

    def __init__(self, log_dir: Optional[str] = LOG_DIR, echo: bool = ECHO_LOG,
                 history_limit: int = LOG_HISTORY_LIMIT, session_name: Optional[str] = None):
        self.echo = echo
        self.tick = 0
        self._entries: deque = deque(maxlen=history_limit)
        self._transactions: deque = deque(maxlen=history_limit)
        self._listeners: List[Callable[[str], None]] = []
        self.session_log_path = None

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            session_name = session_name or datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
            self.session_log_path = os.path.join(log_dir, f"session_{session_name}.txt")

    def add_listener(self, callback: Callable[[str], None]):
        self._listeners.append(callback)

    def set_tick(self, tick: int):
        self.tick = tick

    def log(self, message: str):
        stamp = datetime.datetime.now().strftime("%H:%M:%S")
        line = f"[{stamp}] T{self.tick:05d} {message}"
        self._entries.append(line)

        if self.session_log_path:
            with open(self.session_log_path, "a", encoding="utf-8") as f:
                f.write(f"{line}\n")

        if self.echo:
            print(line)

        for callback in self._listeners:
            callback(message)

    def record_transaction(self, amount: float, reason: str, type: str,
                           balance: float = 0.0, overdraft: bool = False):
        tx = Transaction(amount, reason, type, balance, overdraft, self.tick)
        self._transactions.append(tx)
        if self.session_log_path:
            with open(self.session_log_path, "a", encoding="utf-8") as f:
                flag = " OVERDRAFT" if overdraft else ""
                f.write(f"TX T{self.tick:05d} {type} {amount:+.2f} ({reason}) -> {balance:.2f}{flag}\n")

    def recent(self, count: int = 10) -> List[str]:
        if count <= 0:
            return []
        return list(self._entries)[-count:]

    def entries(self) -> tuple:
        return tuple(self._entries)

    def transactions(self) -> tuple:
        return tuple(self._transactions)
