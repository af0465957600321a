from collections import Counter
from typing import Dict, List, TYPE_CHECKING

import numpy as np
import psutil

if TYPE_CHECKING:
    from airtime.dispatcher import LandingEvent, DelayEvent
    from airtime.runway_manager import RunwayManager


def performance_snapshot() -> Dict[str, float]:
    memory = psutil.virtual_memory()
    return {
        "cpu_percent": psutil.cpu_percent(interval=None),
        "used_mem_mb": memory.used / (1024 ** 2),
        "total_mem_mb": memory.total / (1024 ** 2),
    }


class MetricsCollector:
    """Aggregates landing and delay events for the status report."""

    def __init__(self):
        self._landing_delays: List[int] = []
        self._revenues: List[float] = []
        self._on_time = 0
        self._perfect = 0
        self._delay_reasons: Counter = Counter()
        self._runway_use: Counter = Counter()
        self._cancelled = 0

    def record_landing(self, event: "LandingEvent"):
        self._landing_delays.append(event.flight.delay_ticks())
        self._revenues.append(event.revenue)
        self._runway_use[event.runway.name] += 1
        if event.on_time:
            self._on_time += 1
        if event.perfect:
            self._perfect += 1

    def record_delay(self, event: "DelayEvent"):
        self._delay_reasons[event.reason] += 1

    def record_cancellation(self, flight):
        self._cancelled += 1

    @property
    def landed(self) -> int:
        return len(self._landing_delays)

    def delay_reasons(self) -> Dict[str, int]:
        return dict(self._delay_reasons)

    def flight_stats(self) -> Dict[str, float]:
        delays = np.asarray(self._landing_delays, dtype=float)
        revenues = np.asarray(self._revenues, dtype=float)
        if delays.size == 0:
            return {
                "landed": 0, "cancelled": self._cancelled, "on_time_rate": 0.0, "perfect": 0,
                "mean_delay": 0.0, "p90_delay": 0.0, "max_delay": 0.0,
                "total_revenue": 0.0, "mean_revenue": 0.0,
            }
        return {
            "landed": int(delays.size),
            "cancelled": self._cancelled,
            "on_time_rate": self._on_time / delays.size,
            "perfect": self._perfect,
            "mean_delay": float(np.mean(delays)),
            "p90_delay": float(np.percentile(delays, 90)),
            "max_delay": float(np.max(delays)),
            "total_revenue": float(np.sum(revenues)),
            "mean_revenue": float(np.mean(revenues)),
        }

    def runway_stats(self, runway_manager: "RunwayManager") -> List[Dict]:
        runways = runway_manager.runways()
        if not runways:
            return []
        uses = np.array([self._runway_use[r.name] for r in runways], dtype=float)
        share = uses / uses.sum() if uses.sum() else np.zeros_like(uses)
        return [
            {
                "name": r.name,
                "landings": int(uses[i]),
                "share": float(share[i]),
                "wear": r.wear,
                "status": r.status,
            }
            for i, r in enumerate(runways)
        ]

    def report_lines(self, runway_manager: "RunwayManager") -> List[str]:
        stats = self.flight_stats()
        lines = [
            f"Landed {stats['landed']} | Cancelled {stats['cancelled']} | "
            f"On-time {stats['on_time_rate']:.0%} | Perfect {stats['perfect']}",
            f"Delay mean {stats['mean_delay']:.1f} p90 {stats['p90_delay']:.1f} max {stats['max_delay']:.0f} ticks",
            f"Revenue total {stats['total_revenue']:.2f} mean {stats['mean_revenue']:.2f}",
        ]
        for row in self.runway_stats(runway_manager):
            lines.append(f"  {row['name']}: {row['landings']} landings ({row['share']:.0%}), "
                         f"wear {row['wear']}% {row['status']}")
        return lines
