import itertools
from collections import defaultdict
from typing import Dict, List, Tuple

from airtime.objects.flight import Flight


class FlightScheduler:
    """Time-indexed queue of flights keyed by intended landing tick.

    Airborne flights are also kept in an active index ordered by
    (earliest bucket tick, insertion); landed and cancelled flights are
    pruned from it on the next query.
    """

    def __init__(self):
        self._by_tick: Dict[int, List[Flight]] = defaultdict(list)
        self._order: List[Flight] = []
        self._active: Dict[int, Tuple[int, int, Flight]] = {}
        self._seq = itertools.count()

    def schedule_flight(self, flight: Flight, tick: int):
        bucket = self._by_tick[tick]
        if any(f is flight for f in bucket):
            return
        bucket.append(flight)
        seq = next(self._seq)

        entry = self._active.get(id(flight))
        if entry is None:
            if not any(f is flight for f in self._order):
                self._order.append(flight)
            if not flight.is_terminal:
                self._active[id(flight)] = (tick, seq, flight)
        elif tick < entry[0]:
            self._active[id(flight)] = (tick, seq, flight)

    def flights_at_tick(self, tick: int) -> List[Flight]:
        return list(self._by_tick.get(tick, ()))

    def _iter_stable(self):
        seen = set()
        for tick in sorted(self._by_tick):
            for flight in self._by_tick[tick]:
                if id(flight) in seen:
                    continue
                seen.add(id(flight))
                yield flight

    def unlanded_flights(self) -> List[Flight]:
        for key in [k for k, (_, _, f) in self._active.items() if f.is_terminal]:
            del self._active[key]
        return [f for _, _, f in sorted(self._active.values(), key=lambda e: e[:2])]

    def active_count(self) -> int:
        return len(self.unlanded_flights())

    def due_flights(self, tick: int) -> List[Flight]:
        """Unlanded flights whose current scheduled tick is now or earlier."""
        return [f for f in self.unlanded_flights() if f.scheduled_tick <= tick]

    def overdue_flights(self, tick: int) -> List[Flight]:
        return [f for f in self.unlanded_flights() if f.scheduled_tick < tick]

    def all_flights(self) -> tuple:
        return tuple(self._iter_stable())

    def find(self, flight_number: str):
        return next((f for f in self._order if f.flight_number == flight_number), None)

    def count(self) -> int:
        return len(self._order)
