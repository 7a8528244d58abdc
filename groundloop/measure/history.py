"""Bounded record of measurement events, for statistics."""
from collections import Counter, deque

from groundloop.core.constants import MEASUREMENT_HISTORY_SIZE

from .collapse import MeasurementEvent


class MeasurementHistory:
    """Keeps the most recent events; oldest evicted first."""

    def __init__(self, capacity: int = MEASUREMENT_HISTORY_SIZE):
        self._events: deque[MeasurementEvent] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._events)

    def record(self, event: MeasurementEvent) -> None:
        self._events.append(event)

    def all(self) -> list[MeasurementEvent]:
        return list(self._events)

    def recent(self, n: int) -> list[MeasurementEvent]:
        if n <= 0:
            return []
        return list(self._events)[-n:]

    def stats(self) -> dict:
        """Aggregate figures over the retained events.

        Returns:
            Dict with total_measurements, average_confidence, verification_rate,
            average_grounding_cost, category_distribution
        """
        if not self._events:
            return {
                "total_measurements": 0,
                "average_confidence": 0.0,
                "verification_rate": 0.0,
                "average_grounding_cost": 0.0,
                "category_distribution": {},
            }

        n = len(self._events)
        return {
            "total_measurements": n,
            "average_confidence": sum(e.confidence for e in self._events) / n,
            "verification_rate": sum(1 for e in self._events if e.verified) / n,
            "average_grounding_cost": sum(e.grounding_cost for e in self._events) / n,
            "category_distribution": dict(Counter(e.selected_path.category.value for e in self._events)),
        }
