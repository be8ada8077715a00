"""Process-local metrics for reconciliation cycles.

Counters track cycle outcomes (payments sent, charges skipped per reason,
contract failures), gauges hold the latest store size and summaries collect
cycle durations.
"""

import time
from collections import Counter, defaultdict
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from ..ports.metrics import MetricsPort


@dataclass
class MetricsSummary:
    """Running statistics of a recorded value."""

    count: int = 0
    total: float = 0.0
    min: float = float("inf")
    max: float = float("-inf")

    def add(self, value: float) -> None:
        self.count += 1
        self.total += value
        self.min = min(self.min, value)
        self.max = max(self.max, value)

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0

    def to_dict(self) -> dict[str, float]:
        """Export rounded to two decimals; an empty summary exports zeros."""
        if not self.count:
            return {"count": 0, "average": 0.0, "min": 0, "max": 0}
        return {
            "count": self.count,
            "average": round(self.average, 2),
            "min": round(self.min, 2),
            "max": round(self.max, 2),
        }


class InMemoryMetrics(MetricsPort):
    """MetricsPort keeping every value in memory for the process lifetime."""

    def __init__(self):
        self._counters: Counter[str] = Counter()
        self._gauges: dict[str, float] = {}
        self._summaries: defaultdict[str, MetricsSummary] = defaultdict(MetricsSummary)
        self._created = time.monotonic()

    def increment(self, name: str, value: int = 1) -> None:
        self._counters[name] += value

    def gauge(self, name: str, value: float) -> None:
        self._gauges[name] = value

    def record(self, name: str, value: float) -> None:
        self._summaries[name].add(value)

    @contextmanager
    def timer(self, name: str) -> Iterator[None]:
        """Record how long the block took, in milliseconds, even if it raises."""
        started = time.monotonic()
        try:
            yield
        finally:
            self.record(name, (time.monotonic() - started) * 1000)

    def counter(self, name: str) -> int:
        """Current value of a counter; zero when never incremented."""
        return self._counters[name]

    def get_all(self) -> dict[str, Any]:
        return {
            "uptime_seconds": round(time.monotonic() - self._created, 2),
            "counters": dict(self._counters),
            "gauges": dict(self._gauges),
            "summaries": {name: summary.to_dict() for name, summary in self._summaries.items()},
        }

    def reset(self) -> None:
        """Forget every value recorded so far."""
        self._counters.clear()
        self._gauges.clear()
        self._summaries.clear()
