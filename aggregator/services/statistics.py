"""
StatisticsAccumulator - Per-endpoint call counts and latency totals.

Each endpoint gets its own counter with its own lock, so concurrent
recordings for different endpoints never contend with each other. The
registry lock is only taken to create a counter the first time an
endpoint is seen.
"""

import threading
from dataclasses import dataclass
from typing import Any

FAST_THRESHOLD_MS = 100
AVERAGE_THRESHOLD_MS = 3500


@dataclass(frozen=True)
class EndpointStats:
    """Point-in-time statistics for one endpoint."""

    call_count: int = 0
    total_elapsed_time_ms: int = 0

    @property
    def average_time_ms(self) -> float:
        if self.call_count == 0:
            return 0.0
        return self.total_elapsed_time_ms / self.call_count

    @property
    def performance_bracket(self) -> str:
        """Coarse latency class: fast (<100ms), average (<3500ms) or slow."""
        average = self.average_time_ms
        if average < FAST_THRESHOLD_MS:
            return "fast"
        if average < AVERAGE_THRESHOLD_MS:
            return "average"
        return "slow"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "callCount": self.call_count,
            "totalElapsedTimeMs": self.total_elapsed_time_ms,
            "averageTimeMs": round(self.average_time_ms, 2),
            "performance": self.performance_bracket,
        }


class _EndpointCounter:
    """Mutable counter pair guarded by its own lock."""

    __slots__ = ("call_count", "total_elapsed_time_ms", "lock")

    def __init__(self):
        self.call_count = 0
        self.total_elapsed_time_ms = 0
        self.lock = threading.Lock()


class StatisticsAccumulator:
    """
    Thread-safe accumulator of endpoint usage statistics.

    Usage:
        stats = StatisticsAccumulator()
        stats.record("NewsEndpoint", 120)

        for name, endpoint_stats in stats.snapshot().items():
            print(name, endpoint_stats.performance_bracket)
    """

    def __init__(self):
        self._counters: dict[str, _EndpointCounter] = {}
        self._lock = threading.Lock()

    def _get_counter(self, endpoint_name: str) -> _EndpointCounter:
        """Get or create the counter for an endpoint."""
        counter = self._counters.get(endpoint_name)
        if counter is None:
            with self._lock:
                counter = self._counters.get(endpoint_name)
                if counter is None:
                    counter = _EndpointCounter()
                    self._counters[endpoint_name] = counter
        return counter

    def record(self, endpoint_name: str, elapsed_ms: int) -> None:
        """Record one completed upstream call for an endpoint."""
        counter = self._get_counter(endpoint_name)
        with counter.lock:
            counter.call_count += 1
            counter.total_elapsed_time_ms += int(elapsed_ms)

    def get(self, endpoint_name: str) -> EndpointStats | None:
        """Get statistics for a single endpoint, None if never recorded."""
        counter = self._counters.get(endpoint_name)
        if counter is None:
            return None
        with counter.lock:
            return EndpointStats(counter.call_count, counter.total_elapsed_time_ms)

    def snapshot(self) -> dict[str, EndpointStats]:
        """Copy of the statistics of every endpoint recorded so far."""
        with self._lock:
            items = list(self._counters.items())

        result: dict[str, EndpointStats] = {}
        for name, counter in items:
            with counter.lock:
                result[name] = EndpointStats(
                    counter.call_count, counter.total_elapsed_time_ms
                )
        return result

    def reset(self) -> None:
        """Drop all recorded statistics."""
        with self._lock:
            self._counters.clear()
