"""Lightweight timing of file and run processing.

``@profile_operation(name)`` wraps a function with ``perf_counter_ns``
timing, logs each duration at DEBUG level and records it in a
process-wide :class:`ProfileCollector`.

Usage::

    from qualify_engine.telemetry.profiling import profile_operation

    @profile_operation("qualify.file")
    def process_lines(lines, config, *, file):
        ...
"""

from __future__ import annotations

import functools
import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class ProfileStats:
    """Aggregated timings for one operation, in milliseconds."""

    operation: str
    count: int
    mean_ms: float
    p50_ms: float
    p95_ms: float
    p99_ms: float
    max_ms: float


class ProfileCollector:
    """Keeps the most recent durations per operation.  Thread-safe."""

    def __init__(self, max_results: int = 500) -> None:
        self._max_results = max_results
        self._durations: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def record(self, operation: str, duration_ms: float) -> None:
        with self._lock:
            bucket = self._durations.setdefault(operation, deque(maxlen=self._max_results))
            bucket.append(duration_ms)

    def stats(self, operation: str) -> ProfileStats | None:
        """Return aggregated timings, or ``None`` if *operation* was never recorded."""
        with self._lock:
            durations = sorted(self._durations.get(operation, ()))
        if not durations:
            return None
        return ProfileStats(
            operation=operation,
            count=len(durations),
            mean_ms=round(sum(durations) / len(durations), 3),
            p50_ms=round(_percentile(durations, 50), 3),
            p95_ms=round(_percentile(durations, 95), 3),
            p99_ms=round(_percentile(durations, 99), 3),
            max_ms=round(durations[-1], 3),
        )

    def all_stats(self) -> list[ProfileStats]:
        with self._lock:
            operations = sorted(self._durations)
        return [s for s in (self.stats(op) for op in operations) if s is not None]

    def clear(self) -> None:
        with self._lock:
            self._durations.clear()


def _percentile(sorted_data: list[float], p: float) -> float:
    """Linear-interpolated percentile of already sorted data."""
    k = (p / 100.0) * (len(sorted_data) - 1)
    lower = int(k)
    upper = min(lower + 1, len(sorted_data) - 1)
    return sorted_data[lower] + (k - lower) * (sorted_data[upper] - sorted_data[lower])


_collector = ProfileCollector()


def get_collector() -> ProfileCollector:
    return _collector


def profile_operation(name: str) -> Callable[[F], F]:
    """Time every call of the decorated function under the operation *name*."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_ns = time.perf_counter_ns()
            try:
                return func(*args, **kwargs)
            finally:
                duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
                _collector.record(name, duration_ms)
                logger.debug("PROFILE %s: %.3f ms", name, duration_ms)

        return wrapper  # type: ignore[return-value]

    return decorator
