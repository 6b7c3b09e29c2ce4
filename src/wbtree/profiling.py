"""Timing utilities for weight-balanced tree operations."""

import time
import functools
import statistics
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional


@dataclass
class MethodMetrics:
    """Timing statistics for one tracked operation."""
    call_count: int = 0
    total_time: float = 0.0
    min_time: float = float('inf')
    max_time: float = 0.0
    times: List[float] = field(default_factory=list)

    def add_measurement(self, elapsed: float) -> None:
        self.call_count += 1
        self.total_time += elapsed
        if elapsed < self.min_time:
            self.min_time = elapsed
        if elapsed > self.max_time:
            self.max_time = elapsed
        self.times.append(elapsed)

    @property
    def avg_time(self) -> float:
        if not self.call_count:
            return 0.0
        return self.total_time / self.call_count

    @property
    def median_time(self) -> float:
        if not self.times:
            return 0.0
        return statistics.median(self.times)


class PerformanceTracker:
    """Process-wide collector of operation timings."""

    _instance: Optional['PerformanceTracker'] = None

    @classmethod
    def get_instance(cls) -> 'PerformanceTracker':
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def __init__(self):
        self.metrics: Dict[str, MethodMetrics] = defaultdict(MethodMetrics)
        self.enabled = True

    def add_measurement(self, name: str, elapsed: float) -> None:
        if self.enabled:
            self.metrics[name].add_measurement(elapsed)

    def reset(self) -> None:
        self.metrics.clear()

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def report(self, sort_by: str = 'total_time') -> str:
        """
        Render a table of all tracked operations.

        Args:
            sort_by: A MethodMetrics attribute to sort by, descending.
        """
        if not self.metrics:
            return "No performance data collected."

        rows = sorted(
            self.metrics.items(),
            key=lambda item: getattr(item[1], sort_by),
            reverse=True,
        )
        width = 80
        lines = [
            "Performance Metrics:",
            "-" * width,
            f"{'Operation':<32} {'Calls':>8} {'Total (s)':>12} "
            f"{'Avg (s)':>12} {'Max (s)':>12}",
            "-" * width,
        ]
        for name, m in rows:
            lines.append(f"{name:<32} {m.call_count:>8} {m.total_time:>12.6f} "
                         f"{m.avg_time:>12.6f} {m.max_time:>12.6f}")
        return "\n".join(lines)


def track_performance(method: Optional[Callable] = None, *,
                      tag: Optional[str] = None) -> Callable:
    """
    Decorator recording the wall time of every call.

    Usable bare (@track_performance) or with a custom name
    (@track_performance(tag="insert")). Measurements go to the
    PerformanceTracker singleton under tag or the function's qualname.
    """
    def decorator(func):
        name = tag or func.__qualname__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            tracker = PerformanceTracker.get_instance()
            if not tracker.enabled:
                return func(*args, **kwargs)
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                tracker.add_measurement(name, time.perf_counter() - start)
        return wrapper

    if method is None:
        return decorator
    return decorator(method)
