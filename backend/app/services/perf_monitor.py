"""Performance monitoring utilities for the framing pricing service."""
import time
import logging
import threading
import functools
from typing import Any, Callable, Dict

logger = logging.getLogger("framing-api.perf")


def timed(func: Callable) -> Callable:
    """
    Decorator that measures and logs execution time for synchronous functions.

    Usage::

        @timed
        def calculate_order_total(...):
            ...
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 3)
            logger.debug(
                "function timed",
                extra={
                    "function": func.__qualname__,
                    "duration_ms": duration_ms,
                },
            )
    return wrapper


class PerformanceTracker:
    """
    Thread-safe in-memory counters for pricing operations.

    Each operation name ("quote", "wholesale_order", ...) keeps a call count,
    cumulative duration, slowest call and an error count.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._calls: Dict[str, int] = {}
        self._total_ms: Dict[str, float] = {}
        self._max_ms: Dict[str, float] = {}
        self._errors: Dict[str, int] = {}

    def record_success(self, operation: str, duration_ms: float) -> None:
        with self._lock:
            self._calls[operation] = self._calls.get(operation, 0) + 1
            self._total_ms[operation] = self._total_ms.get(operation, 0.0) + duration_ms
            if duration_ms > self._max_ms.get(operation, 0.0):
                self._max_ms[operation] = duration_ms

    def record_error(self, operation: str) -> None:
        with self._lock:
            self._errors[operation] = self._errors.get(operation, 0) + 1

    def get_metrics(self) -> Dict[str, Any]:
        """
        Snapshot of all counters.

        Returns
        -------
        dict with keys:
            quotes_processed   : int   successful "quote" operations
            error_count        : int   total across all operations
            operations         : dict  {name: {calls, avg_ms, max_ms, errors}}
        """
        with self._lock:
            names = set(self._calls) | set(self._errors)
            operations = {}
            for name in sorted(names):
                calls = self._calls.get(name, 0)
                operations[name] = {
                    "calls": calls,
                    "avg_ms": round(self._total_ms.get(name, 0.0) / calls, 3) if calls else 0.0,
                    "max_ms": round(self._max_ms.get(name, 0.0), 3),
                    "errors": self._errors.get(name, 0),
                }
            return {
                "quotes_processed": self._calls.get("quote", 0),
                "error_count": sum(self._errors.values()),
                "operations": operations,
            }

    def reset(self) -> None:
        """Reset all counters (useful in tests)."""
        with self._lock:
            self._calls.clear()
            self._total_ms.clear()
            self._max_ms.clear()
            self._errors.clear()


# Module-level instance shared by the API routes and /metrics.
tracker = PerformanceTracker()
