"""Query timing collector.

An instance is created per application (see `create_app`) and handed to the
search and lookup services through a FastAPI dependency, so tests can swap it
for a fresh `QueryMetrics` or a `NullMetrics`.
"""
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict

from app.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class OperationStats:
    calls: int = 0
    slow_calls: int = 0
    total_ms: float = 0.0
    max_ms: float = 0.0

    @property
    def avg_ms(self) -> float:
        return self.total_ms / self.calls if self.calls else 0.0


class QueryMetrics:
    """Per-operation call counts and durations for database-backed operations."""

    enabled = True

    def __init__(self, slow_threshold_ms: float = 500.0):
        self.slow_threshold_ms = slow_threshold_ms
        self._stats: Dict[str, OperationStats] = {}

    def record(self, operation: str, duration_ms: float) -> None:
        stats = self._stats.setdefault(operation, OperationStats())
        stats.calls += 1
        stats.total_ms += duration_ms
        stats.max_ms = max(stats.max_ms, duration_ms)

        if duration_ms >= self.slow_threshold_ms:
            stats.slow_calls += 1
            logger.warning(
                "Slow query: %s took %.1fms",
                operation,
                duration_ms,
                extra={"operation": operation, "duration": round(duration_ms, 1)},
            )

    @asynccontextmanager
    async def track(self, operation: str) -> AsyncIterator[None]:
        """Time the wrapped block and record it, also when it raises."""
        started = time.perf_counter()
        try:
            yield
        finally:
            self.record(operation, (time.perf_counter() - started) * 1000)

    def get(self, operation: str) -> OperationStats:
        return self._stats.get(operation, OperationStats())

    def snapshot(self) -> Dict[str, dict]:
        return {
            name: {
                "calls": s.calls,
                "slow_calls": s.slow_calls,
                "avg_ms": round(s.avg_ms, 2),
                "max_ms": round(s.max_ms, 2),
            }
            for name, s in self._stats.items()
        }

    def reset(self) -> None:
        self._stats.clear()


class NullMetrics(QueryMetrics):
    """Collector that records nothing."""

    enabled = False

    def __init__(self):
        super().__init__(slow_threshold_ms=float("inf"))

    def record(self, operation: str, duration_ms: float) -> None:
        return None
