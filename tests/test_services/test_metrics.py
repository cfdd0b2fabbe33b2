"""Tests for the query metrics collector."""
import logging

import pytest

from app.core.metrics import NullMetrics, QueryMetrics


def test_record_accumulates():
    metrics = QueryMetrics(slow_threshold_ms=100)
    metrics.record("search.rent", 20)
    metrics.record("search.rent", 40)

    stats = metrics.get("search.rent")
    assert stats.calls == 2
    assert stats.avg_ms == 30
    assert stats.max_ms == 40
    assert stats.slow_calls == 0


def test_slow_call_logged(caplog):
    metrics = QueryMetrics(slow_threshold_ms=100)
    with caplog.at_level(logging.WARNING, logger="app.core.metrics"):
        metrics.record("search.buy", 250)

    assert metrics.get("search.buy").slow_calls == 1
    assert any("Slow query: search.buy" in r.getMessage() for r in caplog.records)


def test_unknown_operation_is_empty():
    assert QueryMetrics().get("nothing").calls == 0


def test_snapshot_and_reset():
    metrics = QueryMetrics()
    metrics.record("lookup.rent", 1.234)
    assert metrics.snapshot() == {
        "lookup.rent": {"calls": 1, "slow_calls": 0, "avg_ms": 1.23, "max_ms": 1.23}
    }
    metrics.reset()
    assert metrics.snapshot() == {}


@pytest.mark.asyncio
async def test_track_records_even_on_error():
    metrics = QueryMetrics()
    with pytest.raises(RuntimeError):
        async with metrics.track("search.all"):
            raise RuntimeError("db down")
    assert metrics.get("search.all").calls == 1


@pytest.mark.asyncio
async def test_null_metrics_records_nothing():
    metrics = NullMetrics()
    async with metrics.track("search.all"):
        pass
    assert metrics.enabled is False
    assert metrics.snapshot() == {}


def test_collectors_are_independent():
    a, b = QueryMetrics(), QueryMetrics()
    a.record("search.rent", 5)
    assert b.get("search.rent").calls == 0
