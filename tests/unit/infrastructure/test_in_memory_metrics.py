"""Tests for in-memory metrics implementation."""

import pytest

from recurring_payments.infrastructure.in_memory_metrics import InMemoryMetrics, MetricsSummary
from recurring_payments.ports.metrics import MetricsPort


class TestMetricsSummary:
    """Test cases for MetricsSummary."""

    def test_empty_summary(self):
        """Test the summary before any value is recorded."""
        summary = MetricsSummary()
        assert summary.average == 0.0
        assert summary.to_dict() == {"count": 0, "average": 0.0, "min": 0, "max": 0}

    def test_add_values(self):
        """Test statistics over recorded values."""
        summary = MetricsSummary()
        for value in (10.0, 20.0, 30.0):
            summary.add(value)

        assert summary.to_dict() == {"count": 3, "average": 20.0, "min": 10.0, "max": 30.0}


class TestInMemoryMetrics:
    """Test cases for InMemoryMetrics."""

    @pytest.fixture
    def metrics(self):
        """Create fresh metrics."""
        return InMemoryMetrics()

    def test_implements_metrics_port(self, metrics):
        """Test that InMemoryMetrics implements MetricsPort."""
        assert isinstance(metrics, MetricsPort)

    def test_counters(self, metrics):
        """Test incrementing counters."""
        metrics.increment("reconcile.payments.sent")
        metrics.increment("reconcile.payments.sent", 2)

        assert metrics.counter("reconcile.payments.sent") == 3
        assert metrics.counter("never.touched") == 0

    def test_gauges(self, metrics):
        """Test that gauges keep the last value."""
        metrics.gauge("reconcile.subscriptions", 4)
        metrics.gauge("reconcile.subscriptions", 2)

        assert metrics.get_all()["gauges"] == {"reconcile.subscriptions": 2}

    def test_timer_records_duration(self, metrics):
        """Test that the timer records one value per block."""
        with metrics.timer("reconcile.cycle_ms"):
            pass

        summary = metrics.get_all()["summaries"]["reconcile.cycle_ms"]
        assert summary["count"] == 1
        assert summary["min"] >= 0

    def test_timer_records_on_error(self, metrics):
        """Test that the timer records even when the block raises."""
        with pytest.raises(RuntimeError), metrics.timer("reconcile.cycle_ms"):
            raise RuntimeError("boom")

        assert metrics.get_all()["summaries"]["reconcile.cycle_ms"]["count"] == 1

    def test_get_all_and_reset(self, metrics):
        """Test exporting and resetting every metric."""
        metrics.increment("a")
        metrics.gauge("b", 1.0)
        metrics.record("c", 5.0)

        exported = metrics.get_all()
        assert exported["counters"] == {"a": 1}
        assert exported["uptime_seconds"] >= 0

        metrics.reset()

        exported = metrics.get_all()
        assert exported["counters"] == {}
        assert exported["gauges"] == {}
        assert exported["summaries"] == {}
