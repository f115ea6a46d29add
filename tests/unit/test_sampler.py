from __future__ import annotations

import time

import pytest

from crud_benchmark.domain.models import Operation
from crud_benchmark.metrics import sampler as sampler_module
from crud_benchmark.metrics.registry import SYSTEM_CPU, SYSTEM_MEMORY, MetricsRegistry
from crud_benchmark.metrics.sampler import SystemSampler

INTERVAL_MS = 10
WAIT_TIMEOUT = 2.0


@pytest.fixture
def fake_usage(monkeypatch):
    calls = {"count": 0}

    def read() -> tuple[float, float]:
        calls["count"] += 1
        return 42.0, 63.5

    monkeypatch.setattr(sampler_module, "read_host_usage", read)
    return calls


def test_sampler_writes_labeled_system_gauges(fake_usage) -> None:
    registry = MetricsRegistry()

    with SystemSampler(registry, Operation.INSERT, replicas="3", interval_ms=INTERVAL_MS) as sampler:
        assert sampler.wait_for_sample(WAIT_TIMEOUT)

    labels = {"replicas": "3", "operation": "insert"}
    assert registry.get(SYSTEM_CPU, labels) == 42.0
    assert registry.get(SYSTEM_MEMORY, labels) == 63.5
    assert sampler.samples >= 1


def test_first_sample_waits_one_interval(fake_usage) -> None:
    registry = MetricsRegistry()
    sampler = SystemSampler(registry, Operation.READ, interval_ms=5_000).start()
    try:
        assert sampler.wait_for_sample(0.05) is False
        assert sampler.samples == 0
    finally:
        sampler.stop()


def test_stop_prevents_further_writes(fake_usage) -> None:
    registry = MetricsRegistry()
    sampler = SystemSampler(registry, Operation.UPDATE, interval_ms=INTERVAL_MS).start()
    assert sampler.wait_for_sample(WAIT_TIMEOUT)

    sampler.stop()
    samples_at_stop = sampler.samples
    reads_at_stop = fake_usage["count"]
    time.sleep(INTERVAL_MS * 5 / 1000.0)

    assert not sampler.running
    assert sampler.samples == samples_at_stop
    assert fake_usage["count"] == reads_at_stop


def test_stopped_sampler_does_not_write_into_next_operation(fake_usage) -> None:
    registry = MetricsRegistry()

    with SystemSampler(registry, Operation.INSERT, replicas="1", interval_ms=INTERVAL_MS) as first:
        first.wait_for_sample(WAIT_TIMEOUT)
    # Overwrite the insert label; a late tick from the stopped sampler would undo it.
    registry.set(SYSTEM_CPU, {"replicas": "1", "operation": "insert"}, -1.0)
    with SystemSampler(registry, Operation.READ, replicas="1", interval_ms=INTERVAL_MS) as second:
        second.wait_for_sample(WAIT_TIMEOUT)

    assert registry.get(SYSTEM_CPU, {"replicas": "1", "operation": "insert"}) == -1.0
    assert registry.get(SYSTEM_CPU, {"replicas": "1", "operation": "read"}) == 42.0


def test_sampler_cannot_start_twice(fake_usage) -> None:
    sampler = SystemSampler(MetricsRegistry(), Operation.DELETE, interval_ms=INTERVAL_MS).start()
    try:
        with pytest.raises(RuntimeError, match="already started"):
            sampler.start()
    finally:
        sampler.stop()


def test_sampler_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        SystemSampler(MetricsRegistry(), Operation.INSERT, interval_ms=0)


def test_read_host_usage_returns_percentages() -> None:
    cpu, memory = sampler_module.read_host_usage()

    assert 0.0 <= cpu <= 100.0
    assert 0.0 <= memory <= 100.0
