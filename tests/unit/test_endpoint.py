from __future__ import annotations

import urllib.request

from crud_benchmark.domain.models import Operation
from crud_benchmark.metrics.endpoint import MetricsServer
from crud_benchmark.metrics.registry import MetricsRegistry


def _scrape(url: str) -> str:
    with urllib.request.urlopen(url, timeout=5) as response:
        assert response.status == 200
        return response.read().decode("utf-8")


def test_server_exposes_registry_in_text_format() -> None:
    registry = MetricsRegistry()
    registry.record_timing(Operation.INSERT, 33, "3", 0.75)
    registry.record_system(Operation.INSERT, "3", 10.0, 20.0)

    with MetricsServer(registry, port=0, addr="127.0.0.1") as server:
        assert server.port > 0
        body = _scrape(server.url)

    assert server.url.endswith("/metrics")
    assert 'database_insert{elements="33",replicas="3"} 0.75' in body
    assert 'system_cpu{replicas="3",operation="insert"} 10.0' in body
    assert "# TYPE database_delete gauge" in body


def test_server_sees_values_written_after_start() -> None:
    registry = MetricsRegistry()

    with MetricsServer(registry, port=0, addr="127.0.0.1") as server:
        registry.record_timing(Operation.READ, 9, "1", 0.5)
        body = _scrape(server.url)

    assert 'database_read{elements="9",replicas="1"} 0.5' in body


def test_server_does_not_expose_other_registries() -> None:
    exposed = MetricsRegistry()
    other = MetricsRegistry()
    other.record_timing(Operation.UPDATE, 66, "2", 3.0)

    with MetricsServer(exposed, port=0, addr="127.0.0.1") as server:
        body = _scrape(server.url)

    assert 'elements="66"' not in body


def test_stop_is_idempotent() -> None:
    server = MetricsServer(MetricsRegistry(), port=0, addr="127.0.0.1")
    server.start()
    server.stop()
    server.stop()
