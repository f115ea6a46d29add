"""
Metrics registry for the CRUD benchmark.

A `MetricsRegistry` is constructed once at startup and passed to every
component that emits metrics (driver, sampler, endpoint). It owns a private
prometheus_client `CollectorRegistry`, so nothing is registered in the
library's process-wide default registry, and it creates all gauge families up
front. Label combinations are created on first use.

Writes go through a lock: the driver thread and the sampler thread may set
values concurrently, and per-key atomicity is guaranteed here rather than
left to the client library.
"""

from __future__ import annotations

import threading
from typing import Dict, Mapping, Optional, Tuple

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from crud_benchmark.domain.models import Operation

DATABASE_INSERT = "database_insert"
DATABASE_READ = "database_read"
DATABASE_UPDATE = "database_update"
DATABASE_DELETE = "database_delete"
SYSTEM_CPU = "system_cpu"
SYSTEM_MEMORY = "system_memory"

TIMING_LABELS: Tuple[str, ...] = ("elements", "replicas")
SYSTEM_LABELS: Tuple[str, ...] = ("replicas", "operation")

TIMING_METRICS: Dict[Operation, str] = {
    Operation.INSERT: DATABASE_INSERT,
    Operation.READ: DATABASE_READ,
    Operation.UPDATE: DATABASE_UPDATE,
    Operation.DELETE: DATABASE_DELETE,
}

_DEFINITIONS: Dict[str, Tuple[str, Tuple[str, ...]]] = {
    DATABASE_INSERT: ("time (in seconds) taken to insert X elements on the database", TIMING_LABELS),
    DATABASE_READ: ("time (in seconds) taken to read X elements on the database", TIMING_LABELS),
    DATABASE_UPDATE: ("time (in seconds) taken to update X elements on the database", TIMING_LABELS),
    DATABASE_DELETE: ("time (in seconds) taken to delete X elements on the database", TIMING_LABELS),
    SYSTEM_CPU: ("cpu consumption in percentage of a given operation", SYSTEM_LABELS),
    SYSTEM_MEMORY: ("memory usage in percentage of a given operation", SYSTEM_LABELS),
}


class MetricsRegistry:
    """
    Fixed set of labeled gauges with last-write-wins semantics.
    """

    def __init__(self) -> None:
        self.collector_registry = CollectorRegistry(auto_describe=True)
        self._lock = threading.Lock()
        self._gauges: Dict[str, Gauge] = {}
        self._labelnames: Dict[str, Tuple[str, ...]] = {}
        for name, (documentation, labelnames) in _DEFINITIONS.items():
            self._gauges[name] = Gauge(
                name, documentation, labelnames, registry=self.collector_registry
            )
            self._labelnames[name] = labelnames

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._gauges)

    def _check_labels(self, name: str, labels: Mapping[str, str]) -> None:
        expected = self._labelnames[name]
        if set(labels) != set(expected):
            raise ValueError(
                f"Metric '{name}' expects labels {sorted(expected)}, got {sorted(labels)}"
            )

    def set(self, name: str, labels: Mapping[str, str], value: float) -> None:
        """
        Overwrite the value of `name` for one label combination.

        Raises
        ------
        KeyError
            If `name` is not one of the registered gauges.
        ValueError
            If the label keys do not match the gauge's label names.
        """
        gauge = self._gauges[name]
        self._check_labels(name, labels)
        with self._lock:
            gauge.labels(**{k: str(v) for k, v in labels.items()}).set(value)

    def get(self, name: str, labels: Mapping[str, str]) -> Optional[float]:
        """Current value for a label combination, or None if never set."""
        if name not in self._gauges:
            raise KeyError(name)
        self._check_labels(name, labels)
        with self._lock:
            return self.collector_registry.get_sample_value(
                name, {k: str(v) for k, v in labels.items()}
            )

    def record_timing(
        self, operation: Operation, elements: int, replicas: str, seconds: float
    ) -> None:
        self.set(
            TIMING_METRICS[operation],
            {"elements": str(elements), "replicas": replicas},
            seconds,
        )

    def record_system(
        self, operation: Operation, replicas: str, cpu_percent: float, memory_percent: float
    ) -> None:
        labels = {"replicas": replicas, "operation": operation.value}
        self.set(SYSTEM_CPU, labels, cpu_percent)
        self.set(SYSTEM_MEMORY, labels, memory_percent)

    def render(self) -> bytes:
        """Serialize every gauge in the Prometheus text exposition format."""
        with self._lock:
            return generate_latest(self.collector_registry)


__all__ = [
    "DATABASE_DELETE",
    "DATABASE_INSERT",
    "DATABASE_READ",
    "DATABASE_UPDATE",
    "MetricsRegistry",
    "SYSTEM_CPU",
    "SYSTEM_LABELS",
    "SYSTEM_MEMORY",
    "TIMING_LABELS",
    "TIMING_METRICS",
]
