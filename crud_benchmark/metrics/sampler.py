"""
Host resource sampler for the CRUD benchmark.

A `SystemSampler` runs a background thread that, every `interval_ms`, reads
host CPU utilization (percent, aggregated across cores) and virtual memory
utilization (percent used) with psutil and writes both into the registry's
`system_cpu` / `system_memory` gauges, labeled with the operation that is in
flight.

Usage:
    with SystemSampler(registry, Operation.INSERT, replicas="3") as sampler:
        gateway.insert_batch(records)
        sampler.wait_for_sample(timeout=5.0)

`stop()` joins the thread, so once it returns no further sample can land on
this operation's labels or bleed into the next operation's.
"""

from __future__ import annotations

import threading
from typing import Optional, Tuple

import psutil

from crud_benchmark.domain.models import Operation
from crud_benchmark.metrics.registry import MetricsRegistry
from crud_benchmark.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_INTERVAL_MS = 100


def read_host_usage() -> Tuple[float, float]:
    """Return (cpu percent, memory percent) for the whole host."""
    return psutil.cpu_percent(interval=None), psutil.virtual_memory().percent


class SystemSampler:
    """
    Periodic CPU/memory sampler bound to one operation.

    Parameters
    ----------
    registry : MetricsRegistry
        Destination of the samples.
    operation : Operation
        Operation label attached to every sample.
    replicas : str
        Replica-count label attached to every sample.
    interval_ms : int
        Tick interval; the first sample is taken one interval after `start()`.
    """

    def __init__(
        self,
        registry: MetricsRegistry,
        operation: Operation,
        replicas: str = "",
        interval_ms: int = DEFAULT_INTERVAL_MS,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self._registry = registry
        self.operation = operation
        self.replicas = replicas
        self.interval_ms = interval_ms
        self.samples = 0
        self._stop = threading.Event()
        self._sampled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "SystemSampler":
        if self._thread is not None:
            raise RuntimeError(f"Sampler for '{self.operation.value}' already started")
        # cpu_percent(None) measures since the previous call; prime it.
        psutil.cpu_percent(interval=None)
        self._thread = threading.Thread(
            target=self._run, name=f"sampler-{self.operation.value}", daemon=True
        )
        log.debug("Starting profiling", extra={"operation": self.operation.value})
        self._thread.start()
        return self

    def _run(self) -> None:
        while not self._stop.wait(timeout=self.interval_ms / 1000.0):
            try:
                cpu, memory = read_host_usage()
            except psutil.Error as exc:
                log.debug("Host sample failed", extra={"error": str(exc)})
                continue
            self._registry.record_system(self.operation, self.replicas, cpu, memory)
            self.samples += 1
            self._sampled.set()

    def wait_for_sample(self, timeout: Optional[float] = None) -> bool:
        """Block until at least one sample was written; False on timeout."""
        return self._sampled.wait(timeout=timeout)

    def stop(self) -> None:
        """Stop ticking and wait for an in-flight sample to finish."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
        log.debug(
            "Stopped profiling",
            extra={"operation": self.operation.value, "samples": self.samples},
        )

    def __enter__(self) -> "SystemSampler":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


__all__ = ["DEFAULT_INTERVAL_MS", "SystemSampler", "read_host_usage"]
