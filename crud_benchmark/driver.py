"""
Benchmark driver: times batched CRUD operations and records them as gauges.

Usage (example from CLI):
    from crud_benchmark.driver import run_benchmark
    from crud_benchmark.metrics import MetricsRegistry

    registry = MetricsRegistry()
    timings = run_benchmark(registry, iterations=1)

For each iteration and each batch size (33%, 66% and 100% of the dataset) the
table is dropped and recreated, then INSERT, UPDATE, READ and DELETE are timed
in that order, so READ sees the rows UPDATE just touched. While an operation
runs a `SystemSampler` writes host CPU and memory usage under the operation's
label. The elapsed wall-clock seconds go to
the operation's timing gauge, labeled with the batch size and replica count.

When persistence is enabled, results are saved to `results/`:
- `results/latest.json` (last run)
- `results/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import json
import random
import statistics
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from crud_benchmark.config import Settings, get_settings
from crud_benchmark.dataset import load_records
from crud_benchmark.domain.models import Operation, OperationTiming, Record, batch, batch_sizes
from crud_benchmark.infrastructure.db_factory import build_dsn
from crud_benchmark.infrastructure.gateway import DatabaseGateway
from crud_benchmark.metrics.registry import MetricsRegistry
from crud_benchmark.metrics.sampler import SystemSampler
from crud_benchmark.utils.logging import get_logger

log = get_logger(__name__)

OPERATION_ORDER: Tuple[Operation, ...] = (
    Operation.INSERT,
    Operation.UPDATE,
    Operation.READ,
    Operation.DELETE,
)

OperationAction = Callable[[], Optional[Dict[str, Any]]]


class BenchmarkDriver:
    """
    Runs the CRUD workload against a gateway and records timings.

    Parameters
    ----------
    gateway : DatabaseGateway
        Owner of the benchmark table for the duration of the run.
    registry : MetricsRegistry
        Destination of timing and system gauges.
    replicas : str
        Replica-count label value.
    iterations : int
        Number of outer passes over the three batch sizes.
    sample_interval_ms : int
        Tick of the per-operation resource sampler.
    sample_wait_seconds : float
        After an operation finishes, wait up to this long for the sampler to
        capture at least one sample before stopping it. 0 disables the wait.
    rng : random.Random, optional
        Source of the UPDATE values.
    """

    def __init__(
        self,
        gateway: DatabaseGateway,
        registry: MetricsRegistry,
        *,
        replicas: str = "",
        iterations: int = 30,
        sample_interval_ms: int = 100,
        sample_wait_seconds: float = 5.0,
        rng: Optional[random.Random] = None,
    ) -> None:
        if iterations < 0:
            raise ValueError(f"iterations must be non-negative, got {iterations}")
        self._gateway = gateway
        self._registry = registry
        self.replicas = replicas
        self.iterations = iterations
        self.sample_interval_ms = sample_interval_ms
        self.sample_wait_seconds = sample_wait_seconds
        self._rng = rng or random.Random()

    def run(self, records: Sequence[Record]) -> List[OperationTiming]:
        """Run every iteration over every batch size; returns all timings."""
        sizes = batch_sizes(len(records))
        log.info(
            "Benchmark starting",
            extra={"records": len(records), "batch_sizes": list(sizes), "iterations": self.iterations},
        )
        timings: List[OperationTiming] = []
        for iteration in range(self.iterations):
            log.info(f"Starting metrics for iteration {iteration}", extra={"iteration": iteration})
            for elements in sizes:
                timings.extend(self.run_batch(records, elements, iteration=iteration))
        return timings

    def run_batch(
        self, records: Sequence[Record], elements: int, iteration: int = 0
    ) -> List[OperationTiming]:
        """Clean the table, then time each operation over the first `elements` records."""
        self._gateway.clean()
        actions = self._operation_actions(records, elements)
        return [
            self._timed(operation, actions[operation], elements, iteration)
            for operation in OPERATION_ORDER
        ]

    def _operation_actions(
        self, records: Sequence[Record], elements: int
    ) -> Dict[Operation, OperationAction]:
        """Registry of the gateway call behind each operation."""
        return {
            Operation.INSERT: lambda: self._insert(records, elements),
            Operation.READ: lambda: {"rows_read": self._gateway.read_n(elements)},
            Operation.UPDATE: lambda: self._gateway.update_all(self._rng.random() * 100),
            Operation.DELETE: self._gateway.delete_all,
        }

    def _insert(self, records: Sequence[Record], elements: int) -> Dict[str, Any]:
        outcome = self._gateway.insert_batch(batch(records, elements))
        return {"attempted": outcome.attempted, "failed": outcome.failed}

    def _timed(
        self, operation: Operation, action: OperationAction, elements: int, iteration: int
    ) -> OperationTiming:
        log.info(
            f"Starting metrics for {operation.name} with {elements} objects",
            extra={"operation": operation.value, "elements": elements, "iteration": iteration},
        )
        sampler = SystemSampler(
            self._registry, operation, replicas=self.replicas, interval_ms=self.sample_interval_ms
        )
        sampler.start()
        try:
            begin = time.perf_counter()
            extra = action() or {}
            end = time.perf_counter()
            if self.sample_wait_seconds > 0 and not sampler.wait_for_sample(
                self.sample_wait_seconds
            ):
                log.warning(
                    "No resource sample captured",
                    extra={"operation": operation.value, "elements": elements},
                )
        finally:
            sampler.stop()

        duration = end - begin
        self._registry.record_timing(operation, elements, self.replicas, duration)
        log.info(
            f"[{operation.name}] {elements} objects in {duration:.4f}s",
            extra={"operation": operation.value, "elements": elements, "duration": duration},
        )
        return OperationTiming(
            iteration=iteration,
            operation=operation,
            elements=elements,
            duration_seconds=duration,
            samples=sampler.samples,
            extra=extra,
        )


def _round_float(value: float, decimals: int = 4) -> float:
    """Round a float to specified decimal places for human-readable output."""
    return round(value, decimals)


def summarize(timings: Sequence[OperationTiming]) -> List[Dict[str, Any]]:
    """
    Aggregate timings per (operation, elements).

    Returns median, mean, stddev, min and max duration plus the mean number of
    resource samples, ordered by operation then batch size.
    """
    groups: Dict[Tuple[Operation, int], List[OperationTiming]] = {}
    for timing in timings:
        groups.setdefault((timing.operation, timing.elements), []).append(timing)

    order = {operation: index for index, operation in enumerate(OPERATION_ORDER)}
    summary: List[Dict[str, Any]] = []
    for (operation, elements), group in sorted(
        groups.items(), key=lambda item: (order[item[0][0]], item[0][1])
    ):
        durations = [t.duration_seconds for t in group]
        summary.append(
            {
                "operation": operation.value,
                "elements": elements,
                "runs": len(group),
                "duration_seconds": {
                    "median": _round_float(statistics.median(durations)),
                    "mean": _round_float(statistics.mean(durations)),
                    "stddev": _round_float(statistics.stdev(durations)) if len(durations) > 1 else 0.0,
                    "min": _round_float(min(durations)),
                    "max": _round_float(max(durations)),
                },
                "mean_samples": _round_float(statistics.mean(t.samples for t in group), 1),
            }
        )
    return summary


def persist_results(payload: dict, results_dir: Path) -> Path:
    """Write `latest.json` and a timestamped archive; returns the archive path."""
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    with latest_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    with archive_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})
    return archive_path


def run_benchmark(
    registry: MetricsRegistry,
    settings: Optional[Settings] = None,
    dataset_path: Optional[Path | str] = None,
    iterations: Optional[int] = None,
    dsn: Optional[str] = None,
    persist: bool = False,
    results_dir: Path | str = "results",
) -> List[OperationTiming]:
    """
    Load the dataset, connect, run the driver and optionally persist results.

    Fatal errors (`DatasetError`, `DatabaseError`) propagate to the caller.
    """
    settings = settings or get_settings()
    effective_path = Path(dataset_path or settings.dataset_path)
    effective_iterations = settings.benchmark_iterations if iterations is None else iterations

    log.info("Getting objects from csv", extra={"path": str(effective_path)})
    records = load_records(effective_path)
    log.info("Successfully got objects from csv", extra={"records": len(records)})

    with DatabaseGateway.open(dsn or build_dsn(settings), table_name=settings.table_name) as gateway:
        driver = BenchmarkDriver(
            gateway,
            registry,
            replicas=settings.database_replicas,
            iterations=effective_iterations,
            sample_interval_ms=settings.sample_interval_ms,
            sample_wait_seconds=settings.sample_wait_seconds,
        )
        timings = driver.run(records)

    if persist:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "dataset": str(effective_path),
            "records": len(records),
            "batch_sizes": list(batch_sizes(len(records))),
            "iterations": effective_iterations,
            "replicas": settings.database_replicas,
            "summary": summarize(timings),
            "timings": [t.to_dict() for t in timings],
        }
        persist_results(payload, Path(results_dir))

    log.info(
        f"[BENCHMARK COMPLETE] {len(timings)} timed operations",
        extra={"iterations": effective_iterations, "timings": len(timings)},
    )
    return timings


__all__ = [
    "OPERATION_ORDER",
    "BenchmarkDriver",
    "persist_results",
    "run_benchmark",
    "summarize",
]
