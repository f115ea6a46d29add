"""
CRUD Benchmark - timed relational CRUD workloads exported as Prometheus metrics.

Loads a fixed near-earth-object dataset, repeatedly inserts, reads, updates and
deletes 33%, 66% and 100% of it against PostgreSQL, and exposes:

- per-operation elapsed time gauges (`database_insert`, `database_read`,
  `database_update`, `database_delete`), labeled by batch size and replicas
- host CPU and memory gauges (`system_cpu`, `system_memory`) sampled while
  each operation runs, labeled by operation and replicas

through an HTTP endpoint in the Prometheus text exposition format.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from crud_benchmark.config import Settings, get_settings
from crud_benchmark.dataset import load_records
from crud_benchmark.domain.models import Operation, OperationTiming, Record, batch_sizes
from crud_benchmark.driver import BenchmarkDriver, run_benchmark, summarize
from crud_benchmark.errors import BenchmarkError, DatabaseError, DatasetError
from crud_benchmark.infrastructure.gateway import DatabaseGateway, InsertOutcome
from crud_benchmark.metrics import MetricsRegistry, MetricsServer, SystemSampler
from crud_benchmark.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Operation",
    "OperationTiming",
    "Record",
    "batch_sizes",
    "load_records",
    # Driver
    "BenchmarkDriver",
    "run_benchmark",
    "summarize",
    # Database
    "DatabaseGateway",
    "InsertOutcome",
    # Metrics
    "MetricsRegistry",
    "MetricsServer",
    "SystemSampler",
    # Errors
    "BenchmarkError",
    "DatabaseError",
    "DatasetError",
    # Logging
    "configure_logging",
    "get_logger",
]
