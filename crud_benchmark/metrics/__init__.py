"""
Metrics package for the CRUD benchmark.

Groups the gauge registry, the host resource sampler and the HTTP endpoint
that exposes both to the Prometheus collector.
"""

from crud_benchmark.metrics.endpoint import MetricsServer
from crud_benchmark.metrics.registry import (
    DATABASE_DELETE,
    DATABASE_INSERT,
    DATABASE_READ,
    DATABASE_UPDATE,
    SYSTEM_CPU,
    SYSTEM_MEMORY,
    MetricsRegistry,
)
from crud_benchmark.metrics.sampler import SystemSampler

__all__ = [
    "DATABASE_DELETE",
    "DATABASE_INSERT",
    "DATABASE_READ",
    "DATABASE_UPDATE",
    "SYSTEM_CPU",
    "SYSTEM_MEMORY",
    "MetricsRegistry",
    "MetricsServer",
    "SystemSampler",
]
