"""
Infrastructure package for the CRUD benchmark.

Centralizes database connectivity and the table-level operations the driver
times. Keep this layer focused on I/O, decoupled from timing and metrics.
"""

from crud_benchmark.infrastructure.db_factory import build_dsn, connect
from crud_benchmark.infrastructure.gateway import DEFAULT_TABLE, DatabaseGateway, InsertOutcome

__all__ = [
    "DEFAULT_TABLE",
    "DatabaseGateway",
    "InsertOutcome",
    "build_dsn",
    "connect",
]
