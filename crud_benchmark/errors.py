"""
Fatal error types for the CRUD benchmark.

Anything raised from this hierarchy aborts the run: the CLI logs the message
and exits with a non-zero status. Errors the benchmark tolerates (table drop,
per-row insert failures, update/delete statements) are logged where they
happen and never surface as exceptions.
"""

from __future__ import annotations


class BenchmarkError(RuntimeError):
    """Base class for errors that terminate a benchmark run."""


class DatasetError(BenchmarkError):
    """The dataset file is missing or a row cannot be coerced to a Record."""


class DatabaseError(BenchmarkError):
    """Connecting, creating the table, or running a transaction failed."""


__all__ = ["BenchmarkError", "DatasetError", "DatabaseError"]
