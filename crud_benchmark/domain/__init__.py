"""
Domain package for the CRUD benchmark.

Exports the dataset record, the timed operation kinds, and the batch helpers
used by the loader, gateway and driver.
"""

from crud_benchmark.domain.models import (
    COLUMNS,
    Operation,
    OperationTiming,
    Record,
    batch,
    batch_sizes,
)

__all__ = [
    "COLUMNS",
    "Operation",
    "OperationTiming",
    "Record",
    "batch",
    "batch_sizes",
]
