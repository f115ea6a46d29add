"""
Utilities package for the CRUD benchmark.

Exports shared logging helpers. Keep this package lightweight and free of
domain-specific logic.
"""

from crud_benchmark.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
