"""
Database connection factory for the CRUD benchmark.

The benchmark deliberately runs over a single dedicated connection (no pool),
so this module only composes the conninfo string from settings and opens that
connection. Transient connection failures are retried with tenacity; once the
retries are exhausted the failure is fatal.
"""

from __future__ import annotations

from typing import Optional

import psycopg
from psycopg import Connection
from psycopg.conninfo import make_conninfo
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from crud_benchmark.config import Settings, get_settings
from crud_benchmark.errors import DatabaseError
from crud_benchmark.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """
    Compose a libpq conninfo string from settings.

    A comma separated `DB_HOSTS` value becomes a multi-host conninfo; libpq
    tries the hosts in order until one accepts the connection.
    """
    settings = settings or get_settings()
    hosts = settings.hosts or ["localhost"]
    return make_conninfo(
        host=",".join(hosts),
        port=",".join(str(settings.db_port) for _ in hosts),
        dbname=settings.db_name,
        user=settings.db_user,
        password=settings.db_password,
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def _connect_with_retry(dsn: str) -> Connection:
    conn = psycopg.connect(dsn, autocommit=True)
    # Equivalent of a ping: fail here rather than on the first benchmark statement.
    conn.execute("SELECT 1")
    return conn


def connect(dsn: Optional[str] = None) -> Connection:
    """
    Open the benchmark's dedicated connection in autocommit mode.

    Retries up to 3 times with exponential backoff for transient errors.

    Parameters
    ----------
    dsn : str, optional
        Conninfo override; defaults to `build_dsn()`.

    Returns
    -------
    Connection
        A verified psycopg connection.

    Raises
    ------
    DatabaseError
        If the connection cannot be established after all retry attempts.
    """
    try:
        conn = _connect_with_retry(dsn or build_dsn())
    except psycopg.Error as exc:
        raise DatabaseError(f"Cannot connect to database: {exc}") from exc
    log.info("Successfully connected to database")
    return conn


__all__ = ["build_dsn", "connect"]
