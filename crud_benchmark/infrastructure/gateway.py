"""
Database gateway for the CRUD benchmark.

Wraps the single benchmark connection and exposes the table lifecycle
(create/drop/clean) plus the batch operations that the driver times.

Failure policy:
- connection, table creation, transaction begin/prepare/commit and reads are
  fatal and raise `DatabaseError`;
- table drop, individual insert rows, UPDATE and DELETE failures are logged
  and otherwise ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

import psycopg
from psycopg import Connection, sql

from crud_benchmark.domain.models import COLUMNS, Record
from crud_benchmark.errors import DatabaseError
from crud_benchmark.infrastructure.db_factory import connect
from crud_benchmark.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_TABLE = "nearest_objects"

_CREATE_TABLE = """
CREATE TABLE {table} (
    id INTEGER,
    name VARCHAR(255),
    est_diameter_min DOUBLE PRECISION,
    est_diameter_max DOUBLE PRECISION,
    relative_velocity DOUBLE PRECISION,
    miss_distance DOUBLE PRECISION,
    orbiting_body VARCHAR(255),
    sentry_object BOOLEAN,
    absolute_magnitude REAL,
    hazardous BOOLEAN
)
"""


@dataclass(frozen=True)
class InsertOutcome:
    """Row accounting for one `insert_batch` call."""

    attempted: int
    failed: int

    @property
    def inserted(self) -> int:
        return self.attempted - self.failed


class DatabaseGateway:
    """
    Table lifecycle and batch CRUD over one autocommit psycopg connection.

    Example
    -------
        with DatabaseGateway.open(table_name="nearest_objects") as gateway:
            gateway.clean()
            gateway.insert_batch(records)
            gateway.read_n(len(records))
    """

    def __init__(self, conn: Connection, table_name: str = DEFAULT_TABLE) -> None:
        self._conn = conn
        self.table_name = table_name
        self._table = sql.Identifier(table_name)

    @classmethod
    def open(cls, dsn: Optional[str] = None, table_name: str = DEFAULT_TABLE) -> "DatabaseGateway":
        """Connect (with retry) and wrap the connection in a gateway."""
        return cls(connect(dsn), table_name=table_name)

    def create_table(self) -> None:
        try:
            self._conn.execute(sql.SQL(_CREATE_TABLE).format(table=self._table))
        except psycopg.Error as exc:
            raise DatabaseError(f"Cannot create table {self.table_name}: {exc}") from exc

    def drop_table(self) -> None:
        """Drop the table; a failure (e.g. the table does not exist) is ignored."""
        try:
            self._conn.execute(sql.SQL("DROP TABLE {}").format(self._table))
        except psycopg.Error as exc:
            log.debug(
                "Drop table failed, ignoring",
                extra={"table": self.table_name, "error": str(exc)},
            )

    def clean(self) -> None:
        """Drop and recreate the table so the next pass starts empty."""
        log.info("Cleaning database", extra={"table": self.table_name})
        self.drop_table()
        self.create_table()
        log.info("Successfully cleaned database", extra={"table": self.table_name})

    def insert_batch(self, records: Iterable[Record]) -> InsertOutcome:
        """
        Insert records in one transaction with one prepared INSERT statement.

        Each row runs inside its own savepoint, so a failing row is rolled back
        on its own and skipped without aborting the surrounding transaction.
        Failed rows are counted, not raised. The SAVEPOINT and RELEASE issued
        per row are two extra round trips each, and a timed INSERT includes
        them.

        Raises
        ------
        DatabaseError
            If the transaction cannot be opened or committed.
        """
        stmt = sql.SQL("INSERT INTO {table} ({columns}) VALUES ({values})").format(
            table=self._table,
            columns=sql.SQL(", ").join(sql.Identifier(c) for c in COLUMNS),
            values=sql.SQL(", ").join(sql.Placeholder() for _ in COLUMNS),
        )
        attempted = 0
        failed = 0
        try:
            with self._conn.transaction():
                with self._conn.cursor() as cur:
                    for record in records:
                        attempted += 1
                        try:
                            with self._conn.transaction():
                                cur.execute(stmt, record.as_row(), prepare=True)
                        except psycopg.Error as exc:
                            failed += 1
                            log.debug(
                                "Row insert failed, skipping",
                                extra={"id": record.id, "error": str(exc)},
                            )
        except psycopg.Error as exc:
            raise DatabaseError(f"Batch insert into {self.table_name} failed: {exc}") from exc

        outcome = InsertOutcome(attempted=attempted, failed=failed)
        if failed:
            log.warning(
                "Batch insert committed with failed rows",
                extra={"attempted": attempted, "failed": failed},
            )
        return outcome

    def read_n(self, n: int) -> int:
        """Read up to `n` rows and discard them; returns how many were read."""
        query = sql.SQL("SELECT * FROM {} LIMIT %s").format(self._table)
        try:
            with self._conn.cursor() as cur:
                cur.execute(query, (n,))
                rows = cur.fetchall()
        except psycopg.Error as exc:
            raise DatabaseError(f"Cannot read from {self.table_name}: {exc}") from exc
        return len(rows)

    def update_all(self, random_value: float) -> None:
        """Set `relative_velocity` on every row; failures are ignored."""
        stmt = sql.SQL("UPDATE {} SET relative_velocity = %s").format(self._table)
        try:
            self._conn.execute(stmt, (random_value,))
        except psycopg.Error as exc:
            log.warning("Update failed, ignoring", extra={"error": str(exc)})

    def delete_all(self) -> None:
        """Empty the table; failures are ignored."""
        try:
            self._conn.execute(sql.SQL("DELETE FROM {}").format(self._table))
        except psycopg.Error as exc:
            log.warning("Delete failed, ignoring", extra={"error": str(exc)})

    def count(self) -> int:
        row = self._conn.execute(sql.SQL("SELECT COUNT(*) FROM {}").format(self._table)).fetchone()
        return int(row[0]) if row else 0

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "DatabaseGateway":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["DEFAULT_TABLE", "DatabaseGateway", "InsertOutcome"]
