"""
Pytest configuration for the CRUD benchmark.

Provides fixtures for:
- Settings override for integration tests
- Database availability checks and a gateway on a scratch table
- Small in-memory and on-disk datasets
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator, Tuple

import psycopg
import pytest

from crud_benchmark.config import Settings
from crud_benchmark.domain.models import Record
from crud_benchmark.infrastructure.db_factory import build_dsn
from crud_benchmark.infrastructure.gateway import DatabaseGateway

TEST_TABLE = "nearest_objects_test"


def make_record(index: int) -> Record:
    return Record(
        id=1000 + index,
        name=f"({2000 + index} AB{index})",
        min_diameter=0.1 * (index + 1),
        max_diameter=0.2 * (index + 1),
        relative_velocity=10_000.0 + index,
        miss_distance=1_000_000.0 + index,
        orbiting_body="Earth",
        is_sentry_object=False,
        absolute_magnitude=20.5,
        is_hazardous=index % 2 == 0,
    )


@pytest.fixture
def nine_records() -> Tuple[Record, ...]:
    """Dataset of 9 records (batch sizes 3, 6, 9)."""
    return tuple(make_record(i) for i in range(9))


@pytest.fixture
def neo_csv(tmp_path: Path) -> Path:
    """
    Small CSV in the NASA NEO dataset's column layout.
    """
    csv_path = tmp_path / "neo.csv"
    csv_path.write_text(
        "id,name,est_diameter_min,est_diameter_max,relative_velocity,miss_distance,"
        "orbiting_body,sentry_object,absolute_magnitude,hazardous\n"
        "2162635,162635 (2000 SS164),1.1982708007,2.6794149658,13569.2492241812,"
        "54839744.08284605,Earth,False,16.73,False\n"
        "2277475,277475 (2005 WK4),0.2658,0.5943468684,73588.7266634981,"
        "61438126.52395093,Earth,False,20.0,True\n"
        "2512244,512244 (2015 YE18),0.7220295577,1.6145071727,114258.6921290471,"
        "49798724.94045679,Earth,False,17.83,False\n",
        encoding="utf-8",
    )
    return csv_path


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_hosts=os.getenv("DB_HOSTS", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "my_database"),
        table_name=TEST_TABLE,
        database_replicas="1",
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return build_dsn(test_settings)


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture
def gateway(
    test_dsn: str, test_settings: Settings, db_connection_available: bool
) -> Generator[DatabaseGateway, None, None]:
    """
    Gateway over a scratch table, dropped again after the test.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    gw = DatabaseGateway.open(test_dsn, table_name=test_settings.table_name)
    try:
        yield gw
    finally:
        gw.drop_table()
        gw.close()
