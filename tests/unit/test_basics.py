import csv
from pathlib import Path

import pytest

from crud_benchmark import config
from crud_benchmark.domain.models import COLUMNS, Operation, batch, batch_sizes
from crud_benchmark.infrastructure.db_factory import build_dsn
from scripts import generate_data

_ENV_VARS = (
    "DB_HOSTS",
    "DB_PORT",
    "DB_USER",
    "DB_PASSWORD",
    "DB_NAME",
    "BENCHMARK_TABLE",
    "DATABASE_REPLICAS",
    "BENCHMARK_ITERATIONS",
    "SAMPLE_INTERVAL_MS",
    "METRICS_PORT",
)


def test_settings_defaults(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    settings = config.Settings(_env_file=None)
    assert settings.db_hosts == "localhost"
    assert settings.db_port == 5432
    assert settings.db_name == "my_database"
    assert settings.table_name == "nearest_objects"
    assert settings.database_replicas == ""
    assert settings.benchmark_iterations == 30
    assert settings.sample_interval_ms == 100
    assert settings.metrics_port == 2112


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("DB_HOSTS", "db-0.mysql, db-1.mysql")
    monkeypatch.setenv("DATABASE_REPLICAS", "2")
    monkeypatch.setenv("DB_PASSWORD", "secret")
    settings = config.Settings(_env_file=None)
    assert settings.hosts == ["db-0.mysql", "db-1.mysql"]
    assert settings.database_replicas == "2"
    assert settings.db_password == "secret"


def test_build_dsn_lists_every_host():
    settings = config.Settings(
        _env_file=None,
        db_hosts="a.example,b.example",
        db_port=5433,
        db_user="root",
        db_password="pw",
        db_name="my_database",
    )
    dsn = build_dsn(settings)
    assert "host=a.example,b.example" in dsn
    assert "port=5433,5433" in dsn
    assert "dbname=my_database" in dsn
    assert "user=root" in dsn


@pytest.mark.parametrize(
    ("total", "expected"),
    [
        (100, (33, 66, 100)),
        (9, (3, 6, 9)),
        (10, (3, 6, 10)),
        (2, (0, 0, 2)),
        (0, (0, 0, 0)),
    ],
)
def test_batch_sizes(total, expected):
    assert batch_sizes(total) == expected


def test_batch_sizes_rejects_negative_total():
    with pytest.raises(ValueError):
        batch_sizes(-1)


def test_batch_is_a_prefix_view(nine_records):
    prefix = list(batch(nine_records, 3))
    assert prefix == list(nine_records[:3])
    assert prefix[0] is nine_records[0]


def test_operation_values_are_metric_labels():
    assert [op.value for op in Operation] == ["insert", "read", "update", "delete"]


def test_record_as_row_follows_column_order(nine_records):
    row = nine_records[0].as_row()
    assert len(row) == len(COLUMNS)
    assert row[0] == nine_records[0].id
    assert row[COLUMNS.index("hazardous")] is nine_records[0].is_hazardous


def test_generate_data_writes_csv(tmp_path: Path):
    csv_path = tmp_path / "neo.csv"
    generate_data._generate_rows_csv(csv_path, rows=5, batch_size=2, seed=123)
    assert csv_path.exists()
    with csv_path.open("r", newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    # header + 5 rows = 6 lines
    assert len(rows) == 6
    assert tuple(rows[0]) == COLUMNS
    assert rows[1][6] == "Earth"
