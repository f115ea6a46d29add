from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import Optional

import typer

from crud_benchmark.config import get_settings
from crud_benchmark.driver import run_benchmark, summarize
from crud_benchmark.errors import BenchmarkError
from crud_benchmark.metrics import MetricsRegistry, MetricsServer
from crud_benchmark.reporter import print_summary
from crud_benchmark.utils.logging import configure_logging, get_logger

app = typer.Typer(help="CRUD benchmark with Prometheus metrics CLI.")
log = get_logger(__name__)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}:***@{settings.db_hosts}:{settings.db_port}/{settings.db_name} "
        f"table={settings.table_name} replicas={settings.database_replicas or '-'} | "
        f"dataset={settings.dataset_path} iterations={settings.benchmark_iterations} "
        f"sample_interval={settings.sample_interval_ms}ms | "
        f"metrics={settings.metrics_addr}:{settings.metrics_port}"
    )


def _serve_forever(stop: Optional[threading.Event] = None) -> None:
    """Keep the process (and the metrics endpoint thread) alive until interrupted."""
    (stop or threading.Event()).wait()


@app.command()
def run(
    dataset: Optional[Path] = typer.Option(
        None,
        "--dataset",
        "-d",
        help="CSV dataset to load (default from settings).",
    ),
    iterations: Optional[int] = typer.Option(
        None,
        "--iterations",
        "-i",
        min=0,
        help="Override number of outer iterations (default from settings).",
    ),
    persist: bool = typer.Option(
        False,
        "--persist/--no-persist",
        help="Write JSON results to the results directory.",
    ),
    results_dir: Path = typer.Option(
        Path("results"),
        "--results-dir",
        help="Directory for persisted results.",
    ),
    exit_on_finish: bool = typer.Option(
        False,
        "--exit-on-finish",
        help="Stop the metrics endpoint and exit once the benchmark completes.",
    ),
) -> None:
    """
    Run the CRUD benchmark while exposing metrics, then keep serving them.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)

    registry = MetricsRegistry()
    server = MetricsServer(registry, port=settings.metrics_port, addr=settings.metrics_addr)
    try:
        server.start()
    except OSError as exc:
        log.error(f"Cannot expose metrics endpoint: {exc}")
        raise typer.Exit(code=1)

    typer.echo(
        f"Running benchmark dataset='{dataset or settings.dataset_path}' "
        f"iterations={settings.benchmark_iterations if iterations is None else iterations} "
        f"(metrics at {server.url})."
    )
    try:
        timings = run_benchmark(
            registry,
            settings=settings,
            dataset_path=dataset,
            iterations=iterations,
            persist=persist,
            results_dir=results_dir,
        )
    except BenchmarkError as exc:
        log.error(f"Benchmark aborted: {exc}")
        server.stop()
        raise typer.Exit(code=1)

    print_summary(summarize(timings), replicas=settings.database_replicas)

    if exit_on_finish:
        server.stop()
        return

    typer.echo(f"Benchmark finished; serving metrics at {server.url} (Ctrl-C to exit).")
    _serve_forever()


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
