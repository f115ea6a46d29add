"""
Dataset generation script for the CRUD benchmark.

Writes a deterministic pseudo-random near-earth-object CSV with the same
column layout as the NASA NEO dataset the benchmark loads
(`dataset/neo.csv`), so the benchmark can run without downloading it.
"""

from __future__ import annotations

import csv
import random
import sys
import time
from pathlib import Path

import typer

from crud_benchmark.domain.models import COLUMNS

app = typer.Typer(help="Generate a synthetic near-earth-object CSV dataset.")


def _generate_rows_csv(csv_path: Path, rows: int, batch_size: int, seed: int) -> None:
    rng = random.Random(seed)
    base_id = 2_000_000

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(COLUMNS)

        buffer: list[list[str]] = []
        for i in range(rows):
            year = rng.randint(1990, 2023)
            designation = f"{year} {rng.choice('ABCDEFGHJKLMNOPQRSTUVWXY')}{rng.choice('ABCDEFGHJKLMNOPQRSTUVWXYZ')}{rng.randint(1, 99)}"
            min_diameter = rng.uniform(0.001, 5.0)
            absolute_magnitude = rng.uniform(14.0, 30.0)
            buffer.append(
                [
                    str(base_id + i),
                    f"({designation})",
                    f"{min_diameter:.6f}",
                    f"{min_diameter * 2.236:.6f}",
                    f"{rng.uniform(1_000, 150_000):.6f}",
                    f"{rng.uniform(10_000, 75_000_000):.6f}",
                    "Earth",
                    "False",
                    f"{absolute_magnitude:.2f}",
                    "True" if absolute_magnitude < 22.0 and rng.random() < 0.5 else "False",
                ]
            )
            if len(buffer) >= batch_size:
                writer.writerows(buffer)
                buffer.clear()
        if buffer:
            writer.writerows(buffer)


@app.command()
def main(
    rows: int = typer.Option(
        90_000,
        "--rows",
        "-r",
        help="Number of rows to generate.",
    ),
    batch_size: int = typer.Option(
        10_000,
        "--batch-size",
        "-b",
        help="Batch size for CSV buffering during generation.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path = typer.Option(
        Path("dataset/neo.csv"),
        "--output",
        "-o",
        help="CSV output path.",
    ),
) -> None:
    """
    Generate a synthetic NEO dataset.
    """
    start = time.perf_counter()
    output.parent.mkdir(parents=True, exist_ok=True)

    typer.echo(f"Generating {rows:,} rows -> {output} (batch={batch_size}, seed={seed})")
    _generate_rows_csv(output, rows=rows, batch_size=batch_size, seed=seed)
    duration = time.perf_counter() - start
    typer.echo(f"CSV generation completed in {duration:.2f}s ({rows / duration:,.0f} rows/s)")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
