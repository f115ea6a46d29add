from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table


def print_summary(
    summary: List[Dict[str, Any]],
    replicas: str = "",
    console: Optional[Console] = None,
) -> None:
    """
    Render aggregated operation timings as a rich table.

    Expects the rows produced by `crud_benchmark.driver.summarize`, already
    ordered by operation and batch size.
    """
    console = console or Console()

    if not summary:
        console.print("[yellow]No results to display.[/yellow]")
        return

    title = "CRUD Benchmark Results"
    if replicas:
        title = f"{title}\n[dim]Database replicas: {replicas}[/dim]"

    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Operation", style="cyan", no_wrap=True)
    table.add_column("Elements", justify="right", style="magenta")
    table.add_column("Runs", justify="right", style="blue")
    table.add_column("Duration (s)\n[dim](Median ± StdDev)[/dim]", justify="right", style="green")
    table.add_column("Mean (s)", justify="right", style="bold green")
    table.add_column("Samples\n[dim](Mean)[/dim]", justify="right", style="yellow")

    for row in summary:
        duration = row["duration_seconds"]
        table.add_row(
            row["operation"].upper(),
            f"{row['elements']:,}",
            str(row["runs"]),
            f"{duration['median']:.4f} ± {duration['stddev']:.4f}",
            f"{duration['mean']:.4f}",
            f"{row['mean_samples']:.1f}",
        )

    console.print(table)


__all__ = ["print_summary"]
