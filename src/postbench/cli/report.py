"""Rich rendering of a completed run."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table

if TYPE_CHECKING:
    from rich.console import Console

    from postbench.metrics.models import RunResult


def _fmt_ms(value: float | None) -> str:
    if value is None:
        return "n/a"
    return f"{value:.3f}"


def build_report(result: RunResult) -> Table:
    """Build the benchmark results table.

    Args:
        result: Completed run result.

    Returns:
        Formatted Rich Table.
    """
    table = Table(
        title="Benchmark Results",
        show_header=True,
        header_style="bold green",
        expand=True,
    )
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Target URL", result.url)
    table.add_row("Concurrency", str(result.concurrency))
    table.add_row("Requests/Worker", str(result.requests_per_worker))
    table.add_section()

    table.add_row("[cyan]Requests[/cyan]", "")
    table.add_row("  Total", str(result.total_requests))
    table.add_row("  Success", str(result.success_count))
    table.add_row("  Errors", str(result.error_count))
    table.add_section()

    table.add_row("[cyan]Timing[/cyan]", "")
    table.add_row("  Elapsed", f"{result.elapsed_seconds:.3f}s")
    table.add_row("  Throughput", f"{result.requests_per_second:.2f} req/s")
    table.add_section()

    table.add_row("[cyan]Latency (milliseconds)[/cyan]", "")
    table.add_row("  Average", _fmt_ms(result.latency_avg))
    table.add_row("  Min", _fmt_ms(result.latency_min))
    table.add_row("  Max", _fmt_ms(result.latency_max))
    table.add_row("  p50", _fmt_ms(result.latency_p50))
    table.add_row("  p90", _fmt_ms(result.latency_p90))
    table.add_row("  p99", _fmt_ms(result.latency_p99))

    return table


def print_report(result: RunResult, console: Console) -> None:
    """Print the results table to ``console``."""
    console.print()
    console.print(build_report(result))
