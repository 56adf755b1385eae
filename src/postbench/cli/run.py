"""``postbench run``: execute a benchmark and print the results."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from postbench._internal.config import BenchConfig, load_body, load_defaults
from postbench._internal.errors import PostBenchError
from postbench.cli.report import print_report
from postbench.engine.runner import run_benchmark

console = Console(stderr=True)


def run_cmd(
    url: str = typer.Option(
        ...,
        "--url",
        "-u",
        help="Target URL for every POST request.",
    ),
    body_file: Path = typer.Option(
        ...,
        "--body-file",
        "--file-path-for-body-data",
        "-b",
        help="File whose raw contents are sent as the request body.",
    ),
    concurrency: int | None = typer.Option(
        None,
        "--concurrency",
        "-c",
        help="Number of concurrent workers [default: 100].",
        min=1,
    ),
    requests_per_worker: int | None = typer.Option(
        None,
        "--requests-per-worker",
        "-n",
        help="Sequential requests issued by each worker [default: 1000].",
        min=0,
    ),
    pool_size: int | None = typer.Option(
        None,
        "--pool-max-idle-per-host",
        "--pool-size",
        help="Maximum connections per destination host [default: 100].",
        min=1,
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Per-request timeout in seconds (default: wait forever).",
    ),
    json_output: Path | None = typer.Option(
        None,
        "--json-output",
        "-o",
        help="Also write the result as JSON to this file.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit structured JSON log lines.",
    ),
) -> None:
    """Execute a POST benchmark and print throughput and latency statistics."""
    try:
        defaults = load_defaults()
        config = BenchConfig(
            url=url,
            body=load_body(body_file),
            concurrency=concurrency if concurrency is not None else defaults.concurrency,
            requests_per_worker=(
                requests_per_worker
                if requests_per_worker is not None
                else defaults.requests_per_worker
            ),
            pool_size=pool_size if pool_size is not None else defaults.pool_size,
            request_timeout=timeout if timeout is not None else defaults.request_timeout,
        )
    except PostBenchError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(
        Panel(
            f"[bold]URL:[/bold]          {config.url}\n"
            f"[bold]Concurrency:[/bold]  {config.concurrency}\n"
            f"[bold]Requests:[/bold]     {config.requests_per_worker} per worker\n"
            f"[bold]Body:[/bold]         {len(config.body)} bytes",
            title="postbench",
            border_style="cyan",
        )
    )

    log_level = logging.DEBUG if verbose else logging.INFO
    try:
        result = run_benchmark(config, log_level=log_level, json_logs=json_logs)
    except PostBenchError as exc:
        console.print(f"[red]Benchmark failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    print_report(result, console)

    if json_output is not None:
        try:
            json_output.write_text(json.dumps(result.to_dict(), indent=2))
        except OSError as exc:
            console.print(f"[red]Error:[/red] cannot write {json_output}: {exc}")
            raise typer.Exit(code=1) from exc
        console.print(f"Result written to {json_output}")
