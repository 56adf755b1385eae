"""Main Typer application: entry point for the ``postbench`` CLI."""

from __future__ import annotations

import typer

from postbench import __version__
from postbench.cli.run import run_cmd

app = typer.Typer(
    name="postbench",
    help="Hammer an HTTP endpoint with concurrent POST requests.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("run", help="Run a POST benchmark against a URL.")(run_cmd)


def _version_callback(value: bool) -> None:
    """Print version and exit.

    Args:
        value: True if --version was passed.
    """
    if value:
        typer.echo(f"postbench {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """postbench: concurrent POST load generator."""
