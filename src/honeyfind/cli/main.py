"""Command line entry point for honeyfind.

A single command serves every mode. The launcher calls it with the typed
query; the background refresh calls it with ``--download``.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

import typer
from rich.console import Console

from honeyfind.cli.formatting import _error_feedback, _status_table
from honeyfind.config import Settings
from honeyfind.core.exceptions import HoneyfindError
from honeyfind.core.services import Launcher
from honeyfind.logging_config import configure_logging


if TYPE_CHECKING:
    from honeyfind.core.ports import FeedbackWriter


app = typer.Typer(
    name="honeyfind",
    help="Fuzzy search over Honeycomb datasets, served from a local cache.",
    add_completion=False,
)


class OutputFormat(str, Enum):
    ALFRED = "alfred"
    TABLE = "table"


def _fail(error: HoneyfindError) -> typer.Exit:
    """Report an error on stderr and return the exit to raise."""
    typer.echo(f"Error: {error}", err=True)
    if error.recovery_hint:
        typer.echo(f"Hint: {error.recovery_hint}", err=True)
    return typer.Exit(1)


def _writer(output_format: OutputFormat) -> FeedbackWriter:
    from honeyfind.adapters.feedback import ScriptFilterWriter, TableWriter

    if output_format is OutputFormat.TABLE:
        return TableWriter()
    return ScriptFilterWriter()


@app.command()
def run(
    query: list[str] | None = typer.Argument(
        None,
        help="Text to search dataset names for. Empty lists every dataset.",
    ),
    set_key: str | None = typer.Option(
        None,
        "--set",
        metavar="KEY",
        help="Store the Honeycomb API key and exit.",
    ),
    download: bool = typer.Option(
        False,
        "--download",
        help="Download the dataset list into the cache and exit.",
    ),
    status: bool = typer.Option(
        False,
        "--status",
        help="Show cache state, age and whether a refresh is running.",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.ALFRED,
        "--format",
        "-f",
        help="Output format for query results.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug messages to stderr.",
    ),
) -> None:
    """Search cached Honeycomb datasets, refreshing them in the background."""
    configure_logging(verbose)
    text = " ".join(query or []).strip()

    try:
        settings = Settings.from_env()
    except HoneyfindError as e:
        if set_key is None and not download and not status:
            _writer(output_format).write(_error_feedback(e))
            raise typer.Exit(1) from None
        raise _fail(e) from None

    with Launcher.from_settings(settings) as launcher:
        if set_key is not None:
            try:
                launcher.set_api_key(set_key)
            except HoneyfindError as e:
                raise _fail(e) from None
            typer.echo("API key saved.")
            return

        if download:
            try:
                launcher.download()
            except HoneyfindError as e:
                raise _fail(e) from None
            return

        if status:
            try:
                cache_status = launcher.cache_status()
            except HoneyfindError as e:
                raise _fail(e) from None
            Console().print(_status_table(cache_status))
            return

        writer = _writer(output_format)
        try:
            feedback = launcher.search(text)
        except HoneyfindError as e:
            writer.write(_error_feedback(e))
            raise typer.Exit(1) from None
        writer.write(feedback)


def main() -> None:
    """Entry point for the CLI."""
    app()
