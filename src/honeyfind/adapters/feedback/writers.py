"""Feedback writers implementing FeedbackWriter."""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, TextIO

from rich.console import Console
from rich.table import Table
from rich.text import Text


if TYPE_CHECKING:
    from honeyfind.core.models import Feedback


class ScriptFilterWriter:
    """Writes feedback as an Alfred script filter JSON document.

    Example output:
        {"items": [{"title": "Prod Traces", ...}], "rerun": 0.3}
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        """Initialize the writer.

        Args:
            stream: Where to write. Defaults to sys.stdout at write time.
        """
        self._stream = stream

    def write(self, feedback: Feedback) -> None:
        """Serialize feedback and write it followed by a newline."""
        stream = self._stream or sys.stdout
        stream.write(json.dumps(feedback.to_dict()))
        stream.write("\n")
        stream.flush()


class TableWriter:
    """Renders feedback as a Rich table for terminal use."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the writer.

        Args:
            console: Rich console to print to. Defaults to stdout.
        """
        self._console = console or Console()

    def write(self, feedback: Feedback) -> None:
        """Print one row per item; non-actionable rows are dimmed."""
        table = Table()
        table.add_column("Name")
        table.add_column("Team")
        table.add_column("Link")

        for item in feedback.items:
            style = "" if item.valid else "dim"
            table.add_row(
                Text(item.title, style=style),
                Text(item.subtitle, style=style),
                Text(item.arg or "", style=style),
            )

        self._console.print(table)
        if feedback.rerun is not None:
            self._console.print(Text("Refresh in progress, results may be outdated.", style="yellow"))
