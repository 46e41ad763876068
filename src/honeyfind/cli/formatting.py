"""Shared formatting helpers for the CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table
from rich.text import Text

from honeyfind.core.formatting import format_age, status_to_color
from honeyfind.core.models import ICON_ERROR, Feedback, Item


if TYPE_CHECKING:
    from honeyfind.core.exceptions import HoneyfindError
    from honeyfind.core.models import CacheStatus


def _format_status_with_color(status: str) -> Text:
    """Format status string with color coding.

    Args:
        status: Status string ("fresh", "stale", or "missing")

    Returns:
        Rich Text object with appropriate color:
        - "fresh" -> green
        - "stale" -> yellow
        - "missing" -> red
    """
    color = status_to_color(status)
    return Text(status, style=color) if color else Text(status)


def _status_table(status: CacheStatus) -> Table:
    """Build the one-row cache status table."""
    table = Table()
    table.add_column("Cache")
    table.add_column("Status")
    table.add_column("Age")
    table.add_column("Datasets", justify="right")
    table.add_column("Refreshing")

    table.add_row(
        "datasets",
        _format_status_with_color(status.state),
        format_age(status.age),
        str(status.count),
        "yes" if status.refreshing else "no",
    )
    return table


def _error_feedback(error: HoneyfindError) -> Feedback:
    """Turn an error into a single non-actionable row."""
    return Feedback(
        items=(
            Item(
                title=str(error),
                subtitle=error.recovery_hint or "",
                icon=ICON_ERROR,
            ),
        )
    )
