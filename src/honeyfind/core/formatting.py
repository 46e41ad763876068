"""Formatting utilities for domain logic."""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from datetime import timedelta


def status_to_color(status: str) -> str:
    """Map cache state to color name.

    Args:
        status: Cache state ("fresh", "stale", or "missing")

    Returns:
        Color name string:
        - "fresh" -> "green"
        - "stale" -> "yellow"
        - "missing" -> "red"
        - invalid -> empty string
    """
    color_map = {
        "fresh": "green",
        "stale": "yellow",
        "missing": "red",
    }
    return color_map.get(status, "")


def format_age(age: timedelta | None) -> str:
    """Format a cache age like "2h 05m" or "45s"; "N/A" for None."""
    if age is None:
        return "N/A"

    seconds = max(int(age.total_seconds()), 0)
    hours, rest = divmod(seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    if minutes:
        return f"{minutes}m {seconds:02d}s"
    return f"{seconds}s"
