"""CLI for honeyfind."""

from honeyfind.cli.main import app, main


__all__ = ["app", "main"]
