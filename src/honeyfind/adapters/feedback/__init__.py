"""Feedback rendering adapters."""

from honeyfind.adapters.feedback.writers import ScriptFilterWriter, TableWriter


__all__ = ["ScriptFilterWriter", "TableWriter"]
