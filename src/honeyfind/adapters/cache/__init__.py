"""Cache adapters."""

from honeyfind.adapters.cache.json_cache import JsonCache


__all__ = ["JsonCache"]
