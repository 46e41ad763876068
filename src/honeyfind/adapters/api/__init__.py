"""API adapters."""

from honeyfind.adapters.api.honeycomb import HoneycombClient


__all__ = ["HoneycombClient"]
