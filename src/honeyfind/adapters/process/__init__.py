"""Background process adapters."""

from honeyfind.adapters.process.coordinator import PidFileCoordinator


__all__ = ["PidFileCoordinator"]
