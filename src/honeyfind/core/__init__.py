"""Core domain module for honeyfind.

This module contains pure Python domain models, the fuzzy matcher and port
definitions. It has no I/O dependencies and can be tested in isolation.
"""

from honeyfind.core.models import CacheStatus, Dataset, Feedback, Item, Team
from honeyfind.core.ports import (
    CachePort,
    CredentialStore,
    DatasetSource,
    FeedbackWriter,
    ProcessCoordinator,
)


__all__ = [
    "CachePort",
    "CacheStatus",
    "CredentialStore",
    "Dataset",
    "DatasetSource",
    "Feedback",
    "FeedbackWriter",
    "Item",
    "ProcessCoordinator",
    "Team",
]
