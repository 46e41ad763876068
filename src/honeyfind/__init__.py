"""honeyfind - fuzzy search over Honeycomb datasets for a launcher.

The dataset list is downloaded in the background and cached as JSON, so
queries are answered from disk without waiting on the network.

Example:
    >>> from honeyfind import Launcher, Settings
    >>> with Launcher.from_settings(Settings.from_env()) as launcher:
    ...     feedback = launcher.search("prod")
"""

from honeyfind._version import __version__
from honeyfind.adapters.api import HoneycombClient
from honeyfind.adapters.cache import JsonCache
from honeyfind.adapters.credentials import FileCredentialStore
from honeyfind.adapters.feedback import ScriptFilterWriter, TableWriter
from honeyfind.adapters.process import PidFileCoordinator
from honeyfind.config import Settings
from honeyfind.core.exceptions import (
    ApiError,
    BackgroundJobError,
    CacheAccessError,
    CacheCorruptError,
    ConfigurationError,
    CredentialError,
    DecodeError,
    HoneyfindError,
    HTTPError,
    JobAlreadyRunningError,
    MalformedURLError,
    NetworkError,
    NotFoundError,
)
from honeyfind.core.fuzzy import filter_datasets, match, rank
from honeyfind.core.models import CacheStatus, Dataset, Feedback, Item, Team
from honeyfind.core.services import Launcher


__all__ = [
    "ApiError",
    "BackgroundJobError",
    "CacheAccessError",
    "CacheCorruptError",
    "CacheStatus",
    "ConfigurationError",
    "CredentialError",
    "Dataset",
    "DecodeError",
    "Feedback",
    "FileCredentialStore",
    "HTTPError",
    "HoneycombClient",
    "HoneyfindError",
    "Item",
    "JobAlreadyRunningError",
    "JsonCache",
    "Launcher",
    "MalformedURLError",
    "NetworkError",
    "NotFoundError",
    "PidFileCoordinator",
    "ScriptFilterWriter",
    "Settings",
    "TableWriter",
    "Team",
    "__version__",
    "filter_datasets",
    "match",
    "rank",
]
