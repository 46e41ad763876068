"""Configuration for honeyfind.

Settings are read from environment variables. When running inside the
launcher, its per-workflow cache and data directories are picked up
automatically; otherwise the platform's user directories are used.

API_HOST and UI_HOST may carry a path prefix, for example when the API
is reached through a proxy. The prefix is kept: request paths such as
``/1/datasets`` and dataset links are appended to the host as given.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Self
from urllib.parse import urlsplit

import appdirs

from honeyfind.core.exceptions import ConfigurationError


if TYPE_CHECKING:
    from collections.abc import Mapping


APP_NAME = "honeyfind"

DEFAULT_API_HOST = "https://api.honeycomb.io"
DEFAULT_UI_HOST = "https://ui.honeycomb.io"
DEFAULT_MAX_CACHE_AGE = timedelta(minutes=180)
DEFAULT_MAX_RESULTS = 200
DEFAULT_RERUN_INTERVAL = 0.3


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime settings.

    Attributes:
        api_host: Base URL of the Honeycomb API.
        ui_host: Base URL of the Honeycomb web UI, used for dataset links.
        cache_dir: Directory holding the dataset cache and job files.
        data_dir: Directory holding the stored API key.
        max_cache_age: Age after which the dataset cache is refreshed.
        max_results: Maximum number of rows returned for a query.
        rerun_interval: Seconds the launcher waits before re-running a
            query while a refresh is pending.
    """

    api_host: str = DEFAULT_API_HOST
    ui_host: str = DEFAULT_UI_HOST
    cache_dir: Path = Path(appdirs.user_cache_dir(APP_NAME))
    data_dir: Path = Path(appdirs.user_data_dir(APP_NAME))
    max_cache_age: timedelta = DEFAULT_MAX_CACHE_AGE
    max_results: int = DEFAULT_MAX_RESULTS
    rerun_interval: float = DEFAULT_RERUN_INTERVAL

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        _check_host("API_HOST", self.api_host)
        _check_host("UI_HOST", self.ui_host)
        if self.max_results <= 0:
            raise ConfigurationError("max_results must be positive")
        if self.max_cache_age <= timedelta(0):
            raise ConfigurationError("max_cache_age must be positive")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Settings with defaults for anything not set.

        Raises:
            ConfigurationError: If a variable has an invalid value.

        Example:
            >>> settings = Settings.from_env({"UI_HOST": "https://ui.eu1.honeycomb.io"})
            >>> settings.ui_host
            'https://ui.eu1.honeycomb.io'
        """
        env = os.environ if environ is None else environ

        cache_dir = env.get("HONEYFIND_CACHE_DIR") or env.get("alfred_workflow_cache")
        data_dir = env.get("HONEYFIND_DATA_DIR") or env.get("alfred_workflow_data")

        return cls(
            api_host=env.get("API_HOST") or DEFAULT_API_HOST,
            ui_host=env.get("UI_HOST") or DEFAULT_UI_HOST,
            cache_dir=Path(cache_dir) if cache_dir else Path(appdirs.user_cache_dir(APP_NAME)),
            data_dir=Path(data_dir) if data_dir else Path(appdirs.user_data_dir(APP_NAME)),
            max_cache_age=timedelta(
                minutes=_int_var(
                    env,
                    "HONEYFIND_MAX_CACHE_AGE",
                    int(DEFAULT_MAX_CACHE_AGE.total_seconds() // 60),
                )
            ),
            max_results=_int_var(env, "HONEYFIND_MAX_RESULTS", DEFAULT_MAX_RESULTS),
        )


def _check_host(name: str, value: str) -> None:
    """Raise ConfigurationError unless value is an absolute http(s) URL."""
    parts = urlsplit(value)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigurationError(f"{name} must be an absolute http(s) URL, got {value!r}")


def _int_var(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value
