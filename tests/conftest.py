"""Pytest configuration and shared fixtures.

This module registers custom markers for CI job separation and provides
fakes for the ports the Launcher depends on, plus a fake HTTP session
that answers with real requests.Response objects.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import timedelta
from pathlib import Path
from typing import Any

import pytest
import requests

from honeyfind.adapters.cache import JsonCache
from honeyfind.config import Settings
from honeyfind.core.exceptions import CredentialError
from honeyfind.core.models import Dataset, Team
from honeyfind.core.services import Launcher


UI_HOST = "https://ui.example.test"
API_HOST = "https://api.example.test"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "core: Core models, matcher, and services")
    config.addinivalue_line("markers", "api: Honeycomb API adapter")
    config.addinivalue_line("markers", "cache: JSON cache adapter")
    config.addinivalue_line("markers", "process: Background process coordinator")
    config.addinivalue_line("markers", "cli: CLI tests")
    config.addinivalue_line(
        "markers",
        "tier: Test tier for CI job separation (0=instant, 1=fast, 2=standard, 3=slow, 4=manual)",
    )


def _make_response(status_code: int, body: Any, url: str = API_HOST) -> requests.Response:
    """Build a real Response with a JSON (or raw string) body."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    content = body if isinstance(body, str) else json.dumps(body)
    response._content = content.encode("utf-8")
    response.headers["Content-Type"] = "application/json"
    return response


class FakeSession:
    """Stands in for requests.Session, answering GETs by URL path."""

    def __init__(self, responses: dict[str, requests.Response | Exception]) -> None:
        self.responses = responses
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, headers: dict[str, str], timeout: Any) -> requests.Response:
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        path = url.removeprefix(API_HOST)
        result = self.responses[path]
        if isinstance(result, Exception):
            raise result
        return result

    def close(self) -> None:
        self.closed = True


class FakeSource:
    """DatasetSource returning a fixed list, or raising a fixed error."""

    def __init__(self, datasets: list[Dataset], error: Exception | None = None) -> None:
        self.datasets = datasets
        self.error = error
        self.keys: list[str] = []

    def fetch_team(self, api_key: str) -> Team:
        self.keys.append(api_key)
        if self.error is not None:
            raise self.error
        return self.datasets[0].team

    def fetch_datasets(self, api_key: str) -> list[Dataset]:
        self.keys.append(api_key)
        if self.error is not None:
            raise self.error
        return list(self.datasets)


class FakeCredentials:
    """In-memory CredentialStore."""

    def __init__(self, secrets: dict[str, str] | None = None) -> None:
        self.secrets = dict(secrets or {})

    def get(self, account: str) -> str:
        try:
            return self.secrets[account]
        except KeyError:
            raise CredentialError(f"No API key stored for '{account}'", account=account) from None

    def set(self, account: str, secret: str) -> None:
        self.secrets[account] = secret


class FakeCoordinator:
    """ProcessCoordinator that records spawns instead of running them.

    A spawned job counts as running afterwards, like a real detached
    download would until it exits.
    """

    def __init__(self, running: bool = False, spawn_error: Exception | None = None) -> None:
        self.running = running
        self.spawn_error = spawn_error
        self.spawned: list[tuple[str, tuple[str, ...]]] = []

    def is_running(self, name: str) -> bool:
        return self.running

    def run_detached(self, name: str, argv: Sequence[str]) -> None:
        if self.spawn_error is not None:
            raise self.spawn_error
        self.spawned.append((name, tuple(argv)))
        self.running = True


@pytest.fixture
def team() -> Team:
    return Team(slug="acme", ui_host=UI_HOST)


@pytest.fixture
def datasets(team: Team) -> list[Dataset]:
    return [
        Dataset(name="Checkout Errors", slug="checkout-errors", team=team),
        Dataset(name="Checkout Latency", slug="checkout-latency", team=team),
        Dataset(name="Prod Traces", slug="prod", team=team),
    ]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        api_host=API_HOST,
        ui_host=UI_HOST,
        cache_dir=tmp_path / "cache",
        data_dir=tmp_path / "data",
        max_cache_age=timedelta(minutes=180),
    )


@pytest.fixture
def cache(settings: Settings) -> JsonCache:
    return JsonCache(settings.cache_dir)


@pytest.fixture
def fake_source(datasets: list[Dataset]) -> FakeSource:
    return FakeSource(datasets)


@pytest.fixture
def fake_credentials() -> FakeCredentials:
    return FakeCredentials({"honeycomb.io": "secret-key"})


@pytest.fixture
def fake_coordinator() -> FakeCoordinator:
    return FakeCoordinator()


@pytest.fixture
def launcher(
    fake_source: FakeSource,
    cache: JsonCache,
    fake_credentials: FakeCredentials,
    fake_coordinator: FakeCoordinator,
    settings: Settings,
) -> Launcher:
    """Launcher over a real JSON cache in tmp_path and fake everything else."""
    return Launcher(
        source=fake_source,
        cache=cache,
        credentials=fake_credentials,
        processes=fake_coordinator,
        settings=settings,
        download_command=("honeyfind", "--download"),
    )


@pytest.fixture
def make_response() -> Any:
    """Factory for real requests.Response objects."""
    return _make_response


@pytest.fixture
def make_session() -> Any:
    """Factory for FakeSession, keyed by API path."""
    return FakeSession
