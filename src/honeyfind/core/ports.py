"""Port interfaces for hexagonal architecture.

Ports define contracts that adapters must implement. The core domain
depends only on these protocols, never on concrete implementations,
so the launcher host (API, cache, keychain, process table, feedback
rendering) can be replaced with fakes in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable


if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import timedelta

    from honeyfind.core.models import Dataset, Feedback, Team


@runtime_checkable
class DatasetSource(Protocol):
    """Remote API that knows the team and its datasets."""

    def fetch_team(self, api_key: str) -> Team:
        """Look up the team the API key belongs to.

        Raises:
            NetworkError: If the API cannot be reached.
            HTTPError: If the API answers with a non-2xx status.
            DecodeError: If the response is not the expected JSON.
        """
        ...

    def fetch_datasets(self, api_key: str) -> list[Dataset]:
        """Fetch the team and all of its datasets.

        Either both requests succeed and every dataset references the
        fetched team, or an exception is raised and nothing is returned.
        """
        ...


@runtime_checkable
class CachePort(Protocol):
    """Key/value store of JSON documents with modification times."""

    def exists(self, key: str) -> bool:
        """Return True if a value is stored under key."""
        ...

    def load_json(self, key: str) -> Any:
        """Load and decode the value stored under key.

        Raises:
            NotFoundError: If nothing is stored under key.
            CacheCorruptError: If the stored content is not valid JSON.
        """
        ...

    def store_json(self, key: str, value: Any) -> None:
        """Replace the value under key atomically.

        Readers never observe a partially written value.

        Raises:
            CacheAccessError: If the store cannot be written.
        """
        ...

    def expired(self, key: str, max_age: timedelta) -> bool:
        """Return True if key is absent or older than max_age."""
        ...

    def age(self, key: str) -> timedelta | None:
        """Return time since key was written, or None if absent.

        Raises:
            CacheAccessError: If the store cannot be read.
        """
        ...


@runtime_checkable
class CredentialStore(Protocol):
    """Secure storage for the API key."""

    def get(self, account: str) -> str:
        """Return the secret stored for account.

        Raises:
            CredentialError: If no secret is stored or it cannot be read.
        """
        ...

    def set(self, account: str, secret: str) -> None:
        """Store secret for account, replacing any previous value."""
        ...


@runtime_checkable
class ProcessCoordinator(Protocol):
    """Starts and tracks named background jobs across invocations."""

    def is_running(self, name: str) -> bool:
        """Return True if a job with this name is currently running.

        Raises:
            BackgroundJobError: If the job state cannot be read.
        """
        ...

    def run_detached(self, name: str, argv: Sequence[str]) -> None:
        """Start argv as a detached background job without waiting.

        Raises:
            JobAlreadyRunningError: If another invocation holds the job.
            BackgroundJobError: If the process cannot be started.
        """
        ...


@runtime_checkable
class FeedbackWriter(Protocol):
    """Renders query results for the launcher or a terminal."""

    def write(self, feedback: Feedback) -> None:
        """Emit feedback in the writer's format."""
        ...

