"""Core domain services for honeyfind."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Self

from honeyfind.config import Settings
from honeyfind.core.exceptions import (
    CredentialError,
    DecodeError,
    JobAlreadyRunningError,
    MalformedURLError,
)
from honeyfind.core.fuzzy import LAUNCHER_OPTIONS, filter_datasets
from honeyfind.core.models import (
    ICON_INFO,
    ICON_WARNING,
    CacheStatus,
    Dataset,
    Feedback,
    Item,
    datasets_from_records,
)


if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from honeyfind.core.ports import (
        CachePort,
        CredentialStore,
        DatasetSource,
        ProcessCoordinator,
    )


logger = logging.getLogger(__name__)

ACCOUNT = "honeycomb.io"
CACHE_NAME = "datasets.json"
DOWNLOAD_JOB = "download"

# Re-invokes this program in download mode
DOWNLOAD_COMMAND = (sys.executable, "-m", "honeyfind", "--download")

PLACEHOLDER = Item(
    title="Downloading datasets",
    subtitle="This may take a moment",
    icon=ICON_INFO,
)
NO_RESULTS = Item(
    title="No datasets found",
    subtitle="Try a different query?",
    icon=ICON_WARNING,
)


class Launcher:
    """Serves dataset searches from cache and keeps the cache fresh.

    Queries never touch the network. When the cache is missing or older
    than the configured maximum age, a query starts a detached
    ``--download`` job (unless one is already running) and asks the
    launcher to re-run shortly, while still answering from whatever is
    cached.
    """

    def __init__(
        self,
        source: DatasetSource,
        cache: CachePort,
        credentials: CredentialStore,
        processes: ProcessCoordinator,
        settings: Settings | None = None,
        download_command: Sequence[str] = DOWNLOAD_COMMAND,
    ) -> None:
        self._source = source
        self._cache = cache
        self._credentials = credentials
        self._processes = processes
        self._settings = settings or Settings()
        self._download_command = tuple(download_command)

    @classmethod
    def from_settings(cls, settings: Settings) -> Self:
        """Create a Launcher wired to the default adapters.

        Args:
            settings: Runtime settings.

        Returns:
            Launcher using the HTTP client, JSON file cache, file
            credential store and PID-file coordinator.
        """
        from honeyfind.adapters.api import HoneycombClient
        from honeyfind.adapters.cache import JsonCache
        from honeyfind.adapters.credentials import FileCredentialStore
        from honeyfind.adapters.process import PidFileCoordinator

        return cls(
            source=HoneycombClient(api_host=settings.api_host, ui_host=settings.ui_host),
            cache=JsonCache(settings.cache_dir),
            credentials=FileCredentialStore(settings.data_dir),
            processes=PidFileCoordinator(settings.cache_dir),
            settings=settings,
        )

    def __enter__(self) -> Self:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Release the API client's connections, if it has any."""
        close = getattr(self._source, "close", None)
        if close is not None:
            close()

    @property
    def settings(self) -> Settings:
        """The settings this launcher runs with."""
        return self._settings

    def set_api_key(self, api_key: str) -> None:
        """Store the API key used by downloads.

        Raises:
            CredentialError: If the key is blank.
        """
        api_key = api_key.strip()
        if not api_key:
            raise CredentialError("API key cannot be empty", account=ACCOUNT)
        self._credentials.set(ACCOUNT, api_key)
        logger.info("stored API key for %s", ACCOUNT)

    def download(self) -> list[Dataset]:
        """Run one refresh cycle: fetch all datasets and replace the cache.

        Nothing is written unless the fetch succeeds completely, so a
        failure leaves the previous snapshot in place.

        Returns:
            The datasets written to the cache.

        Raises:
            CredentialError: If no API key is stored.
            ApiError: If the API cannot be reached or answers with an error.
            DecodeError: If the API response has an unexpected shape.
            CacheAccessError: If the cache cannot be written.
        """
        api_key = self._credentials.get(ACCOUNT)
        logger.info("downloading dataset list")

        datasets = self._source.fetch_datasets(api_key)
        self._cache.store_json(CACHE_NAME, [d.to_record() for d in datasets])

        logger.info("downloaded %d datasets", len(datasets))
        return datasets

    def load_cached(self) -> tuple[list[Dataset], bool]:
        """Load the cached datasets.

        Returns:
            (datasets, usable). A missing cache gives ([], True). A cache
            of valid JSON but the wrong shape gives ([], False) so the
            caller can force a refresh.

        Raises:
            CacheCorruptError: If the cache file is unreadable or not JSON.
        """
        if not self._cache.exists(CACHE_NAME):
            return [], True

        records = self._cache.load_json(CACHE_NAME)
        try:
            return datasets_from_records(records, source=CACHE_NAME), True
        except DecodeError as e:
            logger.warning("ignoring cached datasets: %s", e)
            return [], False

    def is_stale(self) -> bool:
        """Return True if the cache is missing or older than the max age."""
        return self._cache.expired(CACHE_NAME, self._settings.max_cache_age)

    def is_refreshing(self) -> bool:
        """Return True if a background download is running."""
        return self._processes.is_running(DOWNLOAD_JOB)

    def trigger_refresh(self) -> bool:
        """Start a background download unless one is already running.

        Returns:
            True if a new download was started.

        Raises:
            BackgroundJobError: If the download process cannot be started.
        """
        if self._processes.is_running(DOWNLOAD_JOB):
            logger.debug("download job already running")
            return False

        try:
            self._processes.run_detached(DOWNLOAD_JOB, self._download_command)
        except JobAlreadyRunningError:
            logger.debug("download job started by another invocation")
            return False

        logger.info("started background download")
        return True

    def search(self, query: str = "") -> Feedback:
        """Answer a query from the cache.

        Args:
            query: Free text typed by the user. Empty shows everything.

        Returns:
            Feedback with matching datasets, the download placeholder
            when nothing is cached yet, or a "no datasets" warning.

        Raises:
            CacheCorruptError: If the cache file is unreadable or not JSON.
            CacheAccessError: If the cache directory cannot be read.
            BackgroundJobError: If a needed refresh cannot be started.
        """
        datasets, usable = self.load_cached()
        rerun = None

        if not usable or self.is_stale():
            rerun = self._settings.rerun_interval
            self.trigger_refresh()
            # A missing cache is also stale; show progress, not stale rows
            if not datasets:
                return Feedback(items=(PLACEHOLDER,), rerun=rerun)

        matches = filter_datasets(
            self._linkable(datasets),
            query,
            options=LAUNCHER_OPTIONS,
            limit=self._settings.max_results,
        )
        if query:
            logger.debug("%d/%d datasets match %r", len(matches), len(datasets), query)

        if not matches:
            return Feedback(items=(NO_RESULTS,), rerun=rerun)
        return Feedback(
            items=tuple(_item(dataset) for dataset in matches),
            rerun=rerun,
        )

    def _linkable(self, datasets: Sequence[Dataset]) -> list[Dataset]:
        """Drop datasets whose UI link cannot be built."""
        linkable = []
        for dataset in datasets:
            try:
                dataset.url()
            except MalformedURLError as e:
                logger.warning("skipping dataset %s: %s", dataset.uid, e)
                continue
            linkable.append(dataset)
        return linkable

    def cache_status(self) -> CacheStatus:
        """Describe the cache for the status report.

        Raises:
            CacheCorruptError: If the cache file is unreadable or not JSON.
            CacheAccessError: If the cache directory cannot be read.
        """
        age = self._cache.age(CACHE_NAME)
        refreshing = self.is_refreshing()
        if age is None:
            return CacheStatus(state="missing", refreshing=refreshing)

        datasets, usable = self.load_cached()
        state = "stale" if not usable or self.is_stale() else "fresh"
        return CacheStatus(
            state=state, age=age, count=len(datasets), refreshing=refreshing
        )


def _item(dataset: Dataset) -> Item:
    """Build the actionable row for a dataset with a valid link."""
    return Item(
        title=dataset.name,
        subtitle=dataset.team.slug,
        uid=dataset.uid,
        arg=dataset.url(),
        valid=True,
    )
