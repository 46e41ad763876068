"""Honeycomb API adapter using requests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import requests

from honeyfind._version import __version__
from honeyfind.config import DEFAULT_API_HOST, DEFAULT_UI_HOST
from honeyfind.core.exceptions import DecodeError, HTTPError, NetworkError
from honeyfind.core.models import Dataset, Team


if TYPE_CHECKING:
    from types import TracebackType


logger = logging.getLogger(__name__)

TEAM_PATH = "/1/team_slug"
DATASETS_PATH = "/1/datasets"
TEAM_HEADER = "X-Honeycomb-Team"

# (connect, read) ceilings; the read timeout also bounds waiting for headers
CONNECT_TIMEOUT = 60.0
READ_TIMEOUT = 30.0


class HoneycombClient:
    """Read-only client for the team and dataset endpoints.

    Implements the DatasetSource protocol. All requests go through one
    requests.Session so the team and dataset calls share a pooled
    connection. The client owns the session and closes it on close().

    Example:
        with HoneycombClient() as client:
            datasets = client.fetch_datasets(api_key)
    """

    def __init__(
        self,
        api_host: str = DEFAULT_API_HOST,
        ui_host: str = DEFAULT_UI_HOST,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_host: Base URL of the API.
            ui_host: Base URL of the web UI, stored on every fetched Team.
            session: Optional session to use. If not provided, creates one.
        """
        self.api_host = api_host
        self.ui_host = ui_host
        self._session = session or self._create_session()
        self._timeout = (CONNECT_TIMEOUT, READ_TIMEOUT)

    @staticmethod
    def _create_session() -> requests.Session:
        session = requests.Session()
        session.headers.update(
            {
                "User-Agent": f"honeyfind/{__version__}",
                "Accept": "application/json",
            }
        )
        return session

    def __enter__(self) -> HoneycombClient:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the session."""
        self.close()

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()

    def fetch_team(self, api_key: str) -> Team:
        """Look up the team the API key belongs to.

        Args:
            api_key: Honeycomb API key.

        Returns:
            Team with the configured UI host.

        Raises:
            NetworkError: If the API cannot be reached.
            HTTPError: If the API answers with a non-2xx status.
            DecodeError: If the response has no string team_slug.
        """
        url = self._url(TEAM_PATH)
        data = self._get_json(url, api_key)

        slug = data.get("team_slug") if isinstance(data, dict) else None
        if not isinstance(slug, str) or not slug:
            raise DecodeError(f"Response has no team_slug: {data!r}", source=url)

        return Team(slug=slug, ui_host=self.ui_host)

    def fetch_datasets(self, api_key: str) -> list[Dataset]:
        """Fetch the team, then its datasets.

        Args:
            api_key: Honeycomb API key.

        Returns:
            Datasets in API order, all referencing the same Team.

        Raises:
            NetworkError: If the API cannot be reached.
            HTTPError: If the API answers with a non-2xx status.
            DecodeError: If either response has an unexpected shape.
        """
        team = self.fetch_team(api_key)
        logger.debug("fetched team %s", team.slug)

        url = self._url(DATASETS_PATH)
        data = self._get_json(url, api_key)
        if not isinstance(data, list):
            raise DecodeError("Expected a JSON array of datasets", source=url)

        datasets = []
        for entry in data:
            name = entry.get("name") if isinstance(entry, dict) else None
            slug = entry.get("slug") if isinstance(entry, dict) else None
            if not isinstance(name, str) or not isinstance(slug, str) or not slug:
                raise DecodeError(f"Invalid dataset entry: {entry!r}", source=url)
            datasets.append(Dataset(name=name, slug=slug, team=team))

        logger.debug("fetched %d datasets for team %s", len(datasets), team.slug)
        return datasets

    def _url(self, path: str) -> str:
        return self.api_host.rstrip("/") + path

    def _get_json(self, url: str, api_key: str) -> Any:
        """GET url with the team header and decode the JSON body."""
        try:
            response = self._session.get(
                url,
                headers={TEAM_HEADER: api_key},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise self._translate_request_error(e, url) from e

        if not 200 <= response.status_code < 300:
            raise HTTPError(
                f"GET {url} failed with HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {url}", source=url, cause=e) from e

    def _translate_request_error(
        self, error: requests.RequestException, url: str
    ) -> NetworkError:
        """Translate a requests exception to a domain exception.

        Args:
            error: The exception raised by requests.
            url: The URL being requested.

        Returns:
            A NetworkError describing the failure.
        """
        if isinstance(error, requests.Timeout):
            return NetworkError(f"Timed out requesting {url}", url=url, cause=error)
        if isinstance(error, requests.ConnectionError):
            return NetworkError(f"Could not connect to {url}", url=url, cause=error)
        return NetworkError(f"Request to {url} failed: {error}", url=url, cause=error)
