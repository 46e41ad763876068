"""Domain exceptions for honeyfind.

All library errors inherit from HoneyfindError, allowing callers to catch
any library exception with a single except clause. Each exception provides
a recovery_hint property with guidance on resolving the error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from pathlib import Path


class HoneyfindError(Exception):
    """Base class for all honeyfind exceptions.

    Catch this to handle any error from the library.
    """

    @property
    def recovery_hint(self) -> str | None:
        """Optional guidance on how to resolve this error."""
        return None


class ApiError(HoneyfindError):
    """Base class for errors talking to the Honeycomb API.

    Attributes:
        url: The request URL that failed.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        url: str,
        cause: Exception | None = None,
    ) -> None:
        self.url = url
        self.cause = cause
        super().__init__(message)


class NetworkError(ApiError):
    """Raised when the API cannot be reached (DNS, connect, timeout)."""

    @property
    def recovery_hint(self) -> str:
        """Suggest checking connectivity."""
        return "Check your network connection and the API_HOST setting"


class HTTPError(ApiError):
    """Raised when the API answers with a non-2xx status.

    Attributes:
        status_code: The HTTP status code of the response.
    """

    def __init__(
        self,
        message: str,
        url: str,
        status_code: int,
        cause: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, url=url, cause=cause)

    @property
    def recovery_hint(self) -> str | None:
        """Suggest fixing the API key on auth failures."""
        if self.status_code in (401, 403):
            return "Check your API key and store a new one with 'honeyfind --set <key>'"
        if self.status_code >= 500:
            return "The API is having trouble, try again later"
        return None


class DecodeError(HoneyfindError):
    """Raised when a JSON document is malformed or has an unexpected shape.

    Attributes:
        source: Where the document came from (URL or cache key).
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        source: str,
        cause: Exception | None = None,
    ) -> None:
        self.source = source
        self.cause = cause
        super().__init__(message)


class CacheCorruptError(DecodeError):
    """Raised when a cache file exists but is unreadable or not valid JSON.

    Attributes:
        key: The cache key for the corrupt entry.
        path: The path to the corrupt file.
    """

    def __init__(
        self,
        message: str,
        key: str,
        path: Path,
        cause: Exception | None = None,
    ) -> None:
        self.key = key
        self.path = path
        super().__init__(message, source=key, cause=cause)

    @property
    def recovery_hint(self) -> str:
        """Suggest deleting the corrupt cache file."""
        return f"Delete {self.path} and run 'honeyfind --download'"


class CacheAccessError(HoneyfindError):
    """Raised when the cache directory cannot be read or written.

    Attributes:
        key: The cache key being accessed.
        path: The path of the cache file.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        key: str,
        path: Path,
        cause: Exception | None = None,
    ) -> None:
        self.key = key
        self.path = path
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the cache directory."""
        return (
            f"Check that {self.path.parent} is a writable directory, "
            "or point HONEYFIND_CACHE_DIR somewhere else"
        )


class NotFoundError(HoneyfindError):
    """Raised when a cache key has no stored value.

    Attributes:
        key: The missing cache key.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Cache entry '{key}' not found")


class CredentialError(HoneyfindError):
    """Raised when the stored API key is missing or unreadable.

    Attributes:
        account: The credential account that was looked up.
    """

    def __init__(self, message: str, account: str) -> None:
        self.account = account
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest storing a key."""
        return "Store your API key with 'honeyfind --set <key>'"


class MalformedURLError(HoneyfindError):
    """Raised when a dataset link cannot be built from the UI host.

    Attributes:
        host: The offending UI host value.
    """

    def __init__(self, message: str, host: str) -> None:
        self.host = host
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the UI host."""
        return "Set UI_HOST to an absolute http(s) URL"


class ConfigurationError(HoneyfindError):
    """Raised for configuration problems (invalid settings)."""

    pass


class BackgroundJobError(HoneyfindError):
    """Raised when a background job cannot be started.

    Attributes:
        name: The job name.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        name: str,
        cause: Exception | None = None,
    ) -> None:
        self.name = name
        self.cause = cause
        super().__init__(message)


class JobAlreadyRunningError(BackgroundJobError):
    """Raised when a job is already claimed by another invocation."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Job '{name}' is already running", name=name)
