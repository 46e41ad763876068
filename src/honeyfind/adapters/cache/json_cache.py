"""File-based JSON cache adapter implementing CachePort."""

from __future__ import annotations

import json
import os
import tempfile
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from honeyfind.core.exceptions import CacheAccessError, CacheCorruptError, NotFoundError


class JsonCache:
    """Directory of JSON documents, one file per key.

    Writes go to a temporary file in the same directory which is then
    renamed over the target, so readers see either the old document or
    the new one and never a partial write. The file's mtime is the
    document's age.

    Attributes:
        cache_dir: Directory where documents are stored.
    """

    def __init__(self, cache_dir: Path) -> None:
        """Initialize the cache with a directory path.

        Args:
            cache_dir: Directory where documents will be stored.
        """
        self.cache_dir = cache_dir

    def _path(self, key: str) -> Path:
        """Get the path for a cached document."""
        return self.cache_dir / key

    def exists(self, key: str) -> bool:
        """Return True if a document is stored under key."""
        return self._path(key).is_file()

    def load_json(self, key: str) -> Any:
        """Load and decode the document stored under key.

        Args:
            key: Cache key identifying the document.

        Returns:
            The decoded JSON value.

        Raises:
            NotFoundError: If no document is stored under key.
            CacheCorruptError: If the file is unreadable or not valid JSON.
        """
        path = self._path(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise NotFoundError(key) from None
        except (OSError, UnicodeDecodeError) as e:
            raise CacheCorruptError(
                f"Cache file for '{key}' is unreadable",
                key=key,
                path=path,
                cause=e,
            ) from e

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise CacheCorruptError(
                f"Cache file for '{key}' is not valid JSON",
                key=key,
                path=path,
                cause=e,
            ) from e

    def store_json(self, key: str, value: Any) -> None:
        """Serialize value and atomically replace the document under key.

        Args:
            key: Cache key for the document.
            value: JSON-serializable value.

        Raises:
            TypeError: If value is not JSON-serializable. The previous
                document is left untouched.
            CacheAccessError: If the cache directory cannot be written.
        """
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
            )
        except OSError as e:
            raise CacheAccessError(
                f"Cannot write cache entry '{key}': {e}", key=key, path=path, cause=e
            ) from e

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise CacheAccessError(
                f"Cannot write cache entry '{key}': {e}", key=key, path=path, cause=e
            ) from e
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    def age(self, key: str) -> timedelta | None:
        """Return time since the document was written, or None if absent.

        Raises:
            CacheAccessError: If the cache directory cannot be read.
        """
        path = self._path(key)
        try:
            mtime = path.stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheAccessError(
                f"Cannot read cache entry '{key}': {e}", key=key, path=path, cause=e
            ) from e
        written = datetime.fromtimestamp(mtime, tz=UTC)
        return datetime.now(UTC) - written

    def expired(self, key: str, max_age: timedelta) -> bool:
        """Return True if key is absent or older than max_age."""
        age = self.age(key)
        return age is None or age > max_age

