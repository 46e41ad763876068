"""Core domain models for honeyfind.

These models are pure Python dataclasses with no I/O dependencies.
They represent the teams and datasets fetched from the API and the
rows handed to the launcher.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Self
from urllib.parse import quote, urlsplit, urlunsplit

from honeyfind.core.exceptions import DecodeError, MalformedURLError


if TYPE_CHECKING:
    from datetime import timedelta


# Icons shipped with macOS, used by the launcher for informational rows
ICON_INFO = "/System/Library/CoreServices/CoreTypes.bundle/Contents/Resources/ToolbarInfo.icns"
ICON_WARNING = "/System/Library/CoreServices/CoreTypes.bundle/Contents/Resources/AlertCautionIcon.icns"
ICON_ERROR = "/System/Library/CoreServices/CoreTypes.bundle/Contents/Resources/AlertStopIcon.icns"


@dataclass(frozen=True, slots=True)
class Team:
    """The team that owns a batch of datasets.

    Attributes:
        slug: Team identifier, unique per organization.
        ui_host: Base URL of the web UI, used to build dataset links.

    Example:
        >>> team = Team(slug="acme", ui_host="https://ui.honeycomb.io")
        >>> team.slug
        'acme'
    """

    slug: str
    ui_host: str

    def __post_init__(self) -> None:
        """Validate team fields after initialization."""
        if not self.slug:
            raise ValueError("Team slug cannot be empty")


@dataclass(frozen=True, slots=True)
class Dataset:
    """A named dataset belonging to a team.

    Attributes:
        name: Display name shown to the user.
        slug: Identifier, unique within the team.
        team: The owning team, shared by every dataset of one refresh.
    """

    name: str
    slug: str
    team: Team

    def __post_init__(self) -> None:
        """Validate dataset fields after initialization."""
        if not self.slug:
            raise ValueError("Dataset slug cannot be empty")

    @property
    def uid(self) -> str:
        """Stable identity across refresh cycles."""
        return f"{self.team.slug}-{self.slug}"

    def url(self) -> str:
        """Build the web UI link for this dataset.

        The link has the form ``<ui_host>/<team>/home/<dataset>``. Any path
        already present on the UI host is kept as a prefix.

        Returns:
            Absolute URL string.

        Raises:
            MalformedURLError: If the UI host is not an absolute http(s) URL.
        """
        host = self.team.ui_host
        parts = urlsplit(host)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise MalformedURLError(f"Invalid UI host: {host!r}", host=host)

        segments = [self.team.slug, "home", self.slug]
        path = parts.path.rstrip("/") + "/" + "/".join(
            quote(s, safe="") for s in segments
        )
        return urlunsplit((parts.scheme, parts.netloc, path, "", ""))

    def to_record(self) -> dict[str, Any]:
        """Convert to the JSON record stored in the cache."""
        return {
            "name": self.name,
            "slug": self.slug,
            "team": {"slug": self.team.slug, "ui_host": self.team.ui_host},
        }

    @classmethod
    def from_record(cls, record: object, source: str = "cache") -> Self:
        """Build a Dataset from a cache record.

        Args:
            record: Decoded JSON value for one dataset.
            source: Where the record came from, used in error messages.

        Returns:
            The Dataset described by the record.

        Raises:
            DecodeError: If the record does not have the expected shape.
        """
        if not isinstance(record, dict):
            raise DecodeError(f"Dataset record must be an object, got {record!r}", source)

        team = record.get("team")
        if not isinstance(team, dict):
            raise DecodeError("Dataset record has no team object", source)

        values = (
            record.get("name"),
            record.get("slug"),
            team.get("slug"),
            team.get("ui_host"),
        )
        if not all(isinstance(v, str) for v in values):
            raise DecodeError(f"Dataset record has missing fields: {record!r}", source)

        name, slug, team_slug, ui_host = values
        try:
            return cls(name=name, slug=slug, team=Team(slug=team_slug, ui_host=ui_host))
        except ValueError as e:
            raise DecodeError(str(e), source, cause=e) from e


def datasets_from_records(records: object, source: str = "cache") -> list[Dataset]:
    """Rebuild datasets from a cache snapshot.

    Records that belonged to the same team in the snapshot share a single
    Team instance again after loading.

    Raises:
        DecodeError: If the snapshot is not a list of dataset records.
    """
    if not isinstance(records, list):
        raise DecodeError("Dataset snapshot must be a JSON array", source)

    teams: dict[Team, Team] = {}
    datasets = []
    for record in records:
        dataset = Dataset.from_record(record, source)
        team = teams.setdefault(dataset.team, dataset.team)
        datasets.append(Dataset(name=dataset.name, slug=dataset.slug, team=team))
    return datasets


@dataclass(frozen=True, slots=True)
class Item:
    """A single row of launcher feedback.

    Attributes:
        title: Main text of the row.
        subtitle: Secondary text under the title.
        uid: Stable identifier the launcher uses to learn ordering.
        arg: Value passed on when the row is actioned (a URL here).
        valid: Whether the row can be actioned.
        icon: Path to an icon file.
        autocomplete: Text put into the query box on tab.
    """

    title: str
    subtitle: str = ""
    uid: str | None = None
    arg: str | None = None
    valid: bool = False
    icon: str | None = None
    autocomplete: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the Alfred script filter item schema."""
        data: dict[str, Any] = {"title": self.title, "subtitle": self.subtitle}
        if self.uid is not None:
            data["uid"] = self.uid
        if self.arg is not None:
            data["arg"] = self.arg
        if self.autocomplete is not None:
            data["autocomplete"] = self.autocomplete
        data["valid"] = self.valid
        if self.icon is not None:
            data["icon"] = {"path": self.icon}
        return data


@dataclass(frozen=True, slots=True)
class Feedback:
    """Result of one query: rows plus an optional re-run request.

    Attributes:
        items: Rows in display order.
        rerun: Seconds after which the launcher should run the query again,
            or None. Set while a refresh is pending.
    """

    items: tuple[Item, ...] = ()
    rerun: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the Alfred script filter document."""
        data: dict[str, Any] = {"items": [item.to_dict() for item in self.items]}
        if self.rerun is not None:
            data["rerun"] = self.rerun
        return data


@dataclass(frozen=True, slots=True)
class CacheStatus:
    """Snapshot of the local dataset cache.

    Attributes:
        state: "fresh", "stale" or "missing".
        age: Time since the cache was written, None when missing.
        count: Number of cached datasets.
        refreshing: Whether a background refresh is running.
    """

    state: str
    age: timedelta | None = None
    count: int = 0
    refreshing: bool = False
