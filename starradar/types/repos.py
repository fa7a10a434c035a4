"""Repository data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from starradar.metrics import estimate_growth_rate, is_trending


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a GitHub ISO-8601 timestamp into an aware datetime."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class Owner:
    """Repository owner."""

    login: str
    avatar_url: str | None = None


@dataclass(frozen=True)
class RepositoryMetrics:
    """Client-side popularity signals derived from timestamps and stars."""

    stars_growth_rate: float = 0.0
    issues_growth_rate: float = 0.0  # Would need historical data
    is_trending: bool = False


@dataclass(frozen=True)
class Repository:
    """A GitHub repository as seen by the working set.

    Identity (id, owner, name, full_name) never changes; popularity,
    timestamps and star status are refreshed on each fetch. ``is_starred``
    may be flipped locally ahead of upstream confirmation via
    dataclasses.replace.
    """

    id: int
    name: str
    full_name: str
    owner: Owner
    description: str | None = None
    html_url: str | None = None
    language: str | None = None
    topics: tuple[str, ...] = ()
    license: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    watchers_count: int = 0
    open_issues_count: int = 0
    created_at: datetime | None = None
    pushed_at: datetime | None = None
    updated_at: datetime | None = None
    starred_at: datetime | None = None
    is_starred: bool = False
    metrics: RepositoryMetrics = field(default_factory=RepositoryMetrics)

    @classmethod
    def from_api(
        cls,
        data: dict[str, Any],
        starred_at: str | None = None,
        is_starred: bool = False,
        now: datetime | None = None,
    ) -> "Repository":
        """
        Build a record from a GitHub repository payload.

        Args:
            data: Repository JSON object
            starred_at: The starred_at value from a star+json listing
            is_starred: Whether the user has starred this repository
            now: Reference time for the derived metrics (default: current time)
        """
        owner = data.get("owner") or {}
        license_info = data.get("license") or {}
        stars = data.get("stargazers_count", 0)
        pushed_at = parse_timestamp(data.get("pushed_at"))
        updated_at = parse_timestamp(data.get("updated_at"))
        last_activity = pushed_at or updated_at

        return cls(
            id=data["id"],
            name=data["name"],
            full_name=data["full_name"],
            owner=Owner(
                login=owner.get("login", data["full_name"].split("/", 1)[0]),
                avatar_url=owner.get("avatar_url"),
            ),
            description=data.get("description"),
            html_url=data.get("html_url"),
            language=data.get("language"),
            topics=tuple(data.get("topics") or ()),
            license=license_info.get("spdx_id") or license_info.get("name"),
            stargazers_count=stars,
            forks_count=data.get("forks_count", 0),
            watchers_count=data.get("watchers_count", 0),
            open_issues_count=data.get("open_issues_count", 0),
            created_at=parse_timestamp(data.get("created_at")),
            pushed_at=pushed_at,
            updated_at=updated_at,
            starred_at=parse_timestamp(starred_at),
            is_starred=is_starred,
            metrics=RepositoryMetrics(
                stars_growth_rate=estimate_growth_rate(stars, last_activity, now),
                is_trending=is_trending(stars, last_activity, now),
            ),
        )
