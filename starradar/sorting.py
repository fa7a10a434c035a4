"""
Sorting utilities for repository lists.

All sorts are stable: records that compare equal keep their input order.
Records missing a timestamp sort as the oldest possible time.
"""

from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from starradar.types.repos import Repository
from starradar.types.search import SortDirection

_MISSING = datetime.min.replace(tzinfo=timezone.utc)


class SortField(str, Enum):
    NAME = "name"
    STARS = "stars"
    FORKS = "forks"
    UPDATED = "updated"
    CREATED = "created"
    STARRED = "starred"
    GROWTH_RATE = "growth_rate"
    ISSUES = "issues"


_KEYS: dict[SortField, Callable[[Repository], Any]] = {
    SortField.NAME: lambda r: r.full_name.lower(),
    SortField.STARS: lambda r: r.stargazers_count,
    SortField.FORKS: lambda r: r.forks_count,
    SortField.UPDATED: lambda r: r.updated_at or _MISSING,
    SortField.CREATED: lambda r: r.created_at or _MISSING,
    SortField.STARRED: lambda r: r.starred_at or _MISSING,
    SortField.GROWTH_RATE: lambda r: r.metrics.stars_growth_rate,
    SortField.ISSUES: lambda r: r.open_issues_count,
}


def sort_repositories(
    repos: Iterable[Repository],
    field: SortField,
    direction: SortDirection = SortDirection.DESC,
) -> list[Repository]:
    """
    Sort repositories by the given field, returning a new list.

    Example:
        sort_repositories(repos, SortField.STARS)  # most stars first
    """
    return sorted(
        repos, key=_KEYS[field], reverse=direction == SortDirection.DESC
    )


def sort_by_stars(
    repos: Iterable[Repository], direction: SortDirection = SortDirection.DESC
) -> list[Repository]:
    return sort_repositories(repos, SortField.STARS, direction)


def sort_by_name(
    repos: Iterable[Repository], direction: SortDirection = SortDirection.ASC
) -> list[Repository]:
    return sort_repositories(repos, SortField.NAME, direction)


def sort_by_updated(
    repos: Iterable[Repository], direction: SortDirection = SortDirection.DESC
) -> list[Repository]:
    return sort_repositories(repos, SortField.UPDATED, direction)
