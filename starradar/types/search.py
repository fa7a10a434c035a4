"""Search and browse option enums."""

from enum import Enum


class SearchMode(str, Enum):
    """Where a search runs."""

    ALL = "all"  # GitHub-wide search API
    STARRED = "starred"  # local filter over the aggregated corpus


class SortKey(str, Enum):
    """Sort options offered to callers across both search modes."""

    BEST_MATCH = "best-match"
    STARS = "stars"
    FORKS = "forks"
    UPDATED = "updated"
    HELP_WANTED = "help-wanted"
    STARRED = "created"  # most recently starred


class BrowseSort(str, Enum):
    """Sort options for browsing starred repositories."""

    UPDATED = "updated"
    CREATED = "created"  # when the user starred the repo (server-side)
    STARS = "stars"  # needs the full corpus


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"
