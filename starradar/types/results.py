"""Aggregation, search and rate-limit result models."""

from dataclasses import dataclass
from datetime import datetime

from starradar.types.repos import Repository


@dataclass(frozen=True)
class StarredCollectionResult:
    """Outcome of one aggregation run.

    Sorted by descending star count, no duplicate ids. Superseded by the
    next run, never mutated; the working-set cache replaces it whole.
    """

    repositories: tuple[Repository, ...]
    fetched_count: int
    total_starred: int
    is_capped: bool = False
    has_more: bool = False
    failed_pages: tuple[int, ...] = ()

    @property
    def is_partial(self) -> bool:
        """True when some pages were lost during the fetch."""
        return bool(self.failed_pages)

    @classmethod
    def empty(cls) -> "StarredCollectionResult":
        return cls(repositories=(), fetched_count=0, total_starred=0)


@dataclass(frozen=True)
class SearchPageResult:
    """One page of search output."""

    repositories: tuple[Repository, ...]
    total_count: int
    raw_total: int
    page: int
    per_page: int
    is_clamped: bool = False

    @property
    def total_pages(self) -> int:
        if self.per_page <= 0:
            return 0
        return -(-self.total_count // self.per_page)

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages


@dataclass(frozen=True)
class RateLimitStatus:
    """Snapshot of the core REST rate limit."""

    remaining: int
    limit: int
    reset_at: datetime

    @property
    def is_exhausted(self) -> bool:
        return self.remaining <= 0
