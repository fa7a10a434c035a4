"""
Aggregation of a user's starred repositories into one sorted collection.

This is the only component that downloads the starred corpus. Browsing by
star count and searching within starred both reuse its result, so request
volume stays bounded no matter how many views need the data.
"""

from typing import TYPE_CHECKING

from starradar.fetcher import ParallelPageFetcher, plan_pages
from starradar.logging import get_logger
from starradar.sorting import sort_by_stars
from starradar.types.repos import Repository
from starradar.types.results import StarredCollectionResult

if TYPE_CHECKING:
    from starradar.clients.starred import StarredClient

logger = get_logger("aggregation")

AGGREGATION_PAGE_SIZE = 100  # GitHub's per_page maximum
DEFAULT_MAX_REPOS = 500


class _Default:
    def __repr__(self) -> str:
        return "DEFAULT"


DEFAULT = _Default()


def dedupe_by_id(repositories: list[Repository]) -> list[Repository]:
    """Drop repeated ids, keeping the first occurrence."""
    seen: set[int] = set()
    unique: list[Repository] = []
    for repo in repositories:
        if repo.id not in seen:
            seen.add(repo.id)
            unique.append(repo)
    return unique


class AggregationEngine:
    """Count, fan out, merge, sort and cap the starred corpus."""

    def __init__(
        self,
        starred: "StarredClient",
        fetcher: ParallelPageFetcher | None = None,
        per_page: int = AGGREGATION_PAGE_SIZE,
        default_cap: int | None = DEFAULT_MAX_REPOS,
    ) -> None:
        """
        Args:
            starred: Client for the starred endpoints
            fetcher: Page fan-out strategy (default: unbounded concurrency)
            per_page: Page size for the fan-out
            default_cap: Cap applied when fetch_all is called without one
        """
        self.starred = starred
        self.fetcher = fetcher or ParallelPageFetcher()
        self.per_page = per_page
        self.default_cap = default_cap

    async def fetch_all(
        self, cap: "int | None | _Default" = DEFAULT
    ) -> StarredCollectionResult:
        """
        Fetch the starred corpus.

        Args:
            cap: Maximum number of repositories to keep (the highest-starred
                ones). Defaults to the engine's default_cap; None fetches all.

        Returns:
            StarredCollectionResult sorted by descending star count
        """
        limit = self.default_cap if isinstance(cap, _Default) else cap
        if limit is not None and limit < 0:
            raise ValueError("cap must be non-negative")

        total = await self.starred.count()
        if total == 0:
            return StarredCollectionResult.empty()

        pages = plan_pages(total, self.per_page, limit)

        async def fetch_page(page: int) -> list[Repository]:
            return await self.starred.list_page(page=page, per_page=self.per_page)

        merged = await self.fetcher.fetch(fetch_page, pages)

        ordered = sort_by_stars(dedupe_by_id(list(merged.repositories)))
        if limit is not None:
            ordered = ordered[:limit]

        is_capped = limit is not None and total > limit
        result = StarredCollectionResult(
            repositories=tuple(ordered),
            fetched_count=len(ordered),
            total_starred=total,
            is_capped=is_capped,
            has_more=total > len(ordered),
            failed_pages=merged.failed_pages,
        )

        notes = []
        if is_capped:
            notes.append(f"limited to {limit}")
        if merged.failed_pages:
            notes.append(f"{len(merged.failed_pages)} pages failed")
        logger.info(
            "Fetched %d of %d starred repositories%s",
            result.fetched_count,
            total,
            f" ({', '.join(notes)})" if notes else "",
        )

        return result
