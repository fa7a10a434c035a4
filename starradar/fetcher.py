"""
Parallel page fetching with partial-failure tolerance.

Pages of starred repositories are idempotent and cheap to re-fetch, so a
run that loses some pages still succeeds with what it got: the lost page
numbers travel with the result instead of failing the whole fetch. Only a
run in which every page failed raises.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

from starradar.logging import get_logger
from starradar.pagination import page_count
from starradar.types.repos import Repository

logger = get_logger("aggregation")

PageFetcher = Callable[[int], Awaitable[list[Repository]]]


@dataclass(frozen=True)
class PageFetchResult:
    """Union of the fulfilled pages of one fan-out."""

    repositories: tuple[Repository, ...]
    fetched_pages: tuple[int, ...]
    failed_pages: tuple[int, ...] = ()
    errors: dict[int, BaseException] = field(default_factory=dict)


def plan_pages(total: int, per_page: int, limit: int | None = None) -> list[int]:
    """
    Compute the minimal list of page numbers covering the wanted items.

    Args:
        total: Number of items upstream
        per_page: Items per page
        limit: Optional upper bound on items to retrieve

    Returns:
        Page numbers 1..N, empty when there is nothing to fetch
    """
    wanted = total if limit is None else min(total, limit)
    return list(range(1, page_count(wanted, per_page) + 1))


class ParallelPageFetcher:
    """Issues page requests concurrently and merges the outcomes."""

    def __init__(self, max_concurrency: int | None = None) -> None:
        """
        Args:
            max_concurrency: Upper bound on in-flight page requests (None = all at once)
        """
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.max_concurrency = max_concurrency

    async def fetch(
        self, fetch_page: PageFetcher, pages: Sequence[int]
    ) -> PageFetchResult:
        """
        Fetch every page concurrently.

        Each page's outcome is collected independently. Completion order is
        irrelevant: results are merged in page order and callers impose their
        own sort.

        Raises:
            The error of the lowest failed page, when every page failed
        """
        if not pages:
            return PageFetchResult(repositories=(), fetched_pages=())

        semaphore = (
            asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        )

        async def run(page: int) -> list[Repository]:
            if semaphore is None:
                return await fetch_page(page)
            async with semaphore:
                return await fetch_page(page)

        outcomes = await asyncio.gather(
            *(run(page) for page in pages), return_exceptions=True
        )

        repositories: list[Repository] = []
        fetched: list[int] = []
        errors: dict[int, BaseException] = {}

        for page, outcome in zip(pages, outcomes):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, BaseException):
                errors[page] = outcome
                logger.error(
                    "Failed to fetch starred repositories page %d: %s", page, outcome
                )
            else:
                fetched.append(page)
                repositories.extend(outcome)

        if not fetched:
            first_failed = min(errors)
            logger.error("Failed to fetch any of %d starred repository pages", len(pages))
            raise errors[first_failed]

        return PageFetchResult(
            repositories=tuple(repositories),
            fetched_pages=tuple(fetched),
            failed_pages=tuple(sorted(errors)),
            errors=errors,
        )
