"""
StarRadar async client.

Wires the GitHub transport, the aggregation engine, the working-set cache,
the search router and the request lifecycle controller into one object.
"""

import asyncio
import os
from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import Any

import httpx

from starradar.aggregation import DEFAULT_MAX_REPOS, AggregationEngine
from starradar.cache import BrowseState, WorkingSetCache
from starradar.clients import RateLimitClient, ReposClient, SearchClient, StarredClient
from starradar.exceptions import AuthExpiredError, ConfigurationError
from starradar.fetcher import ParallelPageFetcher
from starradar.lifecycle import CancellationToken, RequestLifecycleController
from starradar.logging import get_logger
from starradar.search import PlatformSearchStrategy, SearchRouter, StarredSearchStrategy
from starradar.sorting import sort_by_stars
from starradar.transport import AsyncHTTPTransport, RetryConfig
from starradar.types.repos import Repository
from starradar.types.results import RateLimitStatus, SearchPageResult, StarredCollectionResult
from starradar.types.search import BrowseSort, SearchMode, SortDirection, SortKey

logger = get_logger()

SEARCH_OPERATION = "search"
BROWSE_OPERATION = "browse"


class StarRadarClient:
    """
    Async client for a user's starred repositories.

    Example:
        ```python
        import asyncio
        from starradar import SearchMode, StarRadarClient

        async def main():
            async with StarRadarClient.from_env() as client:
                stars = await client.load_starred()
                print(f"{stars.fetched_count} of {stars.total_starred}")

                page = await client.search('"react"', mode=SearchMode.ALL)
                await client.star(page.repositories[0])

        asyncio.run(main())
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0
    DEFAULT_PER_PAGE = 30

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        max_repos: int | None = DEFAULT_MAX_REPOS,
        per_page: int = DEFAULT_PER_PAGE,
        max_concurrency: int | None = None,
        on_auth_expired: Callable[[AuthExpiredError], None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            token: GitHub access token
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            max_repos: Cap on the aggregated starred corpus (None = no cap)
            per_page: Page size for browse and search results
            max_concurrency: Bound on parallel page requests (None = unbounded)
            on_auth_expired: Called whenever GitHub rejects the token; the place
                to force a sign-out
            transport: Optional httpx transport (tests inject httpx.MockTransport)
        """
        if not token:
            raise ConfigurationError("A GitHub token is required")

        self.base_url = base_url
        self.timeout = timeout
        self.per_page = per_page

        self._transport = AsyncHTTPTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
            on_auth_expired=on_auth_expired,
            transport=transport,
        )

        # Resource clients
        self.starred = StarredClient(self._transport)
        self.search_api = SearchClient(self._transport)
        self.repos = ReposClient(self._transport)
        self.rate_limits = RateLimitClient(self._transport)

        self.cache = WorkingSetCache()
        self._loading: asyncio.Future[StarredCollectionResult] | None = None
        self.lifecycle = RequestLifecycleController()
        self.aggregation = AggregationEngine(
            self.starred,
            fetcher=ParallelPageFetcher(max_concurrency=max_concurrency),
            default_cap=max_repos,
        )
        self.router = SearchRouter(
            [
                PlatformSearchStrategy(self.search_api, self.cache),
                StarredSearchStrategy(self._load_corpus),
            ]
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> "StarRadarClient":
        """
        Create a client from environment variables.

        Environment variables:
            GITHUB_TOKEN: GitHub access token (required)
            STARRADAR_BASE_URL: API base URL (optional, default: https://api.github.com)
            STARRADAR_MAX_REPOS: Corpus cap, "0" or "none" for no cap (optional, default: 500)
            STARRADAR_TIMEOUT: Request timeout in seconds (optional, default: 30)

        Args:
            **kwargs: Passed through to the constructor (override the environment)

        Raises:
            ConfigurationError: If required variables are missing or invalid
        """
        token = os.environ.get("GITHUB_TOKEN")
        if not token:
            raise ConfigurationError("GITHUB_TOKEN environment variable not set")

        settings: dict[str, Any] = {
            "base_url": os.environ.get("STARRADAR_BASE_URL", cls.DEFAULT_BASE_URL),
        }

        max_repos = os.environ.get("STARRADAR_MAX_REPOS")
        if max_repos is not None:
            if max_repos.strip().lower() in ("0", "none", ""):
                settings["max_repos"] = None
            else:
                try:
                    settings["max_repos"] = int(max_repos)
                except ValueError:
                    raise ConfigurationError(
                        f"Invalid STARRADAR_MAX_REPOS: {max_repos!r}. Must be an integer"
                    ) from None

        timeout = os.environ.get("STARRADAR_TIMEOUT")
        if timeout is not None:
            try:
                settings["timeout"] = float(timeout)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid STARRADAR_TIMEOUT: {timeout!r}. Must be a number of seconds"
                ) from None

        settings.update(kwargs)
        return cls(token=token, **settings)

    @property
    def transport(self) -> AsyncHTTPTransport:
        """Get the underlying async HTTP transport (for advanced use cases)."""
        return self._transport

    async def close(self) -> None:
        """Cancel outstanding operations and release the HTTP client."""
        self.lifecycle.teardown()
        if self._loading is not None and not self._loading.done():
            self._loading.cancel()
        await self._transport.close()

    async def __aenter__(self) -> "StarRadarClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    # Corpus

    async def load_starred(self, refresh: bool = False) -> StarredCollectionResult:
        """
        Return the aggregated starred corpus, fetching it on first use.

        Args:
            refresh: Re-aggregate even if the cache is loaded
        """
        collection = self.cache.collection
        if collection is not None and not refresh:
            return collection

        # Concurrent callers share one aggregation run
        if refresh or self._loading is None:
            task = asyncio.ensure_future(self._aggregate())
            task.add_done_callback(self._loading_done)
            self._loading = task
        return await asyncio.shield(self._loading)

    def _loading_done(self, task: asyncio.Future[StarredCollectionResult]) -> None:
        # Runs even when every waiter was cancelled
        if self._loading is task:
            self._loading = None
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Starred aggregation failed: %s", task.exception())

    async def _aggregate(self) -> StarredCollectionResult:
        collection = await self.aggregation.fetch_all()
        self.cache.replace_collection(collection)
        return collection

    async def _load_corpus(self) -> Sequence[Repository]:
        return (await self.load_starred()).repositories

    # Browse

    async def browse_starred(
        self,
        page: int = 1,
        sort: BrowseSort = BrowseSort.UPDATED,
        direction: SortDirection = SortDirection.DESC,
    ) -> tuple[Repository, ...] | None:
        """
        One page of the user's starred repositories.

        ``updated`` and ``created`` are sorted by GitHub and accumulate in
        the cached browse list; ``stars`` needs the whole corpus and is
        sliced from it.

        Returns:
            The page, or None when a later browse request superseded this one
        """
        sort = BrowseSort(sort)
        direction = SortDirection(direction)

        if sort == BrowseSort.STARS:
            async def slice_corpus(token: CancellationToken) -> tuple[Repository, ...]:
                corpus = await self._load_corpus()
                if direction == SortDirection.ASC:
                    corpus = sort_by_stars(corpus, SortDirection.ASC)
                start = (page - 1) * self.per_page
                return tuple(corpus[start:start + self.per_page])

            return await self.lifecycle.run(BROWSE_OPERATION, slice_corpus)

        async def fetch_page(token: CancellationToken) -> list[Repository]:
            return await self.starred.list_page(
                page=page, per_page=self.per_page, sort=sort.value, direction=direction
            )

        def apply(repos: list[Repository]) -> None:
            self.cache.append_browse_page(page, repos, sort, direction, self.per_page)

        repos = await self.lifecycle.run(BROWSE_OPERATION, fetch_page, apply)
        return None if repos is None else tuple(repos)

    @property
    def browse_state(self) -> BrowseState | None:
        return self.cache.browse

    # Search

    async def search(
        self,
        query: str,
        mode: SearchMode = SearchMode.STARRED,
        sort: SortKey = SortKey.UPDATED,
        page: int = 1,
    ) -> SearchPageResult | None:
        """
        Search GitHub or the starred corpus.

        Each call supersedes any search still in flight: only the last
        submitted search updates the displayed result.

        Returns:
            The page, or None when a later search superseded this one
        """
        mode = SearchMode(mode)

        async def run(token: CancellationToken) -> SearchPageResult:
            return await self.router.search(
                query, mode=mode, sort=sort, page=page, per_page=self.per_page
            )

        def apply(result: SearchPageResult) -> None:
            self.cache.replace_search_result(mode, query, result)

        return await self.lifecycle.run(SEARCH_OPERATION, run, apply)

    # Mutations

    async def star(self, repo: Repository) -> None:
        """
        Star a repository.

        The cache reflects the star immediately; if GitHub rejects it the
        cache is rolled back and the error re-raised.
        """
        already_starred = self.cache.is_starred(repo.id)
        if not already_starred:
            self.cache.mark_starred(repo)
        try:
            await self.starred.star(repo.owner.login, repo.name)
        except Exception:
            # An unstar may have landed while the request was in flight
            if not already_starred and self.cache.is_starred(repo.id):
                self.cache.mark_unstarred(repo)
            raise
        logger.info("Starred %s", repo.full_name)

    async def unstar(self, repo: Repository) -> None:
        """
        Unstar a repository.

        Removes it from every cached view immediately; restores the corpus
        entry if GitHub rejects the request, then re-raises.
        """
        was_cached = self.cache.is_starred(repo.id)
        self.cache.mark_unstarred(repo)
        try:
            await self.starred.unstar(repo.owner.login, repo.name)
        except Exception:
            if was_cached and not self.cache.is_starred(repo.id):
                self.cache.mark_starred(repo)
            raise
        logger.info("Unstarred %s", repo.full_name)

    # Detail

    async def get_repository(self, repo_id: int) -> Repository | None:
        """
        Fetch one repository with its starred status.

        Starred status comes from the cached membership set when the id is
        there; otherwise GitHub is asked directly and a positive answer is
        back-filled into the cache.

        Returns:
            The repository, or None when it does not exist or is inaccessible
        """
        repo = await self.repos.get_by_id(repo_id)
        if repo is None:
            return None

        if self.cache.is_starred(repo.id):
            return replace(repo, is_starred=True)

        is_starred = await self.starred.is_starred(repo.owner.login, repo.name)
        repo = replace(repo, is_starred=is_starred)
        if is_starred:
            self.cache.backfill_starred(repo)
        return repo

    async def rate_limit(self) -> RateLimitStatus:
        """Current GitHub REST rate limit status."""
        return await self.rate_limits.get()
