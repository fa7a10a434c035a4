"""Async client for the GitHub repository search API."""

from collections.abc import Container
from typing import TYPE_CHECKING

from starradar.pagination import clamp_search_total
from starradar.types.repos import Repository
from starradar.types.results import SearchPageResult

if TYPE_CHECKING:
    from starradar.transport import AsyncHTTPTransport


class SearchClient:
    """Async client for /search/repositories."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the search client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def repositories(
        self,
        q: str,
        page: int = 1,
        per_page: int = 30,
        sort: str | None = None,
        starred_ids: Container[int] = frozenset(),
    ) -> SearchPageResult:
        """
        Search all of GitHub.

        Args:
            q: Search query in GitHub syntax (qualifiers allowed)
            page: Page number (1-indexed)
            per_page: Items per page
            sort: GitHub sort parameter, or None for relevance ranking
            starred_ids: Ids the user has starred, used to mark results

        Returns:
            SearchPageResult with the total clamped to GitHub's 1000 ceiling
        """
        params: dict[str, str | int] = {"q": q, "page": page, "per_page": per_page}
        if sort:
            params["sort"] = sort
            params["order"] = "desc"

        data = await self.transport.get_json("/search/repositories", params=params)

        raw_total = data.get("total_count") or 0
        total_count, is_clamped = clamp_search_total(raw_total)

        repositories = tuple(
            Repository.from_api(item, is_starred=item["id"] in starred_ids)
            for item in data.get("items") or []
        )

        return SearchPageResult(
            repositories=repositories,
            total_count=total_count,
            raw_total=raw_total,
            page=page,
            per_page=per_page,
            is_clamped=is_clamped,
        )
