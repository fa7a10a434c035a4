"""Async client for the authenticated user's starred repositories."""

from typing import TYPE_CHECKING, Any

import httpx

from starradar.exceptions import NotFoundError
from starradar.logging import get_logger
from starradar.transport import STAR_ACCEPT
from starradar.types.repos import Repository
from starradar.types.search import SortDirection

if TYPE_CHECKING:
    from starradar.transport import AsyncHTTPTransport

# With one item per page, the "last" page number is the item count
PROBE_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

logger = get_logger("starred")


def last_page_from_links(response: httpx.Response) -> int | None:
    """Return the page number of the rel="last" Link, if present."""
    last = response.links.get("last")
    if not last or "url" not in last:
        return None
    page = httpx.URL(last["url"]).params.get("page")
    if page is None:
        return None
    try:
        return int(page)
    except ValueError:
        return None


class StarredClient:
    """Async client for /user/starred."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the starred client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def count(self) -> int:
        """
        Total number of starred repositories, without downloading them.

        GitHub does not return a total in the body, so this probes with
        per_page=1 and reads the last page number from the Link header. A
        response without a "last" link fits on one page, so the body length
        is the total.

        Returns:
            Number of starred repositories (0 when none)
        """
        response = await self.transport.request(
            "GET", "/user/starred", params={"per_page": PROBE_PAGE_SIZE}
        )

        last_page = last_page_from_links(response)
        if last_page is not None:
            total = last_page * PROBE_PAGE_SIZE
        else:
            total = len(response.json())

        logger.debug("User has %d starred repositories", total)
        return total

    async def list_page(
        self,
        page: int = 1,
        per_page: int = 30,
        sort: str = "updated",
        direction: SortDirection = SortDirection.DESC,
    ) -> list[Repository]:
        """
        Fetch one page of starred repositories.

        Requests the star+json format so every record carries starred_at.

        Args:
            page: Page number (1-indexed)
            per_page: Items per page (GitHub allows at most 100)
            sort: "created" (when starred) or "updated"
            direction: Sort direction

        Returns:
            The page's repositories, all marked as starred
        """
        data = await self.transport.get_json(
            "/user/starred",
            params={
                "page": page,
                "per_page": min(per_page, MAX_PAGE_SIZE),
                "sort": sort,
                "direction": SortDirection(direction).value,
            },
            accept=STAR_ACCEPT,
        )
        return [self._to_repository(item) for item in data]

    async def star(self, owner: str, name: str) -> None:
        """Star a repository (idempotent; GitHub answers 204)."""
        await self.transport.request("PUT", f"/user/starred/{owner}/{name}")

    async def unstar(self, owner: str, name: str) -> None:
        """Unstar a repository (idempotent; GitHub answers 204)."""
        await self.transport.request("DELETE", f"/user/starred/{owner}/{name}")

    async def is_starred(self, owner: str, name: str) -> bool:
        """
        Check directly with GitHub whether the user starred a repository.

        GitHub answers 204 when starred and 404 when not.
        """
        try:
            response = await self.transport.request(
                "GET", f"/user/starred/{owner}/{name}"
            )
        except NotFoundError:
            return False
        return response.status_code == 204

    @staticmethod
    def _to_repository(item: dict[str, Any]) -> Repository:
        # star+json wraps each repo as {"starred_at": ..., "repo": {...}}
        if "repo" in item:
            return Repository.from_api(
                item["repo"], starred_at=item.get("starred_at"), is_starred=True
            )
        return Repository.from_api(item, is_starred=True)
