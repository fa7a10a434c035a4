"""Async client for single-repository lookups."""

from typing import TYPE_CHECKING

from starradar.exceptions import NotFoundError
from starradar.types.repos import Repository

if TYPE_CHECKING:
    from starradar.transport import AsyncHTTPTransport


class ReposClient:
    """Async client for repository detail endpoints."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the repos client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def get_by_id(self, repo_id: int) -> Repository | None:
        """
        Fetch a repository by its numeric id.

        Returns:
            The repository, or None when it does not exist or is inaccessible
        """
        try:
            data = await self.transport.get_json(f"/repositories/{repo_id}")
        except NotFoundError:
            return None
        return Repository.from_api(data)

    async def get(self, owner: str, name: str) -> Repository | None:
        """Fetch a repository by owner and name; None when not found."""
        try:
            data = await self.transport.get_json(f"/repos/{owner}/{name}")
        except NotFoundError:
            return None
        return Repository.from_api(data)
