"""Async client for the rate limit endpoint."""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from starradar.types.results import RateLimitStatus

if TYPE_CHECKING:
    from starradar.transport import AsyncHTTPTransport


class RateLimitClient:
    """Async client for /rate_limit."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def get(self) -> RateLimitStatus:
        """Current core REST budget (calling /rate_limit does not consume it)."""
        data = await self.transport.get_json("/rate_limit")
        core = data.get("rate") or data.get("resources", {}).get("core", {})

        return RateLimitStatus(
            remaining=core["remaining"],
            limit=core["limit"],
            reset_at=datetime.fromtimestamp(core["reset"], tz=timezone.utc),
        )
