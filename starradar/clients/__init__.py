"""StarRadar async GitHub resource clients."""

from starradar.clients.rate_limit import RateLimitClient
from starradar.clients.repos import ReposClient
from starradar.clients.search import SearchClient
from starradar.clients.starred import StarredClient

__all__ = [
    "StarredClient",
    "SearchClient",
    "ReposClient",
    "RateLimitClient",
]
