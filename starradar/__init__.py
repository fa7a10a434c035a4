"""StarRadar - aggregation and search over a user's starred GitHub repositories."""

from starradar.aggregation import AggregationEngine
from starradar.cache import BrowseState, CacheSnapshot, WorkingSetCache
from starradar.client import StarRadarClient
from starradar.errors import classify_response, classify_transport_error, is_auth_error
from starradar.exceptions import (
    AuthExpiredError,
    ConfigurationError,
    ErrorKind,
    ForbiddenError,
    InvalidQueryError,
    NetworkError,
    NotFoundError,
    OperationSuperseded,
    RateLimitedError,
    StarRadarError,
    UpstreamError,
)
from starradar.fetcher import PageFetchResult, ParallelPageFetcher, plan_pages
from starradar.lifecycle import CancellationToken, RequestLifecycleController
from starradar.logging import configure_logging, get_logger
from starradar.search import SearchRouter, parse_query
from starradar.transport import AsyncHTTPTransport, RetryConfig
from starradar.types import (
    BrowseSort,
    Owner,
    RateLimitStatus,
    Repository,
    RepositoryMetrics,
    SearchMode,
    SearchPageResult,
    SortDirection,
    SortKey,
    StarredCollectionResult,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main Client
    "StarRadarClient",
    # Engine
    "AggregationEngine",
    "ParallelPageFetcher",
    "PageFetchResult",
    "plan_pages",
    "SearchRouter",
    "parse_query",
    "WorkingSetCache",
    "CacheSnapshot",
    "BrowseState",
    "CancellationToken",
    "RequestLifecycleController",
    # Types
    "Owner",
    "Repository",
    "RepositoryMetrics",
    "StarredCollectionResult",
    "SearchPageResult",
    "RateLimitStatus",
    "SearchMode",
    "SortKey",
    "BrowseSort",
    "SortDirection",
    # Exceptions
    "StarRadarError",
    "ErrorKind",
    "AuthExpiredError",
    "RateLimitedError",
    "ForbiddenError",
    "NotFoundError",
    "InvalidQueryError",
    "UpstreamError",
    "NetworkError",
    "ConfigurationError",
    "OperationSuperseded",
    "classify_response",
    "classify_transport_error",
    "is_auth_error",
    # Transport
    "AsyncHTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
