"""StarRadar type definitions.

This module exports all data model types used by the package.
"""

from starradar.types.repos import Owner, Repository, RepositoryMetrics, parse_timestamp
from starradar.types.results import (
    RateLimitStatus,
    SearchPageResult,
    StarredCollectionResult,
)
from starradar.types.search import BrowseSort, SearchMode, SortDirection, SortKey

__all__ = [
    # Repository types
    "Owner",
    "Repository",
    "RepositoryMetrics",
    "parse_timestamp",
    # Result types
    "StarredCollectionResult",
    "SearchPageResult",
    "RateLimitStatus",
    # Options
    "SearchMode",
    "SortKey",
    "BrowseSort",
    "SortDirection",
]
