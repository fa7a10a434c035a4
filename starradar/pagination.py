"""Pagination calculations shared by the local and GitHub-backed views."""

from dataclasses import dataclass

# GitHub's search API never serves more than this many results per query
GITHUB_SEARCH_LIMIT = 1000


@dataclass(frozen=True)
class PaginationInfo:
    total_pages: int
    current_page: int
    has_next_page: bool
    has_previous_page: bool
    start_index: int
    end_index: int
    total_items: int
    is_limited: bool = False


def page_count(total_items: int, per_page: int) -> int:
    """Number of pages needed to hold ``total_items`` (ceiling division)."""
    if per_page <= 0:
        raise ValueError("per_page must be positive")
    return -(-max(total_items, 0) // per_page)


def calculate_pagination(
    total_items: int, current_page: int, per_page: int
) -> PaginationInfo:
    """
    Calculate pagination info for any data source.

    Args:
        total_items: Total number of items available
        current_page: Current page number (1-indexed)
        per_page: Number of items per page
    """
    total_pages = page_count(total_items, per_page)
    start_index = (current_page - 1) * per_page
    return PaginationInfo(
        total_pages=total_pages,
        current_page=current_page,
        has_next_page=current_page < total_pages,
        has_previous_page=current_page > 1,
        start_index=start_index,
        end_index=min(start_index + per_page, total_items),
        total_items=total_items,
    )


def clamp_search_total(total_count: int) -> tuple[int, bool]:
    """Clamp an upstream search total to the platform ceiling.

    Returns the clamped total and whether clamping occurred.
    """
    return min(total_count, GITHUB_SEARCH_LIMIT), total_count > GITHUB_SEARCH_LIMIT


def calculate_search_pagination(
    total_count: int, current_page: int, per_page: int
) -> PaginationInfo:
    """Pagination for GitHub search results (capped at 1000 results)."""
    effective_total, is_limited = clamp_search_total(total_count)
    info = calculate_pagination(effective_total, current_page, per_page)
    return PaginationInfo(
        total_pages=info.total_pages,
        current_page=info.current_page,
        has_next_page=info.has_next_page,
        has_previous_page=info.has_previous_page,
        start_index=info.start_index,
        end_index=info.end_index,
        total_items=info.total_items,
        is_limited=is_limited,
    )


def format_pagination_text(
    pagination: PaginationInfo, current_item_count: int, raw_total: int | None = None
) -> str:
    """
    Human-readable summary such as "Showing 31-60 of 200 results".

    When the total was clamped, reports the top results of the raw match count.
    """
    if pagination.total_items == 0:
        return "No results"

    if pagination.is_limited and raw_total is not None:
        return f"Showing top {pagination.total_items} results of {raw_total:,} matches"

    start = pagination.start_index + 1
    end = pagination.start_index + current_item_count
    return f"Showing {start}-{end} of {pagination.total_items} results"
