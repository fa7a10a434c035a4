"""
Classification of GitHub responses into the StarRadar error taxonomy.

Every upstream call goes through these functions (via the transport), so a
401 from any operation surfaces as the same AuthExpiredError.
"""

from collections.abc import Mapping
from datetime import datetime, timezone

import httpx

from starradar.exceptions import (
    AuthExpiredError,
    ForbiddenError,
    InvalidQueryError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
    StarRadarError,
    UpstreamError,
)

RATE_LIMIT_REMAINING_HEADER = "x-ratelimit-remaining"
RATE_LIMIT_RESET_HEADER = "x-ratelimit-reset"
RETRY_AFTER_HEADER = "retry-after"


def _header(headers: Mapping[str, str], name: str) -> str | None:
    # httpx.Headers is case-insensitive already; plain dicts are not
    if isinstance(headers, httpx.Headers):
        return headers.get(name)
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def parse_reset_time(
    headers: Mapping[str, str], now: datetime | None = None
) -> datetime:
    """
    Determine when the rate limit resets.

    Uses the epoch-seconds reset header, then Retry-After (seconds from now),
    and falls back to ``now`` when neither parses.
    """
    now = now or datetime.now(timezone.utc)

    reset = _header(headers, RATE_LIMIT_RESET_HEADER)
    if reset:
        try:
            return datetime.fromtimestamp(int(reset), tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            pass

    retry_after = _header(headers, RETRY_AFTER_HEADER)
    if retry_after:
        try:
            return datetime.fromtimestamp(now.timestamp() + int(retry_after), tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            pass

    return now


def classify_response(
    status_code: int,
    headers: Mapping[str, str],
    message: str | None = None,
) -> StarRadarError | None:
    """
    Map an HTTP status and headers onto a typed exception.

    Args:
        status_code: HTTP status code
        headers: Response headers
        message: Optional upstream message to carry on the exception

    Returns:
        The exception to raise, or None for a 2xx status
    """
    if 200 <= status_code < 300:
        return None

    if status_code == 401:
        return AuthExpiredError(
            "AUTH_EXPIRED",
            message or "GitHub authentication failed. Please sign in again.",
            status_code,
        )

    if status_code == 403:
        if _header(headers, RATE_LIMIT_REMAINING_HEADER) == "0":
            reset_at = parse_reset_time(headers)
            return RateLimitedError(
                "RATE_LIMITED",
                f"GitHub API rate limit exceeded. Resets at {reset_at.isoformat()}",
                reset_at,
                status_code,
            )
        return ForbiddenError(
            "FORBIDDEN",
            message or "GitHub API access forbidden. Please check your permissions.",
            status_code,
        )

    if status_code == 404:
        return NotFoundError("NOT_FOUND", message or "Resource not found", status_code)

    if status_code == 422:
        return InvalidQueryError(
            "INVALID_QUERY",
            message or "Invalid search query. Please check your search terms.",
            status_code,
        )

    if status_code == 429:
        # Secondary rate limit
        reset_at = parse_reset_time(headers)
        return RateLimitedError(
            "RATE_LIMITED",
            f"GitHub API secondary rate limit hit. Resets at {reset_at.isoformat()}",
            reset_at,
            status_code,
        )

    return UpstreamError(
        "UPSTREAM_ERROR",
        message or f"GitHub API error: HTTP {status_code}",
        status_code,
    )


def classify_transport_error(error: httpx.RequestError) -> NetworkError:
    """Wrap a failure that happened before any response was received."""
    return NetworkError("NETWORK_ERROR", str(error) or type(error).__name__)


def is_auth_error(error: BaseException | None) -> bool:
    """Return True if the error means the user must sign in again."""
    return isinstance(error, AuthExpiredError)
