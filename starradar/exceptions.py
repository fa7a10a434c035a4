"""StarRadar exception classes."""

from datetime import datetime
from enum import Enum


class ErrorKind(str, Enum):
    """Actionable classification of an upstream failure."""

    AUTH_EXPIRED = "auth_expired"
    RATE_LIMITED = "rate_limited"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INVALID_QUERY = "invalid_query"
    UPSTREAM = "upstream"
    NETWORK = "network"
    CONFIGURATION = "configuration"


class StarRadarError(Exception):
    """Base exception for all StarRadar errors."""

    kind: ErrorKind = ErrorKind.UPSTREAM

    def __init__(
        self, code: str, message: str, status_code: int | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(f"[{code}] {message}")


class ConfigurationError(StarRadarError):
    """Raised when client configuration is invalid or missing."""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class AuthExpiredError(StarRadarError):
    """Raised when the GitHub token is rejected (401).

    Never retried; callers treat it as a signal to force re-authentication.
    """

    kind = ErrorKind.AUTH_EXPIRED


class RateLimitedError(StarRadarError):
    """Raised when the GitHub rate limit is exhausted."""

    kind = ErrorKind.RATE_LIMITED

    def __init__(
        self,
        code: str,
        message: str,
        reset_at: datetime,
        status_code: int | None = None,
    ) -> None:
        super().__init__(code, message, status_code)
        self.reset_at = reset_at


class ForbiddenError(StarRadarError):
    """Raised when access is denied for a reason other than rate limiting."""

    kind = ErrorKind.FORBIDDEN


class NotFoundError(StarRadarError):
    """Raised when a resource is not found."""

    kind = ErrorKind.NOT_FOUND


class InvalidQueryError(StarRadarError):
    """Raised when GitHub rejects a search query (422)."""

    kind = ErrorKind.INVALID_QUERY


class UpstreamError(StarRadarError):
    """Raised on any other non-2xx response."""

    kind = ErrorKind.UPSTREAM


class NetworkError(StarRadarError):
    """Raised when no response was received (connection failure, timeout)."""

    kind = ErrorKind.NETWORK


class OperationSuperseded(Exception):
    """Raised inside an operation whose cancellation token was superseded.

    Not a StarRadarError: supersession is control flow, never a user-facing
    failure.
    """
