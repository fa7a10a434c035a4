"""
Async HTTP Transport for StarRadar.

Handles async HTTP communication with GitHub: bearer authentication, retry
of transient failures, and classification of error responses into typed
exceptions.
"""

import asyncio
import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from starradar.errors import classify_response, classify_transport_error
from starradar.exceptions import AuthExpiredError, StarRadarError, UpstreamError
from starradar.logging import get_logger, log_http_request, log_http_response

GITHUB_API_VERSION = "2022-11-28"
DEFAULT_ACCEPT = "application/vnd.github.v3+json"
STAR_ACCEPT = "application/vnd.github.star+json"

logger = get_logger("http")


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior.

    Only transient failures are retried. 401, 403 and 429 are never in
    ``retry_on``: auth and rate-limit errors go straight to the caller.
    """

    max_retries: int = 2
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [500, 502, 503, 504])
    retry_network_errors: bool = True
    max_backoff: float = 30.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class AsyncHTTPTransport:
    """
    Async HTTP transport layer for the GitHub REST API.

    Handles:
    - Bearer authentication and GitHub API versioning headers
    - Exponential backoff with jitter for transient failures
    - Error response classification into typed exceptions
    - The forced sign-out hook on AuthExpiredError
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        on_auth_expired: Callable[[AuthExpiredError], None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize async HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: GitHub access token
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            on_auth_expired: Called with the error whenever GitHub answers 401
            transport: Optional httpx transport (tests inject httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()
        self.on_auth_expired = on_auth_expired

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": DEFAULT_ACCEPT,
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        accept: str | None = None,
    ) -> httpx.Response:
        """
        Make a request with automatic retry.

        Args:
            method: HTTP method
            path: API path (e.g., "/user/starred")
            params: Query parameters
            accept: Override for the Accept header

        Returns:
            The successful httpx.Response (headers are needed for pagination)

        Raises:
            StarRadarError: On classified API or network errors
        """
        headers = {"Accept": accept} if accept else None
        return await self._execute_with_retry(method, path, params, headers)

    async def get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        accept: str | None = None,
    ) -> Any:
        """GET a path and return the decoded JSON body."""
        response = await self.request("GET", path, params=params, accept=accept)
        return response.json()

    async def _execute_with_retry(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None,
        headers: dict[str, str] | None,
    ) -> httpx.Response:
        last_error: StarRadarError | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            log_http_request(method, path, headers=headers, params=params)
            started = time.monotonic()

            try:
                response = await self._client.request(
                    method, path, params=params, headers=headers
                )
            except httpx.RequestError as e:
                error = classify_transport_error(e)
                if not self.retry_config.retry_network_errors or (
                    attempt >= self.retry_config.max_retries
                ):
                    raise error from e

                last_error = error
                logger.warning(
                    "Network error on %s %s (attempt %d): %s", method, path, attempt + 1, e
                )
                await asyncio.sleep(self._get_backoff_time(attempt))
                continue

            log_http_response(
                response.status_code,
                path,
                elapsed_ms=(time.monotonic() - started) * 1000,
                rate_limit_remaining=response.headers.get("x-ratelimit-remaining"),
            )

            error = classify_response(
                response.status_code, response.headers, self._error_message(response)
            )
            if error is None:
                return response

            if isinstance(error, AuthExpiredError) and self.on_auth_expired:
                self.on_auth_expired(error)

            if not self._should_retry(response.status_code, attempt):
                raise error

            last_error = error
            await asyncio.sleep(self._get_backoff_time(attempt))

        # Should not reach here, but just in case
        if last_error:
            raise last_error
        raise UpstreamError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the request should be retried
        """
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(self, attempt: int) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, capped at max_backoff.

        Args:
            attempt: Current attempt number (0-indexed)

        Returns:
            Time to wait in seconds
        """
        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    @staticmethod
    def _error_message(response: httpx.Response) -> str | None:
        """Extract GitHub's error message from a JSON error body, if any."""
        if 200 <= response.status_code < 300:
            return None
        try:
            data = response.json()
        except ValueError:
            return None
        if isinstance(data, dict):
            message = data.get("message")
            if isinstance(message, str) and message:
                return message
        return None
