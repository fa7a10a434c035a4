"""
Cancellation tokens and last-submitted-wins request handling.

Cancellation is cooperative: a superseded request is not aborted on the
wire, its result is inspected once it arrives and dropped. Tokens are
checked at the point a result would be applied, not along the call chain.
"""

import itertools
from collections.abc import Awaitable, Callable
from typing import TypeVar

from starradar.exceptions import OperationSuperseded
from starradar.logging import get_logger

T = TypeVar("T")

logger = get_logger("lifecycle")

_token_ids = itertools.count(1)


class CancellationToken:
    """Handle bound to one logical operation. Never reused."""

    __slots__ = ("kind", "id", "_cancelled")

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self.id = next(_token_ids)
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        """Stop early inside an operation that has been superseded."""
        if self._cancelled:
            raise OperationSuperseded(f"{self.kind} operation {self.id} was superseded")

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "live"
        return f"<CancellationToken {self.kind}#{self.id} {state}>"


class RequestLifecycleController:
    """
    Issues one token per logical operation kind.

    Beginning an operation of a kind ("search", "browse", ...) signals the
    previous token of that kind, so whichever request was submitted last is
    the only one whose result gets applied.
    """

    def __init__(self) -> None:
        self._current: dict[str, CancellationToken] = {}

    def begin(self, kind: str) -> CancellationToken:
        """Create a token for a new operation, superseding the previous one."""
        previous = self._current.get(kind)
        if previous is not None:
            previous.cancel()
        token = CancellationToken(kind)
        self._current[kind] = token
        return token

    def current(self, kind: str) -> CancellationToken | None:
        return self._current.get(kind)

    def is_current(self, token: CancellationToken) -> bool:
        return not token.cancelled and self._current.get(token.kind) is token

    async def run(
        self,
        kind: str,
        operation: Callable[[CancellationToken], Awaitable[T]],
        apply: Callable[[T], None] | None = None,
    ) -> T | None:
        """
        Run an operation under a fresh token.

        Args:
            kind: Operation kind; a later run of the same kind supersedes this one
            operation: Coroutine function receiving the token
            apply: Called with the result, only if the token is still current

        Returns:
            The result, or None when the operation was superseded
        """
        token = self.begin(kind)
        try:
            result = await operation(token)
        except OperationSuperseded:
            logger.debug("Discarding superseded %s operation %d", kind, token.id)
            return None
        except Exception as e:
            # A superseded operation's failure never reaches the caller
            if self.is_current(token):
                raise
            logger.debug(
                "Discarding error of superseded %s operation %d: %s", kind, token.id, e
            )
            return None

        if not self.is_current(token):
            logger.debug("Discarding result of superseded %s operation %d", kind, token.id)
            return None

        if apply is not None:
            apply(result)
        return result

    def teardown(self) -> None:
        """Cancel every live token (component shutdown)."""
        for token in self._current.values():
            token.cancel()
        self._current.clear()
