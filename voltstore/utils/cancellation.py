"""
Cancellation token for in-flight recommendation requests.

A consumer that loses interest (the HTTP client disconnected, a newer
request superseded this one) must not have a late AI response applied on
its behalf. The token is checked after the outbound call returns.
"""

from typing import Awaitable, Callable, Optional


class RecommendationCancelled(Exception):
    """Raised when the requester abandoned a recommendation before it was applied."""


class CancellationToken:
    """
    Explicit abandonment flag with an optional async disconnect check.

    Args:
        disconnect_check: Coroutine function returning True once the consumer is gone,
            e.g. Starlette's ``request.is_disconnected``.
    """

    def __init__(self, disconnect_check: Optional[Callable[[], Awaitable[bool]]] = None):
        self._cancelled = False
        self._disconnect_check = disconnect_check

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    async def is_cancelled(self) -> bool:
        if self._cancelled:
            return True
        if self._disconnect_check is not None and await self._disconnect_check():
            self._cancelled = True
        return self._cancelled

    async def raise_if_cancelled(self) -> None:
        if await self.is_cancelled():
            raise RecommendationCancelled("Recommendation abandoned by requester")
