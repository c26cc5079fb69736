"""Rate limiter interfaces.

The API depends on this abstraction (not the concrete implementation)
so the in-memory store can be swapped for a shared one (e.g., Redis).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit consume operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the current window ends.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def consume(self, key: str) -> RateLimitResult:
        """Check the budget for a key and consume one request if allowed.

        Args:
            key: Unique client identifier (e.g., namespaced IP address).

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError
