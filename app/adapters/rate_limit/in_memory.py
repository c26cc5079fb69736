"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
- Windows are anchored at each key's first request, not at clock boundaries.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


@dataclass
class RateLimitEntry:
    window_start: float
    count: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting requests per key in a fixed time window.

    A key's window starts with its first request and lasts ``window_seconds``.
    Once the window has elapsed the next request opens a fresh window with a
    count of 1. Bursts straddling a window boundary can briefly admit up to
    twice the nominal rate.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of requests per window.
            window_seconds: Length of the window in seconds.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[str, RateLimitEntry] = {}

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    def get_entry(self, key: str) -> RateLimitEntry | None:
        """Return a snapshot of the current entry for key, if any."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            return RateLimitEntry(window_start=entry.window_start, count=entry.count)

    def _reset_at(self, entry: RateLimitEntry) -> int:
        return int(math.ceil(entry.window_start + self._window_seconds))

    def consume(self, key: str) -> RateLimitResult:
        """Consume one request from the key's budget.

        The check and the update happen under the same lock so two concurrent
        requests cannot both observe a count below the limit.

        Args:
            key: Unique identifier for rate limiting.

        Returns:
            RateLimitResult with allowance decision and metadata.

        Raises:
            ValueError: If key is empty.
        """
        if not key:
            raise ValueError("key must be a non-empty string")

        now = self._clock()

        with self._lock:
            entry = self._entries.get(key)

            if entry is None or now - entry.window_start >= self._window_seconds:
                entry = RateLimitEntry(window_start=now, count=1)
                self._entries[key] = entry
                return RateLimitResult(
                    allowed=True,
                    limit=self._limit,
                    remaining=self._limit - 1,
                    reset_at=self._reset_at(entry),
                    retry_after_seconds=None,
                )

            if entry.count >= self._limit:
                retry_after = int(
                    math.ceil(entry.window_start + self._window_seconds - now)
                )
                return RateLimitResult(
                    allowed=False,
                    limit=self._limit,
                    remaining=0,
                    reset_at=self._reset_at(entry),
                    retry_after_seconds=max(1, retry_after),
                )

            entry.count += 1
            return RateLimitResult(
                allowed=True,
                limit=self._limit,
                remaining=max(0, self._limit - entry.count),
                reset_at=self._reset_at(entry),
                retry_after_seconds=None,
            )
