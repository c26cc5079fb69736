"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Minimal coupling: API routes depend on a dependency function only.
- Swap-friendly: the limiter lives on ``app.state`` behind an abstract
  interface, so tests and deployments can replace it.

Rate limiting strategy:
- Fixed-window limit per client address.
- Behind a proxy the address comes from X-Forwarded-For / Client-IP.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.core.config import AppSettings, settings
from app.core.errors import RateLimitAppError

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests. Please try again in a minute."


def build_rate_limiter(app_settings: AppSettings | None = None) -> AbstractRateLimiter:
    """Build the limiter configured by APP_RATE_LIMIT_* settings."""

    cfg = app_settings or settings.app
    return InMemoryFixedWindowRateLimiter(
        limit=cfg.rate_limit_requests,
        window_seconds=cfg.rate_limit_window_seconds,
    )


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the process-wide limiter attached to the application.

    Returns:
        AbstractRateLimiter: Limiter stored on ``app.state`` by the factory.
    """

    return request.app.state.rate_limiter


def get_app_settings(request: Request) -> AppSettings:
    """Settings the running app was built with (global settings as fallback)."""

    app_settings = getattr(request.app.state, "settings", None)
    return app_settings.app if app_settings is not None else settings.app


def resolve_client_address(request: Request) -> str:
    """Best-effort client address for the current request.

    Args:
        request: FastAPI request.

    Returns:
        str: Address from proxy headers when trusted, else the peer address.
    """

    if get_app_settings(request).trust_proxy_headers:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            first_hop = forwarded_for.split(",")[0].strip()
            if first_hop:
                return first_hop

        client_ip = request.headers.get("client-ip")
        if client_ip and client_ip.strip():
            return client_ip.strip()

    return request.client.host if request.client else "unknown"


def _build_rate_limit_key(request: Request) -> str:
    return f"ip:{resolve_client_address(request)}"


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing rate limits.

    When enabled, consumes 1 unit from the requester's budget. If the requester
    exceeds the configured rate, raises RateLimitAppError (rendered as 429).

    Args:
        request: FastAPI request.

    Raises:
        RateLimitAppError: When the client's window budget is exhausted.
    """

    if not get_app_settings(request).rate_limit_enabled:
        return

    limiter = get_rate_limiter(request)
    key = _build_rate_limit_key(request)
    key_hash = _hash_limiter_key(key)

    result = limiter.consume(key)
    if result.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={
                "key_hash": key_hash,
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return

    retry_after = result.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": key_hash,
            "limit": result.limit,
            "remaining": result.remaining,
            "retry_after_s": retry_after,
        },
    )

    raise RateLimitAppError(
        code="rate_limit_exceeded",
        message=RATE_LIMIT_MESSAGE,
        details={
            "retry_after": retry_after,
            "limit": result.limit,
            "remaining": result.remaining,
            "reset_at": result.reset_at,
        },
    )
