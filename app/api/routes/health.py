from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness probe; never touches the LLM provider or the rate limiter."""

    return {"status": "ok"}
