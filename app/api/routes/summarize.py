"""Summarization endpoint.

Request flow: rate limit gate → schema validation → analysis (three LLM
calls) → formatting → storage → JSON response. Errors raised along the way
are rendered by app.core.exception_handlers.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.core.rate_limit import enforce_rate_limit
from app.schemas.summarize import (
    ErrorResponse,
    RateLimitErrorResponse,
    SummarizeRequest,
    SummarizeResponse,
)
from app.services.summarization_service import SummarizationService

router = APIRouter(tags=["Summarization"])


def get_summarization_service(request: Request) -> SummarizationService:
    """Return the service instance built by the application factory."""
    return request.app.state.summarization_service


@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    dependencies=[Depends(enforce_rate_limit)],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid or oversized text"},
        429: {"model": RateLimitErrorResponse, "description": "Rate limit exceeded"},
        500: {"model": ErrorResponse, "description": "Analysis failed"},
    },
)
async def summarize(
    payload: SummarizeRequest,
    service: Annotated[SummarizationService, Depends(get_summarization_service)],
) -> SummarizeResponse:
    """Generate a title, two key facts and a short summary for the text.

    Args:
        payload: Request body with the text to summarize.
        service: Summarization pipeline.

    Returns:
        SummarizeResponse: The formatted multi-section output.

    Raises:
        ValidationAppError: 400 when the text is empty or too long.
        RateLimitAppError: 429 when the client exceeded its quota.
        LLMAppError: 500 when any provider call fails.
    """
    record = await service.summarize(payload.text)
    return SummarizeResponse(summary=record.summary)
