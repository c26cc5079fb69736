"""Pydantic schemas for the summarize endpoint."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SummarizeRequest(BaseModel):
    """Payload submitted by the client.

    Length rules (1 to 10000 characters by default) are enforced by
    app.core.text_validation so the error messages stay stable.
    """

    text: str = Field(
        ...,
        description="Text to summarize (1 to 10000 characters).",
        examples=["The Apollo program was the third United States human spaceflight program..."],
    )


class SummarizeResponse(BaseModel):
    """Formatted title, key facts and summary."""

    summary: str = Field(
        ...,
        description="Multi-section text: title, 'Key Facts:' list and 'Summary:' paragraph.",
    )


class ErrorResponse(BaseModel):
    message: str = Field(..., description="Human-readable error message.")


class RateLimitErrorResponse(ErrorResponse):
    retryAfter: int = Field(
        ...,
        description="Seconds until the client's rate limit window resets.",
    )
