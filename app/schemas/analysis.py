"""Pydantic schema for the intermediate text analysis."""

from pydantic import BaseModel, Field


class TextAnalysis(BaseModel):
    """Title, facts and summary produced by the LLM for a single text.

    Only exists between orchestration and formatting; never persisted.
    """

    title: str = Field(
        ...,
        description="Concise title; 'Untitled' when the model returned nothing.",
    )
    facts: list[str] = Field(
        default_factory=list,
        description="Interesting facts, one per non-empty line of the model output (normally two).",
    )
    summary: str = Field(
        default="",
        description="Three-sentence summary of the text.",
    )
