"""Text analysis service orchestrating the LLM calls.

Turns raw text into a TextAnalysis by asking the model three independent
questions through the same narrow text-generation capability:
- a title
- the two most interesting facts
- a three-sentence summary

Any failure aborts the whole analysis; partial results are discarded.
"""

from __future__ import annotations

import asyncio
import logging
import time

from app.adapters.llm.base import AbstractLLMClient
from app.core.config import settings
from app.core.errors import LLMAppError
from app.schemas.analysis import TextAnalysis

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"

TITLE_PROMPT = (
    "You are a title generation expert. Create a concise, engaging title for "
    "the given text. Return only the title text."
)

FACTS_PROMPT = (
    "You are a fact extraction expert. Extract exactly two of the most "
    "interesting facts from the given text. Return only the facts, each on a "
    "new line."
)

SUMMARY_PROMPT = (
    "You are a text summarization expert. Provide a 3-sentence summary of the "
    "given text that captures the key points while maintaining readability "
    "and coherence. Return only the summary text."
)


def parse_facts(content: str) -> list[str]:
    """Split model output into facts, one per non-empty line.

    Args:
        content: Raw model output.

    Returns:
        Facts in the order the model produced them.
    """
    # Only "\n" separates facts; other Unicode line breaks stay inside a fact
    return [line.strip() for line in content.split("\n") if line.strip()]


class TextAnalysisService:
    """Service producing a TextAnalysis for a piece of text.

    Attributes:
        llm: Text generation client.
        timeout_seconds: Upper bound applied to each provider call.
        parallel: Whether the three calls are issued concurrently.
    """

    def __init__(
        self,
        llm: AbstractLLMClient,
        *,
        timeout_seconds: float | None = None,
        parallel: bool | None = None,
    ) -> None:
        self.llm = llm
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.llm.timeout_seconds
        )
        self.parallel = parallel if parallel is not None else settings.llm.parallel_calls

    async def _generate(self, stage: str, system_prompt: str, text: str) -> str:
        """Run one provider exchange bounded by the configured timeout.

        Raises:
            LLMAppError: If the call times out.
        """
        try:
            return await asyncio.wait_for(
                self.llm.generate_text(system_prompt, text),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            logger.warning(
                "analysis.call_timeout",
                extra={"stage": stage, "timeout_seconds": self.timeout_seconds},
            )
            raise LLMAppError(
                code="llm_timeout",
                message=f"{stage} generation timed out after {self.timeout_seconds:g}s",
                details={"stage": stage, "timeout_seconds": self.timeout_seconds},
            ) from exc

    async def generate_title(self, text: str) -> str:
        content = await self._generate("title", TITLE_PROMPT, text)
        return content or DEFAULT_TITLE

    async def extract_facts(self, text: str) -> list[str]:
        content = await self._generate("facts", FACTS_PROMPT, text)
        return parse_facts(content) if content else []

    async def generate_summary(self, text: str) -> str:
        return await self._generate("summary", SUMMARY_PROMPT, text) or ""

    async def _run_calls(self, text: str) -> tuple[str, list[str], str]:
        if self.parallel:
            # A failing call cancels its siblings; re-raise the first cause
            try:
                async with asyncio.TaskGroup() as group:
                    title_task = group.create_task(self.generate_title(text))
                    facts_task = group.create_task(self.extract_facts(text))
                    summary_task = group.create_task(self.generate_summary(text))
            except ExceptionGroup as exc_group:
                raise exc_group.exceptions[0] from None
            return title_task.result(), facts_task.result(), summary_task.result()

        title = await self.generate_title(text)
        facts = await self.extract_facts(text)
        summary = await self.generate_summary(text)
        return title, facts, summary

    async def analyze(self, text: str) -> TextAnalysis:
        """Analyze text and return its title, facts and summary.

        Args:
            text: Validated input text.

        Returns:
            TextAnalysis assembled from the three model responses.

        Raises:
            LLMAppError: If any of the three calls fails; the message wraps
                the underlying error text.
        """
        start = time.perf_counter()

        try:
            title, facts, summary = await self._run_calls(text)
        except Exception as exc:
            cause = exc.message if isinstance(exc, LLMAppError) else str(exc)
            cause = cause or type(exc).__name__
            logger.error(
                "analysis.failed",
                extra={
                    "error_type": type(exc).__name__,
                    "error_msg": cause,
                    "char_count": len(text),
                },
            )
            raise LLMAppError(
                code="analysis_failed",
                message=f"Failed to analyze text: {cause}",
                details=getattr(exc, "details", None),
            ) from exc

        logger.info(
            "analysis.completed",
            extra={
                "char_count": len(text),
                "fact_count": len(facts),
                "parallel": self.parallel,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return TextAnalysis(title=title, facts=facts, summary=summary)
