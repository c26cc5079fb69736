"""Summarization pipeline: validate, analyze, format, persist.

This is the business logic behind ``POST /api/summarize``. Rate limiting is
applied earlier, at the HTTP layer.
"""

from __future__ import annotations

import logging

from app.adapters.storage.base import AbstractSummarizationStore, SummarizationRecord
from app.core.text_validation import validate_text
from app.services.analysis_service import TextAnalysisService
from app.services.formatter import format_analysis

logger = logging.getLogger(__name__)


class SummarizationService:
    """Coordinates analysis, formatting and storage of a summarization.

    Attributes:
        analyzer: Service issuing the LLM calls.
        store: Destination for successful results.
        max_chars: Optional override of the configured text length limit.
    """

    def __init__(
        self,
        analyzer: TextAnalysisService,
        store: AbstractSummarizationStore,
        *,
        max_chars: int | None = None,
    ) -> None:
        self.analyzer = analyzer
        self.store = store
        self.max_chars = max_chars

    async def summarize(self, text: str) -> SummarizationRecord:
        """Run the full pipeline for one request.

        Args:
            text: Text submitted by the client.

        Returns:
            The stored record, whose ``summary`` is the formatted output.

        Raises:
            ValidationAppError: If the text violates the length rules.
            LLMAppError: If analysis fails; nothing is stored in that case.
        """
        # Fail fast before any provider call
        text = validate_text(text, self.max_chars)

        analysis = await self.analyzer.analyze(text)
        formatted = format_analysis(analysis)

        record = self.store.create(original_text=text, summary=formatted)
        logger.info(
            "summarize.completed",
            extra={"record_id": record.id, "fact_count": len(analysis.facts)},
        )
        return record
