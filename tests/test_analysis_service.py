"""Unit tests for TextAnalysisService."""

import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.adapters.llm.base import AbstractLLMClient
from app.core.errors import LLMAppError
from app.services.analysis_service import (
    DEFAULT_TITLE,
    FACTS_PROMPT,
    SUMMARY_PROMPT,
    TITLE_PROMPT,
    TextAnalysisService,
    parse_facts,
)


class TestParseFacts:
    def test_splits_on_newlines(self) -> None:
        assert parse_facts("Fact one\nFact two") == ["Fact one", "Fact two"]

    def test_discards_empty_lines(self) -> None:
        assert parse_facts("\nFact one\n\n\nFact two\n") == ["Fact one", "Fact two"]

    def test_handles_windows_line_endings(self) -> None:
        assert parse_facts("A\r\nB") == ["A", "B"]

    def test_only_newline_separates_facts(self) -> None:
        assert parse_facts("F1\n   \nF2\u2028F3") == ["F1", "F2\u2028F3"]
        assert parse_facts("A\x0cB") == ["A\x0cB"]

    def test_empty_content(self) -> None:
        assert parse_facts("") == []


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_assembles_analysis_from_three_calls(self, make_llm) -> None:
        llm = make_llm(title="T", facts="F1\nF2", summary="S")
        service = TextAnalysisService(llm, timeout_seconds=5, parallel=False)

        analysis = await service.analyze("some text")

        assert analysis.title == "T"
        assert analysis.facts == ["F1", "F2"]
        assert analysis.summary == "S"

    @pytest.mark.asyncio
    async def test_calls_run_in_order_with_user_text(self, make_llm) -> None:
        llm = make_llm()
        service = TextAnalysisService(llm, timeout_seconds=5, parallel=False)

        await service.analyze("the input")

        prompts = [call.args[0] for call in llm.generate_text.await_args_list]
        assert prompts == [TITLE_PROMPT, FACTS_PROMPT, SUMMARY_PROMPT]
        assert all(call.args[1] == "the input" for call in llm.generate_text.await_args_list)

    @pytest.mark.asyncio
    async def test_empty_title_defaults_to_untitled(self, make_llm) -> None:
        service = TextAnalysisService(make_llm(title=""), timeout_seconds=5)

        analysis = await service.analyze("text")

        assert analysis.title == DEFAULT_TITLE == "Untitled"

    @pytest.mark.asyncio
    async def test_empty_facts_and_summary(self, make_llm) -> None:
        service = TextAnalysisService(make_llm(facts="", summary=""), timeout_seconds=5)

        analysis = await service.analyze("text")

        assert analysis.facts == []
        assert analysis.summary == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failing_stage", ["title", "facts", "summary"])
    async def test_any_failure_aborts_with_wrapped_message(
        self, make_llm, failing_stage: str
    ) -> None:
        kwargs: dict[str, Any] = {failing_stage: RuntimeError("connection reset by peer")}
        service = TextAnalysisService(make_llm(**kwargs), timeout_seconds=5)

        with pytest.raises(LLMAppError) as exc_info:
            await service.analyze("text")

        assert exc_info.value.code == "analysis_failed"
        assert exc_info.value.message == "Failed to analyze text: connection reset by peer"

    @pytest.mark.asyncio
    async def test_failure_stops_remaining_sequential_calls(self, make_llm) -> None:
        llm = make_llm(title=RuntimeError("boom"))
        service = TextAnalysisService(llm, timeout_seconds=5, parallel=False)

        with pytest.raises(LLMAppError):
            await service.analyze("text")

        assert llm.generate_text.await_count == 1

    @pytest.mark.asyncio
    async def test_provider_error_message_is_preserved(self, make_llm) -> None:
        provider_error = LLMAppError(
            code="llm_provider_error",
            message="OpenAI API error: invalid api key",
        )
        service = TextAnalysisService(make_llm(facts=provider_error), timeout_seconds=5)

        with pytest.raises(LLMAppError) as exc_info:
            await service.analyze("text")

        assert "OpenAI API error: invalid api key" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_slow_call_times_out(self) -> None:
        async def slow(system_prompt: str, user_content: str, **kwargs: Any) -> str:
            await asyncio.sleep(1)
            return "late"

        llm = MagicMock(spec=AbstractLLMClient)
        llm.generate_text = AsyncMock(side_effect=slow)
        service = TextAnalysisService(llm, timeout_seconds=0.01)

        with pytest.raises(LLMAppError) as exc_info:
            await service.analyze("text")

        assert exc_info.value.code == "analysis_failed"
        assert "timed out" in exc_info.value.message
        assert exc_info.value.details["stage"] == "title"

    @pytest.mark.asyncio
    async def test_parallel_mode_produces_same_analysis(self, make_llm) -> None:
        sequential = TextAnalysisService(make_llm(), timeout_seconds=5, parallel=False)
        parallel = TextAnalysisService(make_llm(), timeout_seconds=5, parallel=True)

        assert await sequential.analyze("text") == await parallel.analyze("text")

    @pytest.mark.asyncio
    async def test_parallel_mode_failure_is_wrapped(self, make_llm) -> None:
        service = TextAnalysisService(
            make_llm(summary=RuntimeError("rate limited upstream")),
            timeout_seconds=5,
            parallel=True,
        )

        with pytest.raises(LLMAppError) as exc_info:
            await service.analyze("text")

        assert "rate limited upstream" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_parallel_failure_cancels_pending_calls(self) -> None:
        finished: list[str] = []

        async def generate(system_prompt: str, user_content: str, **kwargs: Any) -> str:
            if system_prompt == TITLE_PROMPT:
                raise RuntimeError("boom")
            await asyncio.sleep(0.2)
            finished.append(system_prompt)
            return "late"

        llm = MagicMock(spec=AbstractLLMClient)
        llm.generate_text = AsyncMock(side_effect=generate)
        service = TextAnalysisService(llm, timeout_seconds=5, parallel=True)

        with pytest.raises(LLMAppError) as exc_info:
            await service.analyze("text")

        assert exc_info.value.message == "Failed to analyze text: boom"
        await asyncio.sleep(0.3)
        assert finished == []
