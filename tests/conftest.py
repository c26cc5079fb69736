"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before any test module, so the
environment below is in place before app.core.config builds the settings.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("LLM_PROVIDER", "openai")
os.environ.setdefault("LLM_MODEL", "gpt-4o")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("LOG_FORMAT", "plain")

from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from fastapi.testclient import TestClient

from app.adapters.llm.base import AbstractLLMClient
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.adapters.storage.in_memory import InMemorySummarizationStore
from app.core.app_factory import create_app
from app.services.analysis_service import FACTS_PROMPT, SUMMARY_PROMPT, TITLE_PROMPT


@pytest.fixture
def make_llm() -> Callable[..., MagicMock]:
    """Build a fake LLM client answering each prompt with a scripted value.

    Pass an exception instance instead of a string to make that call fail.
    """

    def _make(
        title: Any = "T",
        facts: Any = "F1\nF2",
        summary: Any = "S",
    ) -> MagicMock:
        responses = {TITLE_PROMPT: title, FACTS_PROMPT: facts, SUMMARY_PROMPT: summary}

        async def generate_text(system_prompt: str, user_content: str, **kwargs: Any) -> str:
            value = responses[system_prompt]
            if isinstance(value, BaseException):
                raise value
            return value

        llm = MagicMock(spec=AbstractLLMClient)
        llm.generate_text = AsyncMock(side_effect=generate_text)
        return llm

    return _make


@pytest.fixture
def clock() -> Mock:
    """Controllable time source starting at t=1000s."""
    return Mock(return_value=1000.0)


@pytest.fixture
def rate_limiter(clock: Mock) -> InMemoryFixedWindowRateLimiter:
    return InMemoryFixedWindowRateLimiter(limit=2, window_seconds=60, clock=clock)


@pytest.fixture
def store() -> InMemorySummarizationStore:
    return InMemorySummarizationStore()


@pytest.fixture
def llm(make_llm: Callable[..., MagicMock]) -> MagicMock:
    return make_llm()


@pytest.fixture
def client(
    llm: MagicMock,
    rate_limiter: InMemoryFixedWindowRateLimiter,
    store: InMemorySummarizationStore,
) -> TestClient:
    """Test client over an app wired with fakes (limit: 2 requests / 60s)."""
    app = create_app(llm_client=llm, rate_limiter=rate_limiter, store=store)
    return TestClient(app)
