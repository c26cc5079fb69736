"""Application factory for the FastAPI app.

Builds the app together with its stateful collaborators (rate limiter,
result store, LLM client and services). They are attached to ``app.state``
so route dependencies can reach them and tests can swap them out.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from app.adapters.llm.base import AbstractLLMClient
from app.adapters.llm.factory import create_llm_client
from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.storage.base import AbstractSummarizationStore
from app.adapters.storage.in_memory import InMemorySummarizationStore
from app.api.routes import health_router, summarize_router
from app.core.config import Settings, settings as default_settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.rate_limit import build_rate_limiter
from app.services.analysis_service import TextAnalysisService
from app.services.summarization_service import SummarizationService

logger = logging.getLogger(__name__)


def create_app(
    *,
    settings: Settings | None = None,
    llm_client: AbstractLLMClient | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
    store: AbstractSummarizationStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        settings: Settings to build from; defaults to the global settings.
        llm_client: Text generation client; built from LLM_* settings if omitted.
        rate_limiter: Limiter; built from APP_RATE_LIMIT_* settings if omitted.
        store: Result store; a fresh in-memory store if omitted.

    Returns:
        Configured app with middleware, handlers, routers and services.

    Raises:
        ValidationAppError: If the LLM provider configuration is invalid.
    """
    cfg = settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(cfg.log)

    app = FastAPI(
        title="Text Summarizer API",
        description=(
            "Submit up to 10000 characters of text and receive a generated "
            "title, two key facts and a three-sentence summary as one "
            "formatted string. Requests are rate limited per client."
        ),
        version="0.1.0",
        debug=cfg.app.debug,
    )

    analyzer = TextAnalysisService(
        llm=llm_client if llm_client is not None else create_llm_client(cfg.llm),
        timeout_seconds=cfg.llm.timeout_seconds,
        parallel=cfg.llm.parallel_calls,
    )
    app.state.settings = cfg
    app.state.rate_limiter = (
        rate_limiter if rate_limiter is not None else build_rate_limiter(cfg.app)
    )
    app.state.store = store if store is not None else InMemorySummarizationStore()
    app.state.summarization_service = SummarizationService(
        analyzer=analyzer,
        store=app.state.store,
        max_chars=cfg.app.max_text_chars,
    )

    app.middleware("http")(request_id_middleware)
    setup_exception_handlers(app)

    app.include_router(summarize_router, prefix="/api")
    app.include_router(health_router)

    logger.info(
        "app.created",
        extra={
            "app_env": cfg.app_env,
            "llm_provider": cfg.llm.provider,
            "llm_model": cfg.llm.model,
            "rate_limit_enabled": cfg.app.rate_limit_enabled,
            "rate_limit_requests": cfg.app.rate_limit_requests,
            "rate_limit_window_s": cfg.app.rate_limit_window_seconds,
        },
    )
    return app
