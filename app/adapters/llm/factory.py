"""Factory pattern for creating LLM client instances."""

from app.adapters.llm.base import AbstractLLMClient
from app.adapters.llm.openai_client import OpenAIClient
from app.core.config import LLMSettings, settings
from app.core.errors import ValidationAppError


def create_llm_client(llm_settings: LLMSettings | None = None) -> AbstractLLMClient:
    """Factory function to instantiate LLM clients based on provider.

    Reads configuration from app.core.config.settings unless explicit
    settings are passed. Validates provider-specific requirements and routes
    to the appropriate client.

    Args:
        llm_settings: Optional LLM settings; defaults to the global settings.

    Returns:
        AbstractLLMClient: Configured LLM client instance.

    Raises:
        ValidationAppError: If provider-specific requirements are not met.
    """
    cfg = llm_settings or settings.llm
    provider = cfg.provider.lower()

    if provider == "openai":
        if not cfg.api_key:
            raise ValidationAppError(
                code="llm_missing_api_key",
                message="OpenAI provider requires LLM_API_KEY or OPENAI_API_KEY environment variable",
            )
        return OpenAIClient(
            api_key=cfg.api_key,
            model=cfg.model,
            base_url=cfg.base_url,
            timeout_seconds=cfg.timeout_seconds,
            max_retries=cfg.max_retries,
        )

    raise ValidationAppError(
        code="llm_unknown_provider",
        message=(
            f"Unknown LLM provider: '{provider}'. Supported providers: openai"
        ),
    )
