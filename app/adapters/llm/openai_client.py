"""OpenAI LLM client adapter."""

from typing import Any

from openai import AsyncOpenAI

from app.adapters.llm.base import AbstractLLMClient
from app.core.errors import LLMAppError


class OpenAIClient(AbstractLLMClient):
    """Client for calling OpenAI chat completions and returning plain text.

    Uses the official OpenAI Python SDK with async support.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 45.0,
        max_retries: int = 0,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Model name (e.g., "gpt-4o", "gpt-4o-mini").
            base_url: Optional custom base URL for OpenAI API.
            timeout_seconds: Timeout for requests in seconds.
            max_retries: Retries the SDK performs on transient failures.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=max_retries,
        )
        self.model = model

    async def generate_text(
        self,
        system_prompt: str,
        user_content: str,
        **kwargs: Any,
    ) -> str:
        """Generate text using OpenAI chat completions.

        Args:
            system_prompt: System instruction for the exchange.
            user_content: User message content.
            **kwargs: Provider options (temperature, max_tokens, top_p, etc.).

        Returns:
            str: Stripped message content; empty string when the model returned none.

        Raises:
            LLMAppError: If the API call fails or the response has no choices.
        """
        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
        }

        allowed_params = {
            "temperature",
            "max_tokens",
            "top_p",
            "frequency_penalty",
            "presence_penalty",
            "seed",
        }
        for param in allowed_params:
            if param in kwargs:
                request_params[param] = kwargs[param]

        try:
            response = await self.client.chat.completions.create(**request_params)
            if not response.choices:
                raise ValueError("response contained no choices")
            content = response.choices[0].message.content
        except Exception as exc:
            raise LLMAppError(
                code="llm_provider_error",
                message=f"OpenAI API error: {exc}",
                details={"model": self.model},
            ) from exc

        return (content or "").strip()
