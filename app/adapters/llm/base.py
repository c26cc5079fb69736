from abc import ABC, abstractmethod
from typing import Any


class AbstractLLMClient(ABC):
	"""Interface for chat-style text generation clients."""

	@abstractmethod
	async def generate_text(
		self,
		system_prompt: str,
		user_content: str,
		**kwargs: Any,
	) -> str:
		"""Generate text for a single system/user exchange.

		Args:
			system_prompt: Instruction sent with the system role.
			user_content: Content sent with the user role.
			**kwargs: Provider-specific options (e.g., temperature, max_tokens).

		Returns:
			str: Generated content, or an empty string if the provider returned none.

		Raises:
			LLMAppError: If the provider call fails.
		"""
		...
