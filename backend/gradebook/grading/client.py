"""Chat-completion client used for AI grading."""

import logging
from typing import Optional

import openai

from ..config import GradingModelConfig, get_grading_config
from ..errors import ExternalServiceError

logger = logging.getLogger(__name__)


class CompletionClient:
    """Thin async wrapper around an OpenAI-compatible chat-completion API.

    Args:
        config: Model configuration. Defaults to the environment settings.
    """

    def __init__(self, config: Optional[GradingModelConfig] = None):
        self.config = config or get_grading_config()
        # Lazy load OpenAI client when needed
        self._openai_client = None

    @property
    def openai_client(self):
        """Lazy load OpenAI client with support for local and cloud endpoints."""
        if self._openai_client is None:
            client_kwargs = {"timeout": self.config.timeout}

            if self.config.api_base:
                client_kwargs["base_url"] = self.config.api_base

            is_local = self.config.api_base and (
                "localhost" in self.config.api_base or "127.0.0.1" in self.config.api_base
            )

            # Local endpoints accept any key
            if not self.config.api_key and is_local:
                client_kwargs["api_key"] = "dummy-key"
            elif self.config.api_key:
                client_kwargs["api_key"] = self.config.api_key

            self._openai_client = openai.AsyncOpenAI(**client_kwargs)

        return self._openai_client

    async def complete(self, system_prompt: str, prompt: str) -> str:
        """Return the completion text for a single-turn conversation.

        Raises:
            ExternalServiceError: The API call failed or returned no text.
        """
        try:
            response = await self.openai_client.chat.completions.create(
                model=self.config.model_name,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except openai.OpenAIError as e:
            logger.error(f"Completion request failed: {e}")
            raise ExternalServiceError(f"Completion request failed: {e}") from e

        if not response.choices:
            raise ExternalServiceError("Completion response contained no choices")
        content = response.choices[0].message.content
        if not content:
            raise ExternalServiceError("Completion response was empty")
        return content
