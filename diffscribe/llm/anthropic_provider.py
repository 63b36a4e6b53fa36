"""Anthropic Claude provider implementation."""

from anthropic import Anthropic

import diffscribe.config as _config
from diffscribe.config import API_KEY_ENV_VARS, LLMProvider
from diffscribe.llm.base import BaseLLMProvider, Prompt, ensure_text, split_system
from diffscribe.llm.exceptions import LLMError, MissingAPIKeyError


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude LLM provider."""

    provider = LLMProvider.ANTHROPIC

    def __init__(self, model: str | None = None):
        """Initialize the Anthropic provider.

        Args:
            model: The model to use. Defaults to claude-sonnet-4-20250514.
        """
        self.model = model or "claude-sonnet-4-20250514"
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.ANTHROPIC]

    def get_api_key(self) -> str:
        """Get the Anthropic API key from environment or credentials file.

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If ANTHROPIC_API_KEY is not found.
        """
        return self._get_api_key_with_fallback(self.api_key_env_var, "Anthropic")

    def call(self, prompt: Prompt) -> str:
        """Generate a completion using Anthropic Claude.

        System messages are passed through the separate ``system`` parameter.

        Args:
            prompt: A user prompt or a sequence of role-tagged messages.

        Returns:
            The reply text.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            LLMError: For other LLM-related errors.
        """
        api_key = self.get_api_key()

        # Create the Anthropic client
        client = Anthropic(api_key=api_key)
        system, messages = split_system(prompt)

        request = {
            "model": self.model,
            "max_tokens": _config.MAX_TOKENS,
            "temperature": _config.TEMPERATURE,
            "messages": messages,
        }
        if system:
            request["system"] = system

        try:
            message = client.messages.create(**request)
            raw_response = "".join(
                block.text for block in message.content if getattr(block, "type", "text") == "text"
            )
        except MissingAPIKeyError:
            raise
        except Exception as e:
            raise LLMError(f"Anthropic API call failed: {e}") from e

        return ensure_text(raw_response, "Anthropic")
