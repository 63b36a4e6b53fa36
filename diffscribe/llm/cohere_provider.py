"""Cohere provider implementation."""

import cohere

import diffscribe.config as _config
from diffscribe.config import API_KEY_ENV_VARS, LLMProvider
from diffscribe.llm.base import BaseLLMProvider, Prompt, ensure_text, to_chat_messages
from diffscribe.llm.exceptions import LLMError, MissingAPIKeyError


class CohereProvider(BaseLLMProvider):
    """Cohere Command LLM provider."""

    provider = LLMProvider.COHERE

    def __init__(self, model: str | None = None):
        """Initialize the Cohere provider.

        Args:
            model: The model to use. Defaults to command-r-plus.
        """
        self.model = model or "command-r-plus"
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.COHERE]

    def get_api_key(self) -> str:
        """Get the Cohere API key from environment or credentials file.

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If COHERE_API_KEY is not found.
        """
        return self._get_api_key_with_fallback(self.api_key_env_var, "Cohere")

    def call(self, prompt: Prompt) -> str:
        """Generate a completion using Cohere.

        Args:
            prompt: A user prompt or a sequence of role-tagged messages.

        Returns:
            The reply text.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            LLMError: For other LLM-related errors.
        """
        api_key = self.get_api_key()

        # Create the Cohere client
        client = cohere.ClientV2(api_key=api_key)

        try:
            response = client.chat(
                model=self.model,
                messages=to_chat_messages(prompt),
                temperature=_config.TEMPERATURE,
                max_tokens=_config.MAX_TOKENS,
            )
            raw_response = response.message.content[0].text
        except MissingAPIKeyError:
            raise
        except Exception as e:
            raise LLMError(f"Cohere API call failed: {e}") from e

        return ensure_text(raw_response, "Cohere")
