"""OpenAI provider implementation.

Also the base for OpenAI-compatible chat completion APIs.
"""

from openai import OpenAI

import diffscribe.config as _config
from diffscribe.config import API_KEY_ENV_VARS, LLMProvider
from diffscribe.llm.base import BaseLLMProvider, Prompt, ensure_text, to_chat_messages
from diffscribe.llm.exceptions import LLMError, MissingAPIKeyError


class OpenAIProvider(BaseLLMProvider):
    """OpenAI LLM provider."""

    provider = LLMProvider.OPENAI
    display_label = "OpenAI"
    default_model = "gpt-4o-mini"

    def __init__(self, model: str | None = None):
        """Initialize the provider.

        Args:
            model: The model to use. Defaults to the provider's default model.
        """
        self.model = model or self.default_model
        self.api_key_env_var = API_KEY_ENV_VARS[self.provider]

    def get_api_key(self) -> str:
        """Get the API key from environment or credentials file.

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If the key is not found.
        """
        return self._get_api_key_with_fallback(self.api_key_env_var, self.display_label)

    def _create_client(self, api_key: str):
        return OpenAI(api_key=api_key)

    def _extra_request_kwargs(self) -> dict:
        return {}

    def call(self, prompt: Prompt) -> str:
        """Generate a completion through the chat completions API.

        Args:
            prompt: A user prompt or a sequence of role-tagged messages.

        Returns:
            The reply text.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            LLMError: For other LLM-related errors.
        """
        api_key = self.get_api_key()
        client = self._create_client(api_key)

        try:
            response = client.chat.completions.create(
                model=self.model,
                max_tokens=_config.MAX_TOKENS,
                temperature=_config.TEMPERATURE,
                messages=to_chat_messages(prompt),
                **self._extra_request_kwargs(),
            )
            raw_response = response.choices[0].message.content
        except MissingAPIKeyError:
            raise
        except Exception as e:
            raise LLMError(f"{self.display_label} API call failed: {e}") from e

        return ensure_text(raw_response, self.display_label)
