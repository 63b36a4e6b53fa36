"""Google Gemini provider implementation."""

from google import genai
from google.genai import types

import diffscribe.config as _config
from diffscribe.config import API_KEY_ENV_VARS, LLMProvider
from diffscribe.llm.base import BaseLLMProvider, Prompt, ensure_text, split_system
from diffscribe.llm.exceptions import LLMError, MissingAPIKeyError

# Models that have built-in "thinking" which consumes output tokens
THINKING_MODELS = [
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-2.0-flash-thinking",
]

# Multiplier for max_output_tokens on thinking models
THINKING_TOKEN_MULTIPLIER = 3


class GoogleProvider(BaseLLMProvider):
    """Google Gemini LLM provider."""

    provider = LLMProvider.GOOGLE

    def __init__(self, model: str | None = None):
        """Initialize the Google provider.

        Args:
            model: The model to use. Defaults to gemini-2.0-flash.
        """
        self.model = model or "gemini-2.0-flash"
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.GOOGLE]

    def get_api_key(self) -> str:
        """Get the Google API key from environment or credentials file.

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If GOOGLE_API_KEY is not found.
        """
        return self._get_api_key_with_fallback(self.api_key_env_var, "Google")

    def _is_thinking_model(self) -> bool:
        return any(thinking_model in self.model.lower() for thinking_model in THINKING_MODELS)

    def call(self, prompt: Prompt) -> str:
        """Generate a completion using Google Gemini.

        Args:
            prompt: A user prompt or a sequence of role-tagged messages.

        Returns:
            The reply text.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            LLMError: For other LLM-related errors, including safety blocks.
        """
        api_key = self.get_api_key()

        # Create the client with API key
        client = genai.Client(api_key=api_key)
        system, messages = split_system(prompt)
        contents = "\n\n".join(message["content"] for message in messages)

        # Internal "thinking" consumes tokens from the output budget
        max_output_tokens = _config.MAX_TOKENS
        if self._is_thinking_model():
            max_output_tokens = _config.MAX_TOKENS * THINKING_TOKEN_MULTIPLIER

        generation_config = types.GenerateContentConfig(
            system_instruction=system or None,
            max_output_tokens=max_output_tokens,
            temperature=_config.TEMPERATURE,
        )

        try:
            response = client.models.generate_content(
                model=self.model,
                contents=contents,
                config=generation_config,
            )

            if not response.candidates:
                raise LLMError("Google Gemini returned no candidates in response")

            finish_reason = str(getattr(response.candidates[0], "finish_reason", ""))
            if "SAFETY" in finish_reason:
                raise LLMError(f"Google Gemini blocked response due to safety filters: {finish_reason}")

            raw_response = response.text
        except MissingAPIKeyError:
            raise
        except LLMError:
            raise
        except Exception as e:
            raise LLMError(f"Google Gemini API call failed: {e}") from e

        return ensure_text(raw_response, "Google Gemini")
