"""Base classes and shared utilities for LLM providers."""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence, Union

from diffscribe.config import LLMProvider
from diffscribe.llm.exceptions import LLMError, MissingAPIKeyError


@dataclass(frozen=True)
class Message:
    """A role-tagged chat message (role is 'system', 'user' or 'assistant')."""

    role: str
    content: str


Prompt = Union[str, Sequence[Message]]


def to_chat_messages(prompt: Prompt) -> list[dict]:
    """Convert a prompt into OpenAI-style chat message dicts.

    A plain string becomes a single user message.
    """
    if isinstance(prompt, str):
        return [{"role": "user", "content": prompt}]
    return [{"role": message.role, "content": message.content} for message in prompt]


def split_system(prompt: Prompt) -> tuple[str, list[dict]]:
    """Separate system instructions from the conversation.

    For APIs that take the system prompt as its own parameter.

    Returns:
        (joined system text or "", remaining chat message dicts)
    """
    messages = to_chat_messages(prompt)
    system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
    rest = [m for m in messages if m["role"] != "system"]
    return system, rest


def ensure_text(raw_response, provider_name: str) -> str:
    if not raw_response or not raw_response.strip():
        raise LLMError(f"{provider_name} returned empty response")
    return raw_response


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers."""

    provider: LLMProvider
    model: str

    @abstractmethod
    def call(self, prompt: Prompt) -> str:
        """Send a prompt and return the model's text reply.

        Args:
            prompt: A single user prompt, or a sequence of role-tagged messages.

        Returns:
            The raw text of the completion.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            LLMError: For any other failure, raised from the original error.
        """
        pass

    @abstractmethod
    def get_api_key(self) -> str:
        """Get the API key from environment or credentials file.

        Checks in order:
        1. Environment variable
        2. ~/.diffscribe/credentials file
        3. Repo-level .env file (if loaded)

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If the API key is not found.
        """
        pass

    @property
    def display_name(self) -> str:
        """Provider label used in responses, e.g. 'OLLAMA'."""
        return self.provider.name

    def _get_api_key_with_fallback(self, env_var_name: str, provider_name: str) -> str:
        """Helper to get API key with fallback to credentials file.

        Args:
            env_var_name: Environment variable name to check.
            provider_name: Human-readable provider name for error messages.

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If the API key is not found.
        """
        # First check environment variable
        api_key = os.getenv(env_var_name)
        if api_key:
            return api_key

        # Then check credentials file
        from diffscribe.global_config import GlobalConfigError, get_credential

        try:
            api_key = get_credential(env_var_name)
        except GlobalConfigError:
            api_key = None
        if api_key:
            return api_key

        # Not found anywhere
        raise MissingAPIKeyError(
            f"{provider_name} API key not found. Set it using:\n"
            f"  1. Environment variable: export {env_var_name}=your_key_here\n"
            f"  2. Run: diffscribe config set-key {provider_name.lower()}\n"
            f"  3. Manually add to ~/.diffscribe/credentials"
        )
