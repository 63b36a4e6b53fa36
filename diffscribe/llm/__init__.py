"""LLM provider module for diffscribe.

This module provides a unified interface to multiple LLM providers plus the
prompt, parsing, retry and language-compliance helpers built on top of it.
The active provider is configured in diffscribe/config.py.
"""

from dotenv import load_dotenv

from diffscribe import config
from diffscribe.config import LLMProvider
from diffscribe.llm.base import BaseLLMProvider, Message
from diffscribe.llm.exceptions import LLMError, MissingAPIKeyError
from diffscribe.llm.compliance import LanguageComplianceGate
from diffscribe.llm.parsing import is_language_minority, parse_suggestions
from diffscribe.llm.prompts import build_corrective_messages, build_prompt, render_numbered
from diffscribe.llm.retry import RetryingInvoker, diagnose, is_transient, root_cause, summarize

# Load environment variables from .env file
load_dotenv()


def get_provider(
    provider: LLMProvider | None = None,
    model: str | None = None,
) -> BaseLLMProvider:
    """Get an LLM provider instance.

    Args:
        provider: The provider to use. Defaults to ACTIVE_PROVIDER from config.
        model: The model to use. Defaults to ACTIVE_MODEL from config.

    Returns:
        An instance of the appropriate LLM provider.

    Raises:
        ValueError: If the provider is not supported.
    """
    provider = provider or config.ACTIVE_PROVIDER
    model = model or config.ACTIVE_MODEL

    if provider == LLMProvider.OLLAMA:
        from diffscribe.llm.ollama_provider import OllamaProvider

        return OllamaProvider(model=model)

    elif provider == LLMProvider.ANTHROPIC:
        from diffscribe.llm.anthropic_provider import AnthropicProvider

        return AnthropicProvider(model=model)

    elif provider == LLMProvider.OPENAI:
        from diffscribe.llm.openai_provider import OpenAIProvider

        return OpenAIProvider(model=model)

    elif provider == LLMProvider.GOOGLE:
        from diffscribe.llm.google_provider import GoogleProvider

        return GoogleProvider(model=model)

    elif provider == LLMProvider.COHERE:
        from diffscribe.llm.cohere_provider import CohereProvider

        return CohereProvider(model=model)

    elif provider == LLMProvider.GROQ:
        from diffscribe.llm.groq_provider import GroqProvider

        return GroqProvider(model=model)

    elif provider == LLMProvider.OPENROUTER:
        from diffscribe.llm.openrouter_provider import OpenRouterProvider

        return OpenRouterProvider(model=model)

    else:
        raise ValueError(f"Unsupported provider: {provider}")


__all__ = [
    "BaseLLMProvider",
    "LanguageComplianceGate",
    "LLMError",
    "Message",
    "MissingAPIKeyError",
    "RetryingInvoker",
    "build_corrective_messages",
    "build_prompt",
    "diagnose",
    "get_provider",
    "is_language_minority",
    "is_transient",
    "parse_suggestions",
    "render_numbered",
    "root_cause",
    "summarize",
]
