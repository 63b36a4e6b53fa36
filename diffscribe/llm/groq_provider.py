"""Groq provider implementation."""

from groq import Groq

from diffscribe.config import LLMProvider
from diffscribe.llm.openai_provider import OpenAIProvider


class GroqProvider(OpenAIProvider):
    """Groq LLM provider (fast inference for open-source models).

    The Groq SDK mirrors the OpenAI chat completions interface.
    """

    provider = LLMProvider.GROQ
    display_label = "Groq"
    default_model = "llama-3.3-70b-versatile"

    def _create_client(self, api_key: str):
        return Groq(api_key=api_key)
