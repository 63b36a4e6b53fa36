"""OpenRouter provider implementation.

OpenRouter exposes an OpenAI-compatible API, so the OpenAI client is reused
with a different base URL.
"""

from openai import OpenAI

from diffscribe.config import LLMProvider
from diffscribe.llm.openai_provider import OpenAIProvider

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterProvider(OpenAIProvider):
    """OpenRouter LLM provider (access to many models through one API)."""

    provider = LLMProvider.OPENROUTER
    display_label = "OpenRouter"
    default_model = "anthropic/claude-sonnet-4"

    def _create_client(self, api_key: str):
        return OpenAI(api_key=api_key, base_url=OPENROUTER_BASE_URL)

    def _extra_request_kwargs(self) -> dict:
        return {
            "extra_headers": {
                "HTTP-Referer": "https://github.com/diffscribe",
                "X-Title": "diffscribe",
            }
        }
