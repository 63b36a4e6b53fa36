"""Ollama provider implementation (local models over HTTP)."""

import httpx

import diffscribe.config as _config
from diffscribe.config import LLMProvider
from diffscribe.llm.base import BaseLLMProvider, Prompt, ensure_text, to_chat_messages
from diffscribe.llm.exceptions import LLMError


def default_timeout() -> httpx.Timeout:
    """Connect/read/write timeouts from config; pool waits like a connect."""
    return httpx.Timeout(
        connect=_config.DEFAULT_CONNECT_TIMEOUT,
        read=_config.DEFAULT_READ_TIMEOUT,
        write=_config.DEFAULT_WRITE_TIMEOUT,
        pool=_config.DEFAULT_CONNECT_TIMEOUT,
    )


class OllamaProvider(BaseLLMProvider):
    """Ollama LLM provider, talking to the /api/chat endpoint."""

    provider = LLMProvider.OLLAMA

    def __init__(
        self,
        model: str | None = None,
        base_url: str | None = None,
        timeout: httpx.Timeout | None = None,
    ):
        """Initialize the Ollama provider.

        Args:
            model: The model to use. Defaults to the configured default model.
            base_url: Ollama server address. Defaults to OLLAMA_BASE_URL.
            timeout: HTTP timeouts. Defaults to the configured timeouts.
        """
        self.model = model or _config.DEFAULT_MODEL
        self.base_url = (base_url or _config.OLLAMA_BASE_URL).rstrip("/")
        self.timeout = timeout or default_timeout()

    def get_api_key(self) -> str:
        """Ollama runs locally and needs no API key."""
        return ""

    def call(self, prompt: Prompt) -> str:
        """Generate a completion using the local Ollama server.

        Args:
            prompt: A user prompt or a sequence of role-tagged messages.

        Returns:
            The reply text.

        Raises:
            LLMError: If the server is unreachable, times out, answers with an
                error status, or returns an empty reply.
        """
        payload = {
            "model": self.model,
            "messages": to_chat_messages(prompt),
            "stream": False,
            "options": {
                "temperature": _config.TEMPERATURE,
                "num_predict": _config.MAX_TOKENS,
            },
        }

        try:
            with httpx.Client(base_url=self.base_url, timeout=self.timeout) as client:
                response = client.post("/api/chat", json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            # Ollama reports unknown models as 404 "model '...' not found"
            raise LLMError(
                f"Ollama API call failed ({e.response.status_code}): {e.response.text.strip()}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise LLMError(f"Ollama API call failed: {e}") from e

        message = data.get("message") or {}
        return ensure_text(message.get("content"), "Ollama")
