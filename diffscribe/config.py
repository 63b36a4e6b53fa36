"""Configuration for diffscribe LLM providers and message generation.

Configuration is loaded from ~/.diffscribe/config.yaml.
Use 'diffscribe config' commands to modify settings.
"""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class LLMProvider(Enum):
    """Supported LLM providers."""

    OLLAMA = "ollama"
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GOOGLE = "google"
    COHERE = "cohere"
    GROQ = "groq"
    OPENROUTER = "openrouter"


@dataclass(frozen=True)
class LanguageProfile:
    """Target language for generated commit descriptions.

    ``char_pattern`` is a regex character class; a line counts as written in
    the language when it contains at least one matching character.
    """

    code: str
    name: str
    char_pattern: str
    examples: tuple[str, ...]


LANGUAGE_PROFILES = {
    "ko": LanguageProfile(
        code="ko",
        name="Korean",
        char_pattern=r"[가-힣]",
        examples=(
            "feat(core): 설정 자동 로딩 지원 추가",
            "fix(api): 잘못된 상태 코드 매핑 수정",
        ),
    ),
    "ja": LanguageProfile(
        code="ja",
        name="Japanese",
        char_pattern=r"[\u3040-\u30ff\u4e00-\u9fff]",
        examples=(
            "feat(core): 設定の自動読み込みを追加",
            "fix(api): 誤ったステータスコードの対応を修正",
        ),
    ),
    "zh": LanguageProfile(
        code="zh",
        name="Chinese",
        char_pattern=r"[\u4e00-\u9fff]",
        examples=(
            "feat(core): 添加配置自动加载支持",
            "fix(api): 修复错误的状态码映射",
        ),
    ),
    "en": LanguageProfile(
        code="en",
        name="English",
        char_pattern=r"[A-Za-z]",
        examples=(
            "feat(core): add automatic configuration loading",
            "fix(api): correct wrong status code mapping",
        ),
    ),
}


# ============================================================
# DEFAULT FALLBACK VALUES
# ============================================================
# These are used only if ~/.diffscribe/config.yaml doesn't exist

DEFAULT_PROVIDER = LLMProvider.OLLAMA
DEFAULT_MODEL = "llama3.1:8b"
DEFAULT_MAX_TOKENS = 1500
DEFAULT_TEMPERATURE = 0.2
DEFAULT_LANGUAGE = "ko"
DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"

# Connect/read/write timeouts (seconds) for HTTP-based providers
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_READ_TIMEOUT = 300.0
DEFAULT_WRITE_TIMEOUT = 120.0

DEFAULT_RETRY_MAX_ATTEMPTS = 3
DEFAULT_RETRY_BASE_BACKOFF = 0.4

DEFAULT_MAX_SUGGESTIONS = 9

# File path marker -> scope label, checked before any other scope rule
DEFAULT_SCOPE_MARKERS = {
    "mcp": "mcp",
}


# ============================================================
# ACTIVE CONFIGURATION (loaded from global config)
# ============================================================

# Initially set to defaults - will be overridden by load_config()
ACTIVE_PROVIDER = DEFAULT_PROVIDER
ACTIVE_MODEL = DEFAULT_MODEL
MAX_TOKENS = DEFAULT_MAX_TOKENS
TEMPERATURE = DEFAULT_TEMPERATURE
ACTIVE_LANGUAGE = LANGUAGE_PROFILES[DEFAULT_LANGUAGE]
OLLAMA_BASE_URL = DEFAULT_OLLAMA_BASE_URL
RETRY_MAX_ATTEMPTS = DEFAULT_RETRY_MAX_ATTEMPTS
RETRY_BASE_BACKOFF = DEFAULT_RETRY_BASE_BACKOFF
SCOPE_MARKERS = dict(DEFAULT_SCOPE_MARKERS)


def get_language_profile(code: str) -> LanguageProfile:
    """Look up a language profile by its code.

    Args:
        code: Language code (ko, ja, zh, en).

    Returns:
        The matching LanguageProfile.

    Raises:
        ValueError: If the code is unknown.
    """
    try:
        return LANGUAGE_PROFILES[code.lower()]
    except KeyError:
        valid = ", ".join(LANGUAGE_PROFILES)
        raise ValueError(f"Unsupported language: {code} (valid: {valid})") from None


def load_config() -> None:
    """Load configuration from global config file.

    This should be called by the CLI before using the LLM.
    """
    global ACTIVE_PROVIDER, ACTIVE_MODEL, MAX_TOKENS, TEMPERATURE
    global ACTIVE_LANGUAGE, OLLAMA_BASE_URL, RETRY_MAX_ATTEMPTS, RETRY_BASE_BACKOFF
    global SCOPE_MARKERS

    # Import here to avoid circular dependency
    from diffscribe import global_config

    try:
        provider = global_config.get_active_provider()
        model = global_config.get_active_model()
        max_tokens = global_config.get_max_tokens()
        temperature = global_config.get_temperature()
        language = global_config.get_language()
        ollama_base_url = global_config.get_ollama_base_url()
        retry = global_config.get_retry_config()
        scope_markers = global_config.get_scope_markers()
    except global_config.GlobalConfigError as e:
        # Use defaults if the config file is unreadable
        logger.warning("Ignoring unreadable global config: %s", e)
        return

    if provider:
        ACTIVE_PROVIDER = provider
    if model:
        ACTIVE_MODEL = model
    if max_tokens is not None:
        MAX_TOKENS = max_tokens
    if temperature is not None:
        TEMPERATURE = temperature
    if language:
        try:
            ACTIVE_LANGUAGE = get_language_profile(language)
        except ValueError as e:
            logger.warning("%s; keeping %s", e, ACTIVE_LANGUAGE.code)
    if ollama_base_url:
        OLLAMA_BASE_URL = ollama_base_url
    if retry.get("max_attempts") is not None:
        RETRY_MAX_ATTEMPTS = int(retry["max_attempts"])
    if retry.get("base_backoff") is not None:
        RETRY_BASE_BACKOFF = float(retry["base_backoff"])
    if scope_markers:
        SCOPE_MARKERS = dict(scope_markers)


# ============================================================
# AVAILABLE MODELS PER PROVIDER
# ============================================================

AVAILABLE_MODELS = {
    LLMProvider.OLLAMA: [
        "llama3.1:8b",
        "qwen2.5-coder:7b",
        "gemma2:9b",
        "exaone3.5:7.8b",
    ],
    LLMProvider.ANTHROPIC: [
        "claude-sonnet-4-20250514",
        "claude-3-5-sonnet-latest",
        "claude-3-5-haiku-latest",
    ],
    LLMProvider.OPENAI: [
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-4o",
        "gpt-4o-mini",
    ],
    LLMProvider.GOOGLE: [
        "gemini-2.5-pro",
        "gemini-2.5-flash",
        "gemini-2.0-flash",
    ],
    LLMProvider.COHERE: [
        "command-r-plus",
        "command-r",
    ],
    LLMProvider.GROQ: [
        "llama-3.3-70b-versatile",
        "llama-3.1-8b-instant",
    ],
    LLMProvider.OPENROUTER: [
        "anthropic/claude-sonnet-4",
        "openai/gpt-4o",
        "google/gemini-2.0-flash-exp",
        "qwen/qwen-2.5-coder-32b-instruct",
    ],
}

# ============================================================
# API KEY ENVIRONMENT VARIABLES
# ============================================================

# Ollama runs locally and needs no key
API_KEY_ENV_VARS = {
    LLMProvider.ANTHROPIC: "ANTHROPIC_API_KEY",
    LLMProvider.OPENAI: "OPENAI_API_KEY",
    LLMProvider.GOOGLE: "GOOGLE_API_KEY",
    LLMProvider.COHERE: "COHERE_API_KEY",
    LLMProvider.GROQ: "GROQ_API_KEY",
    LLMProvider.OPENROUTER: "OPENROUTER_API_KEY",
}


def get_api_key_env_var(provider: LLMProvider) -> str:
    """Get the environment variable name for the API key.

    Args:
        provider: The LLM provider.

    Returns:
        The environment variable name.

    Raises:
        KeyError: If the provider does not use an API key.
    """
    return API_KEY_ENV_VARS[provider]
