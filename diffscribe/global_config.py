"""Global configuration management for diffscribe.

Handles user-level configuration stored in ~/.diffscribe/:
- config.yaml: Provider, model, language and retry settings
- credentials: API keys for LLM providers
"""

import os
import stat
from pathlib import Path
from typing import Dict, Optional, Any

import yaml

from diffscribe.config import LLMProvider


class GlobalConfigError(Exception):
    """Raised when there's an error with global configuration."""
    pass


_CONFIG_DIR = Path.home() / ".diffscribe"


def get_global_config_dir() -> Path:
    """Get the global diffscribe configuration directory.

    Returns:
        Path to ~/.diffscribe/
    """
    return _CONFIG_DIR


def ensure_global_config_dir() -> Path:
    """Ensure the global config directory exists.

    Returns:
        Path to ~/.diffscribe/
    """
    config_dir = get_global_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file_path() -> Path:
    """Get path to config.yaml file."""
    return get_global_config_dir() / "config.yaml"


def get_credentials_file_path() -> Path:
    """Get path to credentials file."""
    return get_global_config_dir() / "credentials"


def load_global_config() -> Dict[str, Any]:
    """Load global configuration from ~/.diffscribe/config.yaml.

    Returns:
        Dictionary with configuration values. Empty dict if file doesn't exist.

    Raises:
        GlobalConfigError: If the file exists but cannot be read or parsed.
    """
    config_file = get_config_file_path()

    if not config_file.exists():
        return {}

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to load config from {config_file}: {e}") from e

    if not isinstance(config, dict):
        raise GlobalConfigError(f"Config file {config_file} must contain a mapping")
    return config


def save_global_config(config: Dict[str, Any]) -> None:
    """Save global configuration to ~/.diffscribe/config.yaml.

    Args:
        config: Configuration dictionary to save.
    """
    ensure_global_config_dir()
    config_file = get_config_file_path()

    try:
        with open(config_file, "w", encoding="utf-8") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to save config to {config_file}: {e}") from e


def _read_credentials(credentials_file: Path) -> Dict[str, str]:
    credentials = {}
    with open(credentials_file, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue

            # Parse KEY=value format
            if "=" in line:
                key, value = line.split("=", 1)
                credentials[key.strip()] = value.strip()
    return credentials


def load_credentials() -> Dict[str, str]:
    """Load API keys from ~/.diffscribe/credentials.

    Returns:
        Dictionary mapping environment variable names to API keys.
    """
    credentials_file = get_credentials_file_path()

    if not credentials_file.exists():
        return {}

    try:
        return _read_credentials(credentials_file)
    except OSError as e:
        raise GlobalConfigError(f"Failed to load credentials from {credentials_file}: {e}") from e


def save_credential(provider_key: str, api_key: str) -> None:
    """Save or update an API key in the credentials file.

    Args:
        provider_key: Environment variable name (e.g., "ANTHROPIC_API_KEY")
        api_key: The API key value.
    """
    ensure_global_config_dir()
    credentials_file = get_credentials_file_path()

    existing_creds = load_credentials()
    existing_creds[provider_key] = api_key

    # Write back all credentials
    try:
        with open(credentials_file, "w", encoding="utf-8") as f:
            f.write("# diffscribe API credentials\n")
            f.write("# Format: PROVIDER_API_KEY=your_key_here\n\n")

            for key, value in existing_creds.items():
                f.write(f"{key}={value}\n")

        # Owner read/write only
        os.chmod(credentials_file, stat.S_IRUSR | stat.S_IWUSR)

    except OSError as e:
        raise GlobalConfigError(f"Failed to save credential: {e}") from e


def get_credential(provider_key: str) -> Optional[str]:
    """Get an API key from credentials file.

    Args:
        provider_key: Environment variable name (e.g., "ANTHROPIC_API_KEY")

    Returns:
        The API key if found, None otherwise.
    """
    return load_credentials().get(provider_key)


def get_active_provider() -> Optional[LLMProvider]:
    """Get the active LLM provider from global config.

    Returns:
        LLMProvider enum value, or None if not configured or unknown.
    """
    provider_str = load_global_config().get("provider")

    if not provider_str:
        return None

    try:
        return LLMProvider(provider_str)
    except ValueError:
        return None


def get_active_model() -> Optional[str]:
    """Get the active model from global config."""
    return load_global_config().get("model")


def set_provider_and_model(provider: LLMProvider, model: str) -> None:
    """Set the active provider and model in global config.

    Args:
        provider: The LLM provider to use.
        model: The model name to use.
    """
    config = load_global_config()
    config["provider"] = provider.value
    config["model"] = model
    save_global_config(config)


def get_max_tokens() -> Optional[int]:
    """Get max_tokens setting from global config."""
    return load_global_config().get("max_tokens")


def get_temperature() -> Optional[float]:
    """Get temperature setting from global config."""
    return load_global_config().get("temperature")


def get_language() -> Optional[str]:
    """Get the target language code for commit descriptions."""
    return load_global_config().get("language")


def set_language(code: str) -> None:
    """Set the target language code in global config.

    Args:
        code: Language code (ko, ja, zh, en).
    """
    config = load_global_config()
    config["language"] = code
    save_global_config(config)


def get_ollama_base_url() -> Optional[str]:
    """Get the Ollama server base URL from global config."""
    return load_global_config().get("ollama", {}).get("base_url")


def get_retry_config() -> dict:
    """Get the retry section (max_attempts, base_backoff) from global config."""
    return load_global_config().get("retry", {})


def get_scope_markers() -> dict:
    """Get the file path marker -> scope label mapping from global config."""
    return load_global_config().get("scope_markers", {})


def initialize_default_config() -> None:
    """Initialize config.yaml with default values if it doesn't exist."""
    config_file = get_config_file_path()

    if config_file.exists():
        return

    default_config = {
        "provider": "ollama",
        "model": "llama3.1:8b",
        "max_tokens": 1500,
        "temperature": 0.2,
        "language": "ko",
        "ollama": {
            "base_url": "http://localhost:11434",
        },
        "retry": {
            "max_attempts": 3,
            "base_backoff": 0.4,
        },
        "scope_markers": {
            "mcp": "mcp",
        },
    }

    save_global_config(default_config)


def is_configured() -> bool:
    """Check if diffscribe has been configured.

    Returns:
        True if config.yaml exists, False otherwise.
    """
    return get_config_file_path().exists()
