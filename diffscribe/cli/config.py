"""CLI commands for global configuration management."""

import typer

from diffscribe import global_config
from diffscribe.config import (
    API_KEY_ENV_VARS,
    AVAILABLE_MODELS,
    LANGUAGE_PROFILES,
    LLMProvider,
    get_language_profile,
)

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage global diffscribe configuration in ~/.diffscribe/",
    add_completion=False,
)

VALID_PROVIDERS = ", ".join(provider.value for provider in LLMProvider)


def _parse_provider(provider: str) -> LLMProvider:
    try:
        return LLMProvider(provider.lower())
    except ValueError:
        typer.echo(f"Invalid provider: {provider}", err=True)
        typer.echo(f"Valid providers: {VALID_PROVIDERS}")
        raise typer.Exit(1)


def _mask(api_key: str) -> str:
    return api_key[:8] + "..." + api_key[-4:] if len(api_key) > 12 else "***"


@config_app.command("init")
def config_init() -> None:
    """Write ~/.diffscribe/config.yaml with default values."""
    try:
        if global_config.is_configured():
            typer.echo(f"Configuration already exists at {global_config.get_config_file_path()}")
            return
        global_config.initialize_default_config()
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ Default configuration written to {global_config.get_config_file_path()}")


@config_app.command("show")
def config_show() -> None:
    """Show current global configuration."""
    try:
        if not global_config.is_configured():
            typer.echo("No configuration found. Run 'diffscribe config init' to set up.")
            return

        config = global_config.load_global_config()
        credentials = global_config.load_credentials()
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error reading configuration: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("Current diffscribe configuration (~/.diffscribe/config.yaml):")
    typer.echo()
    typer.echo(f"  Provider: {config.get('provider', 'not set')}")
    typer.echo(f"  Model: {config.get('model', 'not set')}")
    typer.echo(f"  Language: {config.get('language', 'not set')}")
    typer.echo(f"  Max Tokens: {config.get('max_tokens', 'not set')}")
    typer.echo(f"  Temperature: {config.get('temperature', 'not set')}")

    ollama_url = config.get("ollama", {}).get("base_url")
    if ollama_url:
        typer.echo(f"  Ollama URL: {ollama_url}")

    retry = config.get("retry", {})
    if retry:
        typer.echo(
            f"  Retry: {retry.get('max_attempts', 'default')} attempts, "
            f"{retry.get('base_backoff', 'default')}s base backoff"
        )

    scope_markers = config.get("scope_markers", {})
    if scope_markers:
        typer.echo()
        typer.echo("  Scope Markers:")
        for marker, label in scope_markers.items():
            typer.echo(f"    - {marker} -> {label}")

    typer.echo()

    # Check for API key
    try:
        provider = LLMProvider(config.get("provider"))
    except ValueError:
        return
    env_var = API_KEY_ENV_VARS.get(provider)
    if env_var is None:
        typer.echo(f"  API Key: not required for {provider.value}")
        return

    api_key = credentials.get(env_var)
    if api_key:
        typer.echo(f"  API Key ({env_var}): {_mask(api_key)}")
    else:
        typer.echo(f"  API Key ({env_var}): not set")


@config_app.command("set-key")
def config_set_key(
    provider: str = typer.Argument(
        ...,
        help=f"Provider name ({VALID_PROVIDERS})"
    )
) -> None:
    """Set or update an API key for a provider."""
    llm_provider = _parse_provider(provider)
    env_var = API_KEY_ENV_VARS.get(llm_provider)
    if env_var is None:
        typer.echo(f"{llm_provider.value} does not use an API key.")
        return

    typer.echo(f"Setting API key for {llm_provider.value}")
    api_key = typer.prompt(f"Enter your {llm_provider.value} API key", hide_input=True)

    try:
        global_config.ensure_global_config_dir()
        global_config.save_credential(env_var, api_key)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ API key saved for {llm_provider.value}")


@config_app.command("set-provider")
def config_set_provider(
    provider: str = typer.Argument(
        ...,
        help=f"Provider name ({VALID_PROVIDERS})"
    ),
    model: str = typer.Option(
        None,
        "--model",
        "-m",
        help="Model name (optional, will prompt if not provided)"
    )
) -> None:
    """Set the active LLM provider and model."""
    llm_provider = _parse_provider(provider)
    models = AVAILABLE_MODELS[llm_provider]

    # Get model
    if not model:
        typer.echo(f"Available models for {llm_provider.value}:")
        for i, m in enumerate(models, 1):
            typer.echo(f"  {i}. {m}")

        model_choice = typer.prompt(f"Select a model (1-{len(models)})", type=int, default=1)
        if model_choice < 1 or model_choice > len(models):
            typer.echo("Invalid choice. Aborting.", err=True)
            raise typer.Exit(1)

        model = models[model_choice - 1]
    elif model not in models:
        typer.echo(f"Warning: {model} is not in the list of known models for {llm_provider.value}")
        proceed = typer.confirm("Continue anyway?", default=False)
        if not proceed:
            raise typer.Exit(0)

    try:
        global_config.set_provider_and_model(llm_provider, model)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ Provider set to: {llm_provider.value}")
    typer.echo(f"✓ Model set to: {model}")


@config_app.command("set-language")
def config_set_language(
    code: str = typer.Argument(
        ...,
        help=f"Language code ({', '.join(LANGUAGE_PROFILES)})"
    )
) -> None:
    """Set the language commit descriptions are written in."""
    try:
        profile = get_language_profile(code)
    except ValueError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)

    try:
        global_config.set_language(profile.code)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ Language set to: {profile.name} ({profile.code})")


@config_app.command("list-models")
def config_list_models(
    provider: str = typer.Argument(
        None,
        help="Provider name (optional, shows all if not provided)"
    )
) -> None:
    """List available models for a provider (or all providers)."""
    providers = [_parse_provider(provider)] if provider else list(LLMProvider)

    for llm_provider in providers:
        typer.echo(f"{llm_provider.value}:")
        for model in AVAILABLE_MODELS[llm_provider]:
            typer.echo(f"  • {model}")
        typer.echo()
