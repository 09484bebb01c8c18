"""Global configuration management for gitsage.

Handles user-level configuration stored in ~/.gitsage/:
- config.yaml: Provider, model and split settings
- credentials: API keys for LLM providers
"""

import os
import stat
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from gitsage.config import (
    DEFAULT_DEPENDENCY_MANIFESTS,
    DEFAULT_MAX_CHUNK_LENGTH,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_PROVIDER,
    DEFAULT_STAGING_STRATEGY,
    DEFAULT_TEMPERATURE,
    LLMProvider,
)

STAGING_STRATEGIES = ("files", "patch")


class GlobalConfigError(Exception):
    """Raised when there's an error with global configuration."""

    pass


_CONFIG_DIR = Path.home() / ".gitsage"


def get_global_config_dir() -> Path:
    """Get the global gitsage configuration directory.

    Returns:
        Path to ~/.gitsage/
    """
    return _CONFIG_DIR


def ensure_global_config_dir() -> Path:
    """Ensure the global config directory exists."""
    config_dir = get_global_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file_path() -> Path:
    return get_global_config_dir() / "config.yaml"


def get_credentials_file_path() -> Path:
    return get_global_config_dir() / "credentials"


def load_global_config() -> Dict[str, Any]:
    """Load global configuration from ~/.gitsage/config.yaml.

    Returns:
        Dictionary with configuration values. Empty dict if file doesn't exist.

    Raises:
        GlobalConfigError: If the file cannot be read or is not a mapping.
    """
    config_file = get_config_file_path()

    if not config_file.exists():
        return {}

    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to load config from {config_file}: {e}")

    if not isinstance(config, dict):
        raise GlobalConfigError(f"Config file {config_file} must contain a mapping.")
    return config


def save_global_config(config: Dict[str, Any]) -> None:
    """Save global configuration to ~/.gitsage/config.yaml.

    Args:
        config: Configuration dictionary to save.
    """
    ensure_global_config_dir()
    config_file = get_config_file_path()

    try:
        with open(config_file, "w") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to save config to {config_file}: {e}")


def _parse_credentials(lines) -> Dict[str, str]:
    credentials = {}
    for line in lines:
        line = line.strip()
        # Skip empty lines and comments
        if not line or line.startswith("#"):
            continue
        if "=" in line:
            key, value = line.split("=", 1)
            credentials[key.strip()] = value.strip()
    return credentials


def load_credentials() -> Dict[str, str]:
    """Load API keys from ~/.gitsage/credentials.

    Returns:
        Dictionary mapping environment variable names to API keys.
    """
    credentials_file = get_credentials_file_path()

    if not credentials_file.exists():
        return {}

    try:
        with open(credentials_file, "r") as f:
            return _parse_credentials(f)
    except OSError as e:
        raise GlobalConfigError(f"Failed to load credentials from {credentials_file}: {e}")


def save_credential(provider_key: str, api_key: str) -> None:
    """Save or update an API key in the credentials file.

    The file is written with owner-only read/write permissions.

    Args:
        provider_key: Environment variable name (e.g., "OPENAI_API_KEY")
        api_key: The API key value.
    """
    ensure_global_config_dir()
    credentials_file = get_credentials_file_path()

    existing_creds = load_credentials()
    existing_creds[provider_key] = api_key

    try:
        with open(credentials_file, "w") as f:
            f.write("# gitsage API credentials\n")
            f.write("# Format: PROVIDER_API_KEY=your_key_here\n\n")
            for key, value in existing_creds.items():
                f.write(f"{key}={value}\n")

        os.chmod(credentials_file, stat.S_IRUSR | stat.S_IWUSR)
    except OSError as e:
        raise GlobalConfigError(f"Failed to save credential: {e}")


def get_credential(provider_key: str) -> Optional[str]:
    """Get an API key from the credentials file, or None if absent."""
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
    return load_global_config().get("max_tokens")


def get_temperature() -> Optional[float]:
    return load_global_config().get("temperature")


def get_max_chunk_length() -> Optional[int]:
    """Get the classifier chunk size from global config.

    Returns:
        Positive chunk size, or None if not configured or invalid.
    """
    value = load_global_config().get("max_chunk_length")
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return None


def get_staging_strategy() -> Optional[str]:
    """Get the staging strategy ("files" or "patch") from global config.

    Returns:
        The strategy name, or None if not configured or unknown.
    """
    value = load_global_config().get("staging_strategy")
    if isinstance(value, str) and value.lower() in STAGING_STRATEGIES:
        return value.lower()
    return None


def set_staging_strategy(strategy: str) -> None:
    """Set the staging strategy in global config.

    Raises:
        GlobalConfigError: If the strategy is unknown.
    """
    if strategy not in STAGING_STRATEGIES:
        raise GlobalConfigError(
            f"Unknown staging strategy: {strategy}. Valid: {', '.join(STAGING_STRATEGIES)}"
        )
    config = load_global_config()
    config["staging_strategy"] = strategy
    save_global_config(config)


def get_dependency_manifests() -> Optional[list]:
    """Get the dependency manifest file names from global config.

    Returns:
        List of file names, or None if not configured.
    """
    value = load_global_config().get("dependency_manifests")
    if isinstance(value, list):
        return [str(name) for name in value]
    return None


def initialize_default_config() -> None:
    """Initialize config.yaml with default values if it doesn't exist."""
    if get_config_file_path().exists():
        return

    default_config = {
        "provider": DEFAULT_PROVIDER.value,
        "model": DEFAULT_MODEL,
        "max_tokens": DEFAULT_MAX_TOKENS,
        "temperature": DEFAULT_TEMPERATURE,
        "max_chunk_length": DEFAULT_MAX_CHUNK_LENGTH,
        "staging_strategy": DEFAULT_STAGING_STRATEGY,
        "dependency_manifests": list(DEFAULT_DEPENDENCY_MANIFESTS),
    }

    save_global_config(default_config)


def is_configured() -> bool:
    """Check if gitsage has been configured."""
    return get_config_file_path().exists()
