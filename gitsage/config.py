"""Configuration for gitsage.

Configuration is loaded from ~/.gitsage/config.yaml
Use 'gitsage config' commands to modify settings.
"""

from enum import Enum


class LLMProvider(Enum):
    """Supported LLM providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GROQ = "groq"
    OPENROUTER = "openrouter"


# ============================================================
# DEFAULT FALLBACK VALUES
# ============================================================
# These are used only if ~/.gitsage/config.yaml doesn't exist

DEFAULT_PROVIDER = LLMProvider.OPENAI
DEFAULT_MODEL = "gpt-4o"
DEFAULT_MAX_TOKENS = 4096
DEFAULT_TEMPERATURE = 0.2

# Diff chunks sent to the classifier, in characters
DEFAULT_MAX_CHUNK_LENGTH = 4000

# "files" stages whole files named by a group's hunks, "patch" applies the hunks
DEFAULT_STAGING_STRATEGY = "files"

# Staged files with these names are committed first as "chore: update dependencies"
DEFAULT_DEPENDENCY_MANIFESTS = (
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "poetry.lock",
    "uv.lock",
    "Pipfile.lock",
    "requirements.txt",
    "Cargo.lock",
    "go.sum",
)


# ============================================================
# ACTIVE CONFIGURATION (loaded from global config)
# ============================================================

# Initially set to defaults - will be overridden by load_config()
ACTIVE_PROVIDER = DEFAULT_PROVIDER
ACTIVE_MODEL = DEFAULT_MODEL
MAX_TOKENS = DEFAULT_MAX_TOKENS
TEMPERATURE = DEFAULT_TEMPERATURE
MAX_CHUNK_LENGTH = DEFAULT_MAX_CHUNK_LENGTH
STAGING_STRATEGY = DEFAULT_STAGING_STRATEGY
DEPENDENCY_MANIFESTS = DEFAULT_DEPENDENCY_MANIFESTS


def load_config() -> None:
    """Load configuration from the global config file.

    This should be called by the CLI before running a split. Values missing
    from the file keep their defaults, and an unreadable file leaves all
    defaults in place.
    """
    global ACTIVE_PROVIDER, ACTIVE_MODEL, MAX_TOKENS, TEMPERATURE
    global MAX_CHUNK_LENGTH, STAGING_STRATEGY, DEPENDENCY_MANIFESTS

    # Import here to avoid circular dependency
    from gitsage import global_config

    try:
        provider = global_config.get_active_provider()
        model = global_config.get_active_model()
        max_tokens = global_config.get_max_tokens()
        temperature = global_config.get_temperature()
        max_chunk_length = global_config.get_max_chunk_length()
        staging_strategy = global_config.get_staging_strategy()
        manifests = global_config.get_dependency_manifests()
    except global_config.GlobalConfigError:
        return

    if provider:
        ACTIVE_PROVIDER = provider
        # A provider without a model uses that provider's first listed model
        ACTIVE_MODEL = model or AVAILABLE_MODELS[provider][0]
    elif model:
        ACTIVE_MODEL = model
    if max_tokens is not None:
        MAX_TOKENS = max_tokens
    if temperature is not None:
        TEMPERATURE = temperature
    if max_chunk_length is not None:
        MAX_CHUNK_LENGTH = max_chunk_length
    if staging_strategy:
        STAGING_STRATEGY = staging_strategy
    if manifests is not None:
        DEPENDENCY_MANIFESTS = tuple(manifests)


# ============================================================
# AVAILABLE MODELS PER PROVIDER
# ============================================================

AVAILABLE_MODELS = {
    LLMProvider.OPENAI: [
        "gpt-4o",
        "gpt-4o-mini",
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-4-turbo",
        "gpt-4",
    ],
    LLMProvider.ANTHROPIC: [
        "claude-sonnet-4-20250514",
        "claude-3-5-sonnet-latest",
        "claude-3-5-haiku-latest",
    ],
    LLMProvider.GROQ: [
        "llama-3.3-70b-versatile",
        "llama-3.1-8b-instant",
        "mixtral-8x7b-32768",
    ],
    LLMProvider.OPENROUTER: [
        "openai/gpt-4o",
        "anthropic/claude-sonnet-4",
        "meta-llama/llama-3.3-70b-instruct",
        "deepseek/deepseek-chat",
        "qwen/qwen-2.5-coder-32b-instruct",
    ],
}

# ============================================================
# API KEY ENVIRONMENT VARIABLES
# ============================================================

API_KEY_ENV_VARS = {
    LLMProvider.OPENAI: "OPENAI_API_KEY",
    LLMProvider.ANTHROPIC: "ANTHROPIC_API_KEY",
    LLMProvider.GROQ: "GROQ_API_KEY",
    LLMProvider.OPENROUTER: "OPENROUTER_API_KEY",
}


def get_api_key_env_var(provider: LLMProvider) -> str:
    """Get the environment variable name for the API key.

    Args:
        provider: The LLM provider.

    Returns:
        The environment variable name.
    """
    return API_KEY_ENV_VARS[provider]
