"""LLM provider module for gitsage.

This module provides the commit classifier on top of several LLM providers.
The active provider is configured in ~/.gitsage/config.yaml and loaded by
gitsage.config.load_config().
"""

from dotenv import load_dotenv
from pydantic import ValidationError

from gitsage import config, output
from gitsage.config import LLMProvider
from gitsage.llm.base import (
    CLASSIFIER_SYSTEM_PROMPT,
    END_OF_DIFF_SENTINEL,
    BaseLLMProvider,
    RawLLMResult,
    build_classifier_messages,
    parse_json_array,
)
from gitsage.llm.exceptions import JSONParseError, LLMError, MissingAPIKeyError
from gitsage.split.models import CommitGroup, validate_commit_groups

# Load environment variables from .env file
load_dotenv()


def get_provider(
    provider: LLMProvider | None = None,
    model: str | None = None,
) -> BaseLLMProvider:
    """Get an LLM provider instance.

    Args:
        provider: The provider to use. Defaults to the configured provider.
        model: The model to use. Defaults to the configured model.

    Returns:
        An instance of the appropriate LLM provider.

    Raises:
        ValueError: If the provider is not supported.
    """
    provider = provider or config.ACTIVE_PROVIDER
    model = model or config.ACTIVE_MODEL

    if provider == LLMProvider.OPENAI:
        from gitsage.llm.openai_provider import OpenAIProvider

        return OpenAIProvider(model=model)

    elif provider == LLMProvider.ANTHROPIC:
        from gitsage.llm.anthropic_provider import AnthropicProvider

        return AnthropicProvider(model=model)

    elif provider == LLMProvider.GROQ:
        from gitsage.llm.groq_provider import GroqProvider

        return GroqProvider(model=model)

    elif provider == LLMProvider.OPENROUTER:
        from gitsage.llm.openrouter_provider import OpenRouterProvider

        return OpenRouterProvider(model=model)

    else:
        raise ValueError(f"Unsupported provider: {provider}")


def classify_diff(
    chunks: list[str],
    provider: BaseLLMProvider | None = None,
) -> list[CommitGroup]:
    """Classify diff chunks into ordered commit groups.

    This is the classifier boundary of a split run. A failed API call, an
    unparseable reply or a reply that is not an array of valid
    {type, message, hunks} records all yield an empty list and a warning.

    Args:
        chunks: Diff chunks in original order.
        provider: Provider to use. Defaults to get_provider().

    Returns:
        Validated commit groups in classifier order, possibly empty.

    Raises:
        MissingAPIKeyError: If the provider's API key is not configured.
    """
    provider = provider or get_provider()
    messages = build_classifier_messages(chunks)

    try:
        result = provider.classify(messages)
        payload = parse_json_array(result.raw_response)
        return validate_commit_groups(payload)
    except MissingAPIKeyError:
        raise
    except LLMError as e:
        output.warn(f"Commit classification failed: {e}")
    except (ValidationError, ValueError) as e:
        output.warn(f"Classifier response has an unexpected shape: {e}")
    return []


# Export commonly used items
__all__ = [
    "BaseLLMProvider",
    "LLMError",
    "MissingAPIKeyError",
    "JSONParseError",
    "RawLLMResult",
    "CLASSIFIER_SYSTEM_PROMPT",
    "END_OF_DIFF_SENTINEL",
    "build_classifier_messages",
    "parse_json_array",
    "get_provider",
    "classify_diff",
]
