"""Base classes and shared utilities for LLM providers."""

import json
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass

from gitsage.llm.exceptions import JSONParseError, MissingAPIKeyError


@dataclass
class RawLLMResult:
    """Raw classifier response text plus token usage."""

    raw_response: str
    model: str
    input_tokens: int
    output_tokens: int


# Sent after the last diff chunk
END_OF_DIFF_SENTINEL = "END_OF_DIFF. Now generate structured commit messages for the full diff."

# System prompt for the classifier (shared across all providers)
CLASSIFIER_SYSTEM_PROMPT = """You are an expert software engineer splitting a git diff into atomic commits.
The diff arrives in several user messages, in order. Wait for the END_OF_DIFF marker before answering.

Then output ONLY a JSON array. Each element is one commit:
- "type": one of feat, fix, docs, style, refactor, perf, test, build, ci, chore, revert
- "message": imperative, concise description without the type prefix
- "hunks": array of strings, each the exact patch text of one file change taken
  from the diff, starting with its "diff --git a/<path> b/<path>" header

Rules:
- No markdown fences. No commentary. No extra keys.
- Every change in the diff belongs to exactly one commit.
- Group changes that belong together; keep unrelated changes apart.
- Order the commits so that each one builds on the previous ones."""


def build_classifier_messages(chunks: list[str]) -> list[dict]:
    """Build the chat messages for a classification request.

    The system prompt comes first, then each diff chunk in order as its own
    user message, then the end-of-diff sentinel. The sentinel is sent even
    when there are no chunks.

    Args:
        chunks: Diff chunks in original order.

    Returns:
        List of {"role", "content"} messages.
    """
    messages = [{"role": "system", "content": CLASSIFIER_SYSTEM_PROMPT}]
    messages.extend({"role": "user", "content": chunk} for chunk in chunks)
    messages.append({"role": "user", "content": END_OF_DIFF_SENTINEL})
    return messages


def parse_json_array(raw_response: str) -> list:
    """Parse the classifier response as a JSON array.

    Markdown fences and any prose around the outermost [...] are dropped.

    Args:
        raw_response: The raw text response from the LLM.

    Returns:
        The parsed JSON array.

    Raises:
        JSONParseError: If parsing fails or the value is not an array.
    """
    cleaned = raw_response.strip()

    # Remove markdown code fences if the model included them despite instructions
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        # Fall back to the outermost [...] when there is extra content
        first_bracket = cleaned.find("[")
        last_bracket = cleaned.rfind("]")
        if first_bracket != -1 and last_bracket > first_bracket:
            cleaned = cleaned[first_bracket:last_bracket + 1]
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise JSONParseError(
                f"Failed to parse LLM response as JSON.\n"
                f"Error: {e}\n"
                f"Raw response:\n{raw_response}"
            )

    if not isinstance(parsed, list):
        raise JSONParseError(
            f"Expected a JSON array, got {type(parsed).__name__}.\n"
            f"Raw response:\n{raw_response}"
        )
    return parsed


def split_system_message(messages: list[dict]) -> tuple[str, list[dict]]:
    """Separate system content from the conversation messages.

    For APIs that take the system prompt as its own parameter.

    Returns:
        Tuple of (system text, remaining messages).
    """
    system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
    rest = [m for m in messages if m["role"] != "system"]
    return system, rest


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def classify(self, messages: list[dict]) -> RawLLMResult:
        """Send a classification conversation and return the raw reply.

        Args:
            messages: Messages from build_classifier_messages().

        Returns:
            A RawLLMResult with the response text and token usage.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            LLMError: If the API call fails.
        """
        pass

    @abstractmethod
    def get_api_key(self) -> str:
        """Get the API key from environment or credentials file.

        Checks in order:
        1. Environment variable (including a loaded .env file)
        2. ~/.gitsage/credentials file

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If the API key is not found.
        """
        pass

    def _get_api_key_with_fallback(self, env_var_name: str, provider_name: str) -> str:
        """Helper to get API key with fallback to credentials file.

        Args:
            env_var_name: Environment variable name to check.
            provider_name: Human-readable provider name for error messages.

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If the API key is not found.
        """
        api_key = os.getenv(env_var_name)
        if api_key:
            return api_key

        from gitsage.global_config import GlobalConfigError, get_credential

        try:
            api_key = get_credential(env_var_name)
        except GlobalConfigError:
            api_key = None
        if api_key:
            return api_key

        raise MissingAPIKeyError(
            f"{provider_name} API key not found. Set it using:\n"
            f"  1. Environment variable: export {env_var_name}=your_key_here\n"
            f"  2. Run: gitsage config set-key {provider_name.lower()}\n"
            f"  3. Manually add to ~/.gitsage/credentials"
        )
