"""Anthropic Claude provider implementation."""

from anthropic import Anthropic

from gitsage import config
from gitsage.config import API_KEY_ENV_VARS, LLMProvider
from gitsage.llm.base import BaseLLMProvider, RawLLMResult, split_system_message
from gitsage.llm.exceptions import LLMError, MissingAPIKeyError


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude LLM provider."""

    def __init__(self, model: str | None = None):
        """Initialize the Anthropic provider.

        Args:
            model: The model to use. Defaults to claude-sonnet-4-20250514.
        """
        self.model = model or "claude-sonnet-4-20250514"
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.ANTHROPIC]

    def get_api_key(self) -> str:
        """Get the Anthropic API key from environment or credentials file.

        Raises:
            MissingAPIKeyError: If ANTHROPIC_API_KEY is not found.
        """
        return self._get_api_key_with_fallback(self.api_key_env_var, "Anthropic")

    def classify(self, messages: list[dict]) -> RawLLMResult:
        """Classify diff chunks using Anthropic Claude.

        The system prompt is passed separately, as the Messages API requires.

        Args:
            messages: The classification conversation.

        Returns:
            A RawLLMResult with the response text and token usage.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            LLMError: If the API call fails.
        """
        api_key = self.get_api_key()

        client = Anthropic(api_key=api_key)
        system, conversation = split_system_message(messages)

        try:
            message = client.messages.create(
                model=self.model,
                max_tokens=config.MAX_TOKENS,
                temperature=config.TEMPERATURE,
                system=system,
                messages=conversation,
            )

            raw_response = "".join(
                block.text for block in message.content if getattr(block, "type", "") == "text"
            )

            input_tokens = message.usage.input_tokens
            output_tokens = message.usage.output_tokens

        except MissingAPIKeyError:
            raise
        except Exception as e:
            raise LLMError(f"Anthropic API call failed: {e}")

        return RawLLMResult(
            raw_response=raw_response,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
