"""OpenAI GPT provider implementation."""

from openai import OpenAI

from gitsage import config
from gitsage.config import API_KEY_ENV_VARS, LLMProvider
from gitsage.llm.base import BaseLLMProvider, RawLLMResult
from gitsage.llm.exceptions import LLMError, MissingAPIKeyError


class OpenAIProvider(BaseLLMProvider):
    """OpenAI GPT LLM provider."""

    def __init__(self, model: str | None = None):
        """Initialize the OpenAI provider.

        Args:
            model: The model to use. Defaults to gpt-4o.
        """
        self.model = model or "gpt-4o"
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.OPENAI]

    def get_api_key(self) -> str:
        """Get the OpenAI API key from environment or credentials file.

        Raises:
            MissingAPIKeyError: If OPENAI_API_KEY is not found.
        """
        return self._get_api_key_with_fallback(self.api_key_env_var, "OpenAI")

    def classify(self, messages: list[dict]) -> RawLLMResult:
        """Classify diff chunks using OpenAI GPT.

        Args:
            messages: The classification conversation.

        Returns:
            A RawLLMResult with the response text and token usage.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            LLMError: If the API call fails.
        """
        api_key = self.get_api_key()

        client = OpenAI(api_key=api_key)

        try:
            response = client.chat.completions.create(
                model=self.model,
                max_tokens=config.MAX_TOKENS,
                temperature=config.TEMPERATURE,
                messages=messages,
            )

            raw_response = response.choices[0].message.content or ""

            input_tokens = response.usage.prompt_tokens if response.usage else 0
            output_tokens = response.usage.completion_tokens if response.usage else 0

        except MissingAPIKeyError:
            raise
        except Exception as e:
            raise LLMError(f"OpenAI API call failed: {e}")

        return RawLLMResult(
            raw_response=raw_response,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
