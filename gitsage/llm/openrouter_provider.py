"""OpenRouter provider implementation.

OpenRouter provides access to many models through a single
OpenAI-compatible API.
"""

from openai import OpenAI

from gitsage import config
from gitsage.config import API_KEY_ENV_VARS, LLMProvider
from gitsage.llm.base import BaseLLMProvider, RawLLMResult
from gitsage.llm.exceptions import LLMError, MissingAPIKeyError

# OpenRouter API base URL
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterProvider(BaseLLMProvider):
    """OpenRouter LLM provider."""

    def __init__(self, model: str | None = None):
        """Initialize the OpenRouter provider.

        Args:
            model: The model to use, as provider/model-name (e.g., openai/gpt-4o).
                   Defaults to openai/gpt-4o.
        """
        self.model = model or "openai/gpt-4o"
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.OPENROUTER]

    def get_api_key(self) -> str:
        """Get the OpenRouter API key from environment or credentials file.

        Raises:
            MissingAPIKeyError: If OPENROUTER_API_KEY is not found.
        """
        return self._get_api_key_with_fallback(self.api_key_env_var, "OpenRouter")

    def classify(self, messages: list[dict]) -> RawLLMResult:
        """Classify diff chunks using OpenRouter.

        Args:
            messages: The classification conversation.

        Returns:
            A RawLLMResult with the response text and token usage.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            LLMError: If the API call fails.
        """
        api_key = self.get_api_key()

        # An OpenAI client pointed at OpenRouter
        client = OpenAI(
            api_key=api_key,
            base_url=OPENROUTER_BASE_URL,
        )

        try:
            response = client.chat.completions.create(
                model=self.model,
                max_tokens=config.MAX_TOKENS,
                temperature=config.TEMPERATURE,
                messages=messages,
                extra_headers={
                    "X-Title": "gitsage",
                },
            )

            raw_response = response.choices[0].message.content or ""

            input_tokens = response.usage.prompt_tokens if response.usage else 0
            output_tokens = response.usage.completion_tokens if response.usage else 0

        except MissingAPIKeyError:
            raise
        except Exception as e:
            raise LLMError(f"OpenRouter API call failed: {e}")

        return RawLLMResult(
            raw_response=raw_response,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
