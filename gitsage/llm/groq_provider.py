"""Groq provider implementation."""

from groq import Groq

from gitsage import config
from gitsage.config import API_KEY_ENV_VARS, LLMProvider
from gitsage.llm.base import BaseLLMProvider, RawLLMResult
from gitsage.llm.exceptions import LLMError, MissingAPIKeyError


class GroqProvider(BaseLLMProvider):
    """Groq LLM provider (fast inference for open-source models)."""

    def __init__(self, model: str | None = None):
        """Initialize the Groq provider.

        Args:
            model: The model to use. Defaults to llama-3.3-70b-versatile.
        """
        self.model = model or "llama-3.3-70b-versatile"
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.GROQ]

    def get_api_key(self) -> str:
        """Get the Groq API key from environment or credentials file.

        Raises:
            MissingAPIKeyError: If GROQ_API_KEY is not found.
        """
        return self._get_api_key_with_fallback(self.api_key_env_var, "Groq")

    def classify(self, messages: list[dict]) -> RawLLMResult:
        """Classify diff chunks using Groq."""
        api_key = self.get_api_key()

        client = Groq(api_key=api_key)

        try:
            # OpenAI-compatible chat API
            response = client.chat.completions.create(
                model=self.model,
                max_tokens=config.MAX_TOKENS,
                temperature=config.TEMPERATURE,
                messages=messages,
            )

            raw_response = response.choices[0].message.content or ""

            input_tokens = response.usage.prompt_tokens
            output_tokens = response.usage.completion_tokens

        except MissingAPIKeyError:
            raise
        except Exception as e:
            raise LLMError(f"Groq API call failed: {e}")

        return RawLLMResult(
            raw_response=raw_response,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
