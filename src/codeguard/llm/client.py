"""Unified LLM client wrapper using LiteLLM.

Provides a consistent interface for multiple LLM providers. The client is a
thin transport: it sends one structured-output request and returns the raw
text. Parsing, validation and retries belong to the report requester.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import litellm

from codeguard.models.llm_config import LLMConfig

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Exception raised for LLM transport errors."""

    pass


class EmptyResponseError(LLMError):
    """Raised when the model returns no text."""

    pass


@dataclass
class LLMResponse:
    """Response from LLM completion.

    Attributes:
        content: Generated text content
        model: Model that generated the response
        usage: Token usage statistics
        finish_reason: Reason for completion (stop, length, etc.)
    """

    content: str
    model: str
    usage: dict[str, int] = field(default_factory=dict)
    finish_reason: str | None = None


class LLMClient:
    """Unified LLM client using LiteLLM.

    Supports multiple providers through a single interface:
    - Claude (Anthropic)
    - Gemini (Google)
    - Ollama (local)
    - Bedrock (AWS)

    Temperature is chosen per call by the requester, which lowers it on
    every retry.
    """

    def __init__(self, config: LLMConfig) -> None:
        """Initialize LLM client with configuration.

        Args:
            config: LLM configuration with provider, model, and credentials
        """
        self.config = config
        self._setup_provider()

    def _setup_provider(self) -> None:
        """Configure LiteLLM for the specified provider."""
        if self.config.api_key:
            if self.config.provider == "claude":
                litellm.anthropic_key = self.config.api_key
            elif self.config.provider == "gemini":
                litellm.google_api_key = self.config.api_key

    def _build_request(
        self,
        system_instruction: str,
        context_text: str,
        prompt_text: str,
        response_schema: dict[str, Any] | None,
        temperature: float,
    ) -> dict[str, Any]:
        """Assemble the keyword arguments for litellm.completion."""
        user_content = f"{context_text}\n\n{prompt_text}" if context_text else prompt_text

        request: dict[str, Any] = {
            "model": self.config.get_litellm_model_name(),
            "messages": [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": user_content},
            ],
            "temperature": temperature,
            "max_tokens": self.config.max_tokens,
            "api_key": self.config.api_key,
        }

        if response_schema is not None:
            request["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": str(response_schema.get("title", "report")),
                    "schema": response_schema,
                },
            }

        if self.config.provider == "ollama":
            request["api_base"] = self.config.api_base

        if self.config.timeout is not None:
            request["timeout"] = self.config.timeout

        return request

    def generate(
        self,
        system_instruction: str,
        context_text: str,
        prompt_text: str,
        response_schema: dict[str, Any] | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Request a structured report from the model.

        Args:
            system_instruction: Composed system instruction
            context_text: Concatenated source file context
            prompt_text: Analysis request prompt
            response_schema: JSON schema the response must follow
            temperature: Sampling temperature (config default if None)

        Returns:
            LLMResponse with the raw response text

        Raises:
            EmptyResponseError: If the model returned no text
            LLMError: If the completion fails
        """
        if temperature is None:
            temperature = self.config.temperature

        request = self._build_request(
            system_instruction, context_text, prompt_text, response_schema, temperature
        )

        logger.debug(
            "Calling %s (temperature=%.2f, %d instruction chars, %d user chars)",
            request["model"],
            temperature,
            len(system_instruction),
            len(request["messages"][1]["content"]),
        )

        try:
            response = litellm.completion(**request)
        except litellm.exceptions.AuthenticationError as e:
            raise LLMError(f"Authentication failed for {self.config.provider}: {e}") from e
        except litellm.exceptions.RateLimitError as e:
            raise LLMError(f"Rate limit exceeded for {self.config.provider}: {e}") from e
        except litellm.exceptions.Timeout as e:
            raise LLMError(f"Request to {self.config.provider} timed out: {e}") from e
        except litellm.exceptions.APIConnectionError as e:
            raise LLMError(f"Connection failed to {self.config.provider}: {e}") from e
        except Exception as e:
            raise LLMError(f"LLM completion failed: {e}") from e

        choice = response.choices[0]
        content = choice.message.content or ""

        usage: dict[str, int] = {}
        if getattr(response, "usage", None):
            usage = {
                "prompt_tokens": response.usage.prompt_tokens or 0,
                "completion_tokens": response.usage.completion_tokens or 0,
                "total_tokens": response.usage.total_tokens or 0,
            }

        if not content.strip():
            raise EmptyResponseError(f"Empty response from {self.config.provider}")

        return LLMResponse(
            content=content,
            model=response.model or self.config.model,
            usage=usage,
            finish_reason=choice.finish_reason,
        )


def create_client(config: LLMConfig) -> LLMClient:
    """Create an LLM client from configuration.

    Factory function for creating LLM clients.

    Args:
        config: LLM configuration

    Returns:
        Configured LLMClient instance

    Raises:
        ValueError: If LLM is disabled in config
    """
    if not config.enabled:
        raise ValueError("LLM is disabled in configuration")

    return LLMClient(config)
