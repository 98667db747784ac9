"""LLM completion client for statement extraction."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from litellm import acompletion

from backend.config import Settings

logger = logging.getLogger(__name__)


class CompletionBackendFailure(Exception):
    """Raised when the completion endpoint call fails (network, auth, rate limit)."""

    pass


@dataclass
class Completion:
    """Text returned by the completion endpoint."""

    content: str
    finish_reason: Optional[str] = None
    parsed: Optional[dict] = None  # Set when the backend returned structured output

    @property
    def truncated(self) -> bool:
        return self.finish_reason == "length"


class LLMCompletionBackend:
    """Single-attempt chat completion through litellm."""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def model_name(self) -> str:
        """Get the appropriate model name based on provider."""
        if self.settings.llm_provider == "openai":
            return self.settings.openai_model
        else:
            return f"ollama/{self.settings.ollama_model}"

    @property
    def api_base(self) -> Optional[str]:
        """Get the API base URL for Ollama."""
        if self.settings.llm_provider == "ollama":
            return self.settings.ollama_host
        return None

    async def complete(
        self, prompt: str, temperature: Optional[float] = None, max_tokens: Optional[int] = None
    ) -> Completion:
        """
        Send one user message and return the model's reply.

        Args:
            prompt: The prompt to send to the LLM
            temperature: Sampling temperature (defaults to settings)
            max_tokens: Output token budget (defaults to settings)

        Returns:
            Completion with content and finish reason

        Raises:
            CompletionBackendFailure: If the call fails for any reason
        """
        kwargs: dict[str, Any] = {
            "model": self.model_name,
            "messages": [{"role": "user", "content": prompt}],
            "api_base": self.api_base,
            "api_key": self.settings.openai_api_key if self.settings.llm_provider == "openai" else None,
            "temperature": self.settings.llm_temperature if temperature is None else temperature,
            "max_tokens": self.settings.llm_max_tokens if max_tokens is None else max_tokens,
        }
        if self.settings.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.info(f"Calling {self.model_name} ({len(prompt)} prompt chars, max_tokens={kwargs['max_tokens']})")
        try:
            response = await acompletion(**kwargs)
        except Exception as e:
            logger.error(f"LLM call failed: {e}")
            raise CompletionBackendFailure(f"LLM call failed: {e}") from e

        try:
            choice = response.choices[0]
            message = choice.message
        except (AttributeError, IndexError) as e:
            raise CompletionBackendFailure(f"LLM returned no choices: {e}") from e

        content = message.content or ""
        parsed = getattr(message, "parsed", None)
        finish_reason = getattr(choice, "finish_reason", None)
        logger.info(f"Got LLM response ({len(content)} chars, finish_reason={finish_reason})")

        return Completion(
            content=content,
            finish_reason=finish_reason,
            parsed=parsed if isinstance(parsed, dict) else None,
        )
