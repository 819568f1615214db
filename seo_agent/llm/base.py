"""Common LLM interface.

Abstract base class implemented by every generation backend.
No fallback: a failing provider is never swapped for another model or
provider, and adapters do not retry.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING

from .schemas import (
    LLMCallMetadata,
    LLMMessage,
    LLMProvider,
    LLMRequestConfig,
    LLMResponse,
)

if TYPE_CHECKING:
    from seo_agent.config import Settings

logger = logging.getLogger(__name__)

PROMPT_DELIMITER = "\n\n---\n\n"

Messages = Sequence[dict[str, str]] | Sequence[LLMMessage]


def normalize_messages(messages: Messages) -> list[dict[str, str]]:
    """Convert LLMMessage objects to role/content dicts."""
    normalized = []
    for msg in messages:
        if isinstance(msg, LLMMessage):
            normalized.append({"role": msg.role, "content": msg.content})
        else:
            normalized.append({"role": msg.get("role", "user"), "content": msg.get("content", "")})
    return normalized


def flatten_prompt(system_prompt: str, messages: Messages) -> str:
    """Flatten system and user text into one prompt for single-prompt backends.

    System text (the system prompt, then any system-role messages) comes first,
    followed by PROMPT_DELIMITER and the user messages. Assistant messages are
    dropped.
    """
    system_parts = [system_prompt] if system_prompt else []
    user_parts = []
    for msg in normalize_messages(messages):
        if msg["role"] == "system":
            system_parts.append(msg["content"])
        elif msg["role"] == "user":
            user_parts.append(msg["content"])

    system_text = "\n\n".join(part for part in system_parts if part)
    user_text = "\n\n".join(user_parts)
    if not system_text:
        return user_text
    return f"{system_text}{PROMPT_DELIMITER}{user_text}"


class LLMInterface(ABC):
    """Common LLM interface

    Implemented by every provider (OpenAI, Gemini, Anthropic).

    Design rules:
    - No fallback to another model/provider
    - No retries inside the adapter
    - Unified errors: every SDK exception surfaces as an LLMError subclass
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider name"""
        ...

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Default model ID"""
        ...

    @abstractmethod
    async def complete(
        self,
        messages: Messages,
        system_prompt: str,
        config: LLMRequestConfig | None = None,
        metadata: LLMCallMetadata | None = None,
    ) -> LLMResponse:
        """Single blocking text generation.

        Args:
            messages: Conversation (role/content dicts or LLMMessage)
            system_prompt: System instruction
            config: Request settings (temperature, max_tokens)
            metadata: Tracing metadata (run_id, phase)

        Returns:
            LLMResponse: Generated text and token usage

        Raises:
            LLMAuthenticationError: Rejected credentials
            LLMRateLimitError: Provider throttling
            LLMConnectionError: Transport failure or timeout
            LLMServiceError: Any other provider error
        """
        ...

    @abstractmethod
    def stream_complete(
        self,
        messages: Messages,
        system_prompt: str,
        config: LLMRequestConfig | None = None,
        metadata: LLMCallMetadata | None = None,
    ) -> AsyncIterator[str]:
        """Incremental text generation.

        Returns a finite, non-restartable async iterator of text fragments
        whose concatenation is the generated text. Closing the iterator early
        releases the underlying provider stream.

        Raises:
            Same errors as complete(), raised while iterating
        """
        ...

    def _log_request(
        self,
        method: str,
        model: str,
        metadata: LLMCallMetadata | None,
    ) -> None:
        """Request log"""
        logger.info(
            "LLM request",
            extra={
                "provider": self.provider_name,
                "method": method,
                "model": model,
                "run_id": metadata.run_id if metadata else None,
                "phase": metadata.phase if metadata else None,
            },
        )

    def _log_response(
        self,
        method: str,
        response: LLMResponse,
        metadata: LLMCallMetadata | None,
    ) -> None:
        """Response log"""
        logger.info(
            "LLM response",
            extra={
                "provider": self.provider_name,
                "method": method,
                "model": response.model,
                "input_tokens": response.token_usage.input,
                "output_tokens": response.token_usage.output,
                "latency_ms": response.latency_ms,
                "run_id": metadata.run_id if metadata else None,
                "phase": metadata.phase if metadata else None,
            },
        )

    def _log_error(
        self,
        method: str,
        error: Exception,
        metadata: LLMCallMetadata | None,
    ) -> None:
        """Error log"""
        from .exceptions import LLMError

        error_info = {}
        if isinstance(error, LLMError):
            error_info = error.to_dict()

        logger.error(
            "LLM error",
            extra={
                "provider": self.provider_name,
                "method": method,
                "error_type": type(error).__name__,
                "error_message": str(error),
                "error_info": error_info,
                "run_id": metadata.run_id if metadata else None,
                "phase": metadata.phase if metadata else None,
            },
        )


def get_llm_client(
    provider: str | LLMProvider,
    settings: "Settings",
    timeout: float | None = None,
) -> LLMInterface:
    """Build the LLM client for a provider from explicit settings.

    Args:
        provider: Provider name ("openai", "gemini", "anthropic")
        settings: Application settings holding credentials and default models
        timeout: Request timeout in seconds (defaults to settings.request_timeout)

    Returns:
        LLMInterface: Client instance

    Raises:
        ValueError: Unknown provider
        LLMConfigurationError: Missing API key
    """
    provider = LLMProvider(provider.lower() if isinstance(provider, str) else provider)
    service = settings.llm_settings(provider.value)
    timeout = timeout if timeout is not None else settings.request_timeout

    if provider == LLMProvider.GEMINI:
        from .gemini import GeminiClient

        return GeminiClient(api_key=service.api_key, model=service.default_model, timeout=timeout)
    if provider == LLMProvider.ANTHROPIC:
        from .anthropic import AnthropicClient

        return AnthropicClient(api_key=service.api_key, model=service.default_model, timeout=timeout)

    from .openai import OpenAIClient

    return OpenAIClient(api_key=service.api_key, model=service.default_model, timeout=timeout)
