"""Anthropic Claude API client implementation."""

import logging
import time
from collections.abc import AsyncIterator

from anthropic import (
    APIConnectionError,
    APIStatusError,
    AnthropicError,
    AsyncAnthropic,
    AuthenticationError,
    RateLimitError,
)
from anthropic.types import MessageParam

from .base import LLMInterface, Messages, normalize_messages
from .exceptions import (
    LLMAuthenticationError,
    LLMConfigurationError,
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
    LLMServiceError,
)
from .schemas import LLMCallMetadata, LLMRequestConfig, LLMResponse, TokenUsage

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class AnthropicClient(LLMInterface):
    """Anthropic Claude API client.

    Implements LLMInterface for Anthropic's Claude models.

    Important:
        - No fallback to other models is allowed
        - Exactly one attempt per call
        - All operations are logged
    """

    PROVIDER = "anthropic"

    def __init__(
        self,
        api_key: str | None,
        model: str | None = None,
        timeout: float = 60.0,
    ):
        """Initialize Anthropic client.

        Args:
            api_key: Anthropic API key.
            model: Model identifier to use. Defaults to DEFAULT_MODEL.
            timeout: Request timeout in seconds.

        Raises:
            LLMConfigurationError: If the API key is missing.
        """
        if not api_key:
            raise LLMConfigurationError(
                message="ANTHROPIC_API_KEY is not set",
                provider=self.PROVIDER,
                missing_config=["ANTHROPIC_API_KEY"],
            )

        self.client = AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model or DEFAULT_MODEL
        logger.info(f"AnthropicClient initialized with model={self.model}")

    @property
    def provider_name(self) -> str:
        return self.PROVIDER

    @property
    def default_model(self) -> str:
        return DEFAULT_MODEL

    async def complete(
        self,
        messages: Messages,
        system_prompt: str,
        config: LLMRequestConfig | None = None,
        metadata: LLMCallMetadata | None = None,
    ) -> LLMResponse:
        """Generate a text response from Claude.

        Raises:
            LLMError: Converted provider failure
        """
        config = config or LLMRequestConfig()
        system, anthropic_messages = self._convert_messages(messages, system_prompt)

        self._log_request("complete", self.model, metadata)
        start = time.perf_counter()

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=config.max_tokens,
                system=system,
                messages=anthropic_messages,
                temperature=config.temperature,
            )
        except AnthropicError as e:
            converted = self._convert_exception(e)
            self._log_error("complete", converted, metadata)
            raise converted from e

        content = "".join(block.text for block in response.content if block.type == "text")

        result = LLMResponse(
            content=content,
            token_usage=TokenUsage(
                input=response.usage.input_tokens,
                output=response.usage.output_tokens,
            ),
            model=response.model,
            finish_reason=response.stop_reason,
            provider=self.PROVIDER,
            latency_ms=(time.perf_counter() - start) * 1000,
        )
        self._log_response("complete", result, metadata)
        return result

    async def stream_complete(
        self,
        messages: Messages,
        system_prompt: str,
        config: LLMRequestConfig | None = None,
        metadata: LLMCallMetadata | None = None,
    ) -> AsyncIterator[str]:
        """Stream text fragments from Claude.

        The SDK stream context is exited when the generator finishes or is
        closed, which releases the HTTP response.
        """
        config = config or LLMRequestConfig()
        system, anthropic_messages = self._convert_messages(messages, system_prompt)

        self._log_request("stream_complete", self.model, metadata)

        try:
            async with self.client.messages.stream(
                model=self.model,
                max_tokens=config.max_tokens,
                system=system,
                messages=anthropic_messages,
                temperature=config.temperature,
            ) as stream:
                async for text in stream.text_stream:
                    if text:
                        yield text
        except AnthropicError as e:
            converted = self._convert_exception(e)
            self._log_error("stream_complete", converted, metadata)
            raise converted from e

    def _convert_messages(
        self,
        messages: Messages,
        system_prompt: str,
    ) -> tuple[str, list[MessageParam]]:
        """Convert standard message format to Anthropic format.

        System-role messages are appended to the system parameter, since
        Anthropic only accepts 'user' and 'assistant' turns.

        Returns:
            Tuple of (system text, messages in MessageParam format)
        """
        system_parts = [system_prompt] if system_prompt else []
        anthropic_messages: list[MessageParam] = []
        for msg in normalize_messages(messages):
            role = msg["role"]
            content = msg["content"]

            if role == "system":
                system_parts.append(content)
            elif role == "assistant":
                anthropic_messages.append({"role": "assistant", "content": content})
            else:
                anthropic_messages.append({"role": "user", "content": content})

        return "\n\n".join(system_parts), anthropic_messages

    def _convert_exception(self, e: AnthropicError) -> LLMError:
        if isinstance(e, AuthenticationError):
            return LLMAuthenticationError(
                f"Anthropic API authentication failed: {e}",
                self.PROVIDER,
                self.model,
                original_error=e,
                status_code=e.status_code,
            )
        if isinstance(e, RateLimitError):
            return LLMRateLimitError(
                f"Anthropic API rate limit exceeded: {e}",
                self.PROVIDER,
                self.model,
                original_error=e,
                status_code=e.status_code,
            )
        if isinstance(e, APIConnectionError):
            return LLMConnectionError(
                f"Anthropic API connection failed: {e}",
                self.PROVIDER,
                self.model,
                original_error=e,
            )
        if isinstance(e, APIStatusError):
            return LLMServiceError(
                f"Anthropic API error: {e}",
                self.PROVIDER,
                self.model,
                status_code=e.status_code,
                original_error=e,
            )
        return LLMServiceError(
            f"Anthropic API error: {e}",
            self.PROVIDER,
            self.model,
            original_error=e,
        )
