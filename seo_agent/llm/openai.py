"""OpenAI API client implementation.

No fallback: never switches to another model or provider.
One attempt per call; retry policy belongs to the caller.
"""

import logging
import time
from collections.abc import AsyncIterator

from openai import (
    APIConnectionError,
    APIStatusError,
    AsyncOpenAI,
    AuthenticationError,
    OpenAIError,
    RateLimitError,
)

from .base import LLMInterface, Messages, normalize_messages
from .exceptions import (
    LLMAuthenticationError,
    LLMConfigurationError,
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
    LLMServiceError,
)
from .schemas import (
    LLMCallMetadata,
    LLMRequestConfig,
    LLMResponse,
    TokenUsage,
)

logger = logging.getLogger(__name__)


class OpenAIClient(LLMInterface):
    """OpenAI API client.

    Supported models: gpt-4o, gpt-4o-mini, gpt-4-turbo, ...
    """

    PROVIDER = "openai"
    DEFAULT_MODEL = "gpt-4o"

    def __init__(
        self,
        api_key: str | None,
        model: str | None = None,
        timeout: float = 60.0,
    ) -> None:
        """Initialize.

        Args:
            api_key: OpenAI API key
            model: Model name (defaults to DEFAULT_MODEL)
            timeout: Request timeout in seconds

        Raises:
            LLMConfigurationError: API key missing
        """
        if not api_key:
            raise LLMConfigurationError(
                message="OPENAI_API_KEY is not set",
                provider=self.PROVIDER,
                missing_config=["OPENAI_API_KEY"],
            )

        # SDK-level retries disabled
        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model or self.DEFAULT_MODEL

    @property
    def provider_name(self) -> str:
        return self.PROVIDER

    @property
    def default_model(self) -> str:
        return self.DEFAULT_MODEL

    def _build_messages(self, messages: Messages, system_prompt: str) -> list[dict[str, str]]:
        normalized = normalize_messages(messages)
        if not system_prompt:
            return normalized
        return [{"role": "system", "content": system_prompt}, *normalized]

    async def complete(
        self,
        messages: Messages,
        system_prompt: str,
        config: LLMRequestConfig | None = None,
        metadata: LLMCallMetadata | None = None,
    ) -> LLMResponse:
        config = config or LLMRequestConfig()
        full_messages = self._build_messages(messages, system_prompt)

        self._log_request("complete", self.model, metadata)
        start = time.perf_counter()

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=full_messages,  # type: ignore[arg-type]
                temperature=config.temperature,
                max_tokens=config.max_tokens,
            )
        except OpenAIError as e:
            converted = self._convert_exception(e)
            self._log_error("complete", converted, metadata)
            raise converted from e

        latency_ms = (time.perf_counter() - start) * 1000
        choice = response.choices[0]
        usage = response.usage

        result = LLMResponse(
            content=choice.message.content or "",
            token_usage=TokenUsage(
                input=usage.prompt_tokens if usage else 0,
                output=usage.completion_tokens if usage else 0,
            ),
            model=response.model,
            finish_reason=choice.finish_reason,
            provider=self.PROVIDER,
            latency_ms=latency_ms,
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
        config = config or LLMRequestConfig()
        full_messages = self._build_messages(messages, system_prompt)

        self._log_request("stream_complete", self.model, metadata)

        try:
            stream = await self.client.chat.completions.create(
                model=self.model,
                messages=full_messages,  # type: ignore[arg-type]
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                stream=True,
            )
        except OpenAIError as e:
            converted = self._convert_exception(e)
            self._log_error("stream_complete", converted, metadata)
            raise converted from e

        try:
            async for chunk in stream:
                if not chunk.choices:
                    continue
                text = chunk.choices[0].delta.content
                if text:
                    yield text
        except OpenAIError as e:
            converted = self._convert_exception(e)
            self._log_error("stream_complete", converted, metadata)
            raise converted from e
        finally:
            await stream.close()

    def _convert_exception(self, e: OpenAIError) -> LLMError:
        """Convert an SDK exception to the unified error family."""
        if isinstance(e, AuthenticationError):
            return LLMAuthenticationError(
                message=f"OpenAI API authentication failed: {e}",
                provider=self.PROVIDER,
                model=self.model,
                original_error=e,
                status_code=e.status_code,
            )
        if isinstance(e, RateLimitError):
            return LLMRateLimitError(
                message=f"OpenAI API rate limit exceeded: {e}",
                provider=self.PROVIDER,
                model=self.model,
                original_error=e,
                status_code=e.status_code,
            )
        # APITimeoutError is a subclass of APIConnectionError
        if isinstance(e, APIConnectionError):
            return LLMConnectionError(
                message=f"OpenAI API connection failed: {e}",
                provider=self.PROVIDER,
                model=self.model,
                original_error=e,
            )
        if isinstance(e, APIStatusError):
            return LLMServiceError(
                message=f"OpenAI API error: {e}",
                provider=self.PROVIDER,
                model=self.model,
                status_code=e.status_code,
                original_error=e,
            )
        return LLMServiceError(
            message=f"OpenAI API error: {e}",
            provider=self.PROVIDER,
            model=self.model,
            original_error=e,
        )
