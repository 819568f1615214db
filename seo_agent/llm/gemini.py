"""Gemini API client

LLM client built on the Google Gemini API (google-genai SDK).
Gemini is driven as a single-prompt backend: system text and user messages
are flattened into one prompt.

No fallback:
- Never switches to another model
- One attempt per call
"""

import logging
import time
from collections.abc import AsyncIterator
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .base import LLMInterface, Messages, flatten_prompt
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


class GeminiClient(LLMInterface):
    """Gemini API client

    Supported models:
    - gemini-2.5-pro
    - gemini-2.5-flash
    - gemini-2.0-flash
    etc.
    """

    PROVIDER_NAME = "gemini"
    DEFAULT_MODEL = "gemini-2.5-flash"

    def __init__(
        self,
        api_key: str | None,
        model: str | None = None,
        timeout: float = 60.0,
    ) -> None:
        """Initialize

        Args:
            api_key: Gemini API key
            model: Model ID
            timeout: Timeout in seconds

        Raises:
            LLMConfigurationError: API key missing
        """
        if not api_key:
            raise LLMConfigurationError(
                message="Gemini API key is required. Set GEMINI_API_KEY or GOOGLE_AI_API_KEY.",
                provider=self.PROVIDER_NAME,
                missing_config=["GEMINI_API_KEY"],
            )

        self._model = model or self.DEFAULT_MODEL
        self._timeout = timeout
        self._client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )

    @property
    def provider_name(self) -> str:
        return self.PROVIDER_NAME

    @property
    def default_model(self) -> str:
        return self.DEFAULT_MODEL

    @property
    def model(self) -> str:
        return self._model

    def _build_generation_config(self, config: LLMRequestConfig) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=config.temperature,
            max_output_tokens=config.max_tokens,
        )

    async def complete(
        self,
        messages: Messages,
        system_prompt: str,
        config: LLMRequestConfig | None = None,
        metadata: LLMCallMetadata | None = None,
    ) -> LLMResponse:
        config = config or LLMRequestConfig()
        prompt = flatten_prompt(system_prompt, messages)

        self._log_request("complete", self._model, metadata)
        start = time.perf_counter()

        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=self._build_generation_config(config),
            )
        except (genai_errors.APIError, httpx.HTTPError) as e:
            converted = self._convert_exception(e)
            self._log_error("complete", converted, metadata)
            raise converted from e

        result = self._parse_response(response, (time.perf_counter() - start) * 1000)
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
        prompt = flatten_prompt(system_prompt, messages)

        self._log_request("stream_complete", self._model, metadata)

        stream = None
        try:
            stream = await self._client.aio.models.generate_content_stream(
                model=self._model,
                contents=prompt,
                config=self._build_generation_config(config),
            )
            async for chunk in stream:
                text = chunk.text
                if text:
                    yield text
        except (genai_errors.APIError, httpx.HTTPError) as e:
            converted = self._convert_exception(e)
            self._log_error("stream_complete", converted, metadata)
            raise converted from e
        finally:
            if stream is not None and hasattr(stream, "aclose"):
                await stream.aclose()

    def _parse_response(self, response: Any, latency_ms: float) -> LLMResponse:
        """Parse the SDK response"""
        text = response.text or ""

        finish_reason = None
        if response.candidates:
            candidate = response.candidates[0]
            if getattr(candidate, "finish_reason", None) is not None:
                finish_reason = str(candidate.finish_reason)

        usage_metadata = getattr(response, "usage_metadata", None)
        if usage_metadata:
            input_tokens = getattr(usage_metadata, "prompt_token_count", 0) or 0
            output_tokens = getattr(usage_metadata, "candidates_token_count", 0) or 0
        else:
            input_tokens = 0
            output_tokens = 0

        return LLMResponse(
            content=text,
            token_usage=TokenUsage(input=input_tokens, output=output_tokens),
            model=self._model,
            finish_reason=finish_reason,
            provider=self.PROVIDER_NAME,
            latency_ms=latency_ms,
        )

    def _convert_exception(self, e: Exception) -> LLMError:
        """Convert an exception to the unified format"""
        if isinstance(e, httpx.HTTPError):
            return LLMConnectionError(
                message=f"Gemini API connection failed: {e}",
                provider=self.PROVIDER_NAME,
                model=self._model,
                original_error=e,
            )

        status = getattr(e, "code", None)
        if status in (401, 403):
            return LLMAuthenticationError(
                message=f"Authentication failed: {e}",
                provider=self.PROVIDER_NAME,
                model=self._model,
                original_error=e,
                status_code=status,
            )
        if status == 429:
            return LLMRateLimitError(
                message=f"Rate limit exceeded: {e}",
                provider=self.PROVIDER_NAME,
                model=self._model,
                original_error=e,
                status_code=status,
            )
        return LLMServiceError(
            message=f"Gemini API error: {e}",
            provider=self.PROVIDER_NAME,
            model=self._model,
            status_code=status if isinstance(status, int) else None,
            original_error=e,
        )
