"""LLM client module

Provides one client per text-generation provider (OpenAI, Gemini, Anthropic).

Usage:
    from seo_agent.llm import get_llm_client

    client = get_llm_client("openai", settings)
    response = await client.complete(
        messages=[{"role": "user", "content": "Hello"}],
        system_prompt="You are a helpful assistant.",
    )
"""

from .anthropic import AnthropicClient
from .base import PROMPT_DELIMITER, LLMInterface, flatten_prompt, get_llm_client, normalize_messages
from .exceptions import (
    LLMAuthenticationError,
    LLMConfigurationError,
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
    LLMServiceError,
)
from .gemini import GeminiClient
from .openai import OpenAIClient
from .schemas import (
    LLMCallMetadata,
    LLMMessage,
    LLMProvider,
    LLMRequestConfig,
    LLMResponse,
    TokenUsage,
)

__all__ = [
    # Base
    "LLMInterface",
    "PROMPT_DELIMITER",
    "flatten_prompt",
    "get_llm_client",
    "normalize_messages",
    # Clients
    "AnthropicClient",
    "GeminiClient",
    "OpenAIClient",
    # Schemas
    "LLMCallMetadata",
    "LLMMessage",
    "LLMProvider",
    "LLMRequestConfig",
    "LLMResponse",
    "TokenUsage",
    # Exceptions
    "LLMAuthenticationError",
    "LLMConfigurationError",
    "LLMConnectionError",
    "LLMError",
    "LLMRateLimitError",
    "LLMServiceError",
]
