"""LLM schemas

Common schemas for LLM responses, messages and request settings.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class LLMProvider(str, Enum):
    """Selectable generation backends (first member is the default)."""

    OPENAI = "openai"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"

    @classmethod
    def default(cls) -> "LLMProvider":
        return next(iter(cls))


class TokenUsage(BaseModel):
    """Token usage"""

    model_config = ConfigDict(frozen=True)

    input: int = Field(..., ge=0, description="Input tokens")
    output: int = Field(..., ge=0, description="Output tokens")

    @property
    def total(self) -> int:
        """Total tokens"""
        return self.input + self.output


class LLMResponse(BaseModel):
    """LLM response

    Common response shape for every provider.
    """

    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Generated text")
    token_usage: TokenUsage = Field(..., description="Token usage")
    model: str = Field(..., description="Model ID used")
    finish_reason: str | None = Field(
        default=None,
        description="Finish reason (stop, length, content_filter, ...)",
    )
    created_at: datetime = Field(
        default_factory=datetime.now,
        description="Response timestamp",
    )
    provider: str = Field(..., description="Provider name")
    latency_ms: float | None = Field(
        default=None,
        ge=0,
        description="Latency in milliseconds",
    )


class LLMMessage(BaseModel):
    """LLM message

    One role-tagged message of a request.
    """

    model_config = ConfigDict(frozen=True)

    role: str = Field(..., pattern="^(system|user|assistant)$", description="Role")
    content: str = Field(..., description="Message content")


class LLMRequestConfig(BaseModel):
    """LLM request settings

    Passed through to the provider unchanged.
    """

    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature (0.0-2.0)",
    )
    max_tokens: int = Field(
        default=4096,
        ge=1,
        le=128000,
        description="Maximum output tokens",
    )


class LLMCallMetadata(BaseModel):
    """LLM call metadata

    Tracing information for logs.
    """

    run_id: str | None = Field(default=None, description="Pipeline run ID")
    phase: str | None = Field(default=None, description="Pipeline phase")
