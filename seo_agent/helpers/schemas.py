"""Shared schemas for the response parsers.

- Parse results for LLM output
- Tagged typed parse results (value or fallback, never None)
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ParseResult(BaseModel):
    """JSON parse result."""

    success: bool
    data: dict[str, Any] | None = None
    raw: str = ""
    format_detected: str = ""  # "json", "markdown", "unknown"
    fixes_applied: list[str] = Field(default_factory=list)


@dataclass(frozen=True)
class Parsed(Generic[T]):
    """Typed parse outcome.

    ``value`` is always usable; ``is_fallback`` tells whether it was parsed
    from the model output or built from upstream data.
    """

    value: T
    is_fallback: bool
    raw: str = ""

    @classmethod
    def ok(cls, value: T, raw: str = "") -> "Parsed[T]":
        return cls(value=value, is_fallback=False, raw=raw)

    @classmethod
    def fallback(cls, value: T, raw: str = "") -> "Parsed[T]":
        return cls(value=value, is_fallback=True, raw=raw)
