"""Fixtures for LLM adapter tests."""

from collections.abc import Iterable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest


class FakeAsyncStream:
    """Async-iterable stand-in for an SDK stream object.

    Items that are exceptions are raised when reached. ``close`` and
    ``aclose`` are AsyncMocks so tests can assert the stream was released.
    """

    def __init__(self, items: Iterable[Any]):
        self._items = list(items)
        self.close = AsyncMock()
        self.aclose = AsyncMock()

    def __aiter__(self) -> "FakeAsyncStream":
        return self

    async def __anext__(self) -> Any:
        if not self._items:
            raise StopAsyncIteration
        item = self._items.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def user_messages() -> list[dict[str, str]]:
    return [{"role": "user", "content": "Hello"}]


@pytest.fixture
def mock_genai_response() -> MagicMock:
    """Gemini generate_content response."""
    response = MagicMock()
    response.text = "Hello! I'm a helpful assistant."

    candidate = MagicMock()
    candidate.finish_reason = "STOP"
    response.candidates = [candidate]

    usage = MagicMock()
    usage.prompt_token_count = 10
    usage.candidates_token_count = 20
    response.usage_metadata = usage

    return response


@pytest.fixture
def fake_stream() -> type[FakeAsyncStream]:
    """Factory for SDK stream stand-ins."""
    return FakeAsyncStream
