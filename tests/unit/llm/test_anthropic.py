"""Unit tests for the Anthropic client."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from anthropic import APIConnectionError, AuthenticationError, RateLimitError

from seo_agent.core.errors import ErrorCategory
from seo_agent.llm import (
    AnthropicClient,
    LLMAuthenticationError,
    LLMConfigurationError,
    LLMConnectionError,
    LLMMessage,
    LLMRateLimitError,
)


@pytest.fixture
def client() -> AnthropicClient:
    return AnthropicClient(api_key="test-key")


@pytest.fixture
def mock_response() -> MagicMock:
    response = MagicMock()
    response.content = [
        MagicMock(type="text", text="Hello "),
        MagicMock(type="tool_use", text="ignored"),
        MagicMock(type="text", text="world"),
    ]
    response.usage = MagicMock(input_tokens=12, output_tokens=8)
    response.model = "claude-sonnet-4-20250514"
    response.stop_reason = "end_turn"
    return response


def _stream_manager(text_stream: object) -> MagicMock:
    """Async context manager returned by messages.stream()."""
    stream = MagicMock()
    stream.text_stream = text_stream
    manager = MagicMock()
    manager.__aenter__ = AsyncMock(return_value=stream)
    manager.__aexit__ = AsyncMock(return_value=False)
    return manager


class TestAnthropicClientInit:
    def test_init_without_key(self) -> None:
        with pytest.raises(LLMConfigurationError) as exc_info:
            AnthropicClient(api_key="")
        assert exc_info.value.missing_config == ["ANTHROPIC_API_KEY"]

    def test_default_model(self, client: AnthropicClient) -> None:
        assert client.model == "claude-sonnet-4-20250514"
        assert client.provider_name == "anthropic"
        assert client.client.max_retries == 0


class TestAnthropicClientComplete:
    """complete()."""

    @pytest.mark.asyncio
    async def test_complete_joins_text_blocks(
        self, client: AnthropicClient, mock_response: MagicMock, user_messages: list[dict[str, str]]
    ) -> None:
        with patch.object(client.client.messages, "create", new_callable=AsyncMock) as mock_create:
            mock_create.return_value = mock_response

            result = await client.complete(messages=user_messages, system_prompt="Be brief.")

            assert result.content == "Hello world"
            assert result.token_usage.total == 20
            assert result.finish_reason == "end_turn"
            assert mock_create.call_args.kwargs["system"] == "Be brief."

    @pytest.mark.asyncio
    async def test_system_messages_merged_into_system(
        self, client: AnthropicClient, mock_response: MagicMock
    ) -> None:
        """Anthropic accepts only user/assistant turns."""
        with patch.object(client.client.messages, "create", new_callable=AsyncMock) as mock_create:
            mock_create.return_value = mock_response

            await client.complete(
                messages=[
                    LLMMessage(role="system", content="Use markdown."),
                    LLMMessage(role="user", content="Write."),
                ],
                system_prompt="Be brief.",
            )

            kwargs = mock_create.call_args.kwargs
            assert kwargs["system"] == "Be brief.\n\nUse markdown."
            assert kwargs["messages"] == [{"role": "user", "content": "Write."}]

    @pytest.mark.asyncio
    async def test_rate_limit(self, client: AnthropicClient, user_messages: list[dict[str, str]]) -> None:
        with patch.object(client.client.messages, "create", new_callable=AsyncMock) as mock_create:
            mock_create.side_effect = RateLimitError(
                message="Too many requests",
                response=MagicMock(status_code=429),
                body=None,
            )

            with pytest.raises(LLMRateLimitError) as exc_info:
                await client.complete(messages=user_messages, system_prompt="")

            assert exc_info.value.is_retryable()
            assert mock_create.call_count == 1

    @pytest.mark.asyncio
    async def test_auth_error(self, client: AnthropicClient, user_messages: list[dict[str, str]]) -> None:
        with patch.object(client.client.messages, "create", new_callable=AsyncMock) as mock_create:
            mock_create.side_effect = AuthenticationError(
                message="invalid x-api-key",
                response=MagicMock(status_code=401),
                body=None,
            )

            with pytest.raises(LLMAuthenticationError) as exc_info:
                await client.complete(messages=user_messages, system_prompt="")

            assert exc_info.value.category == ErrorCategory.NON_RETRYABLE


class TestAnthropicClientStream:
    """stream_complete()."""

    @pytest.mark.asyncio
    async def test_stream_yields_text(
        self, client: AnthropicClient, user_messages: list[dict[str, str]], fake_stream: type
    ) -> None:
        manager = _stream_manager(fake_stream(["Hel", "", "lo"]))
        with patch.object(client.client.messages, "stream", MagicMock(return_value=manager)):
            fragments = [text async for text in client.stream_complete(user_messages, "Be brief.")]

        assert fragments == ["Hel", "lo"]
        manager.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stream_error_converted(
        self, client: AnthropicClient, user_messages: list[dict[str, str]], fake_stream: type
    ) -> None:
        manager = _stream_manager(fake_stream(["partial", APIConnectionError(request=MagicMock())]))
        with patch.object(client.client.messages, "stream", MagicMock(return_value=manager)):
            received = []
            with pytest.raises(LLMConnectionError):
                async for text in client.stream_complete(user_messages, "Be brief."):
                    received.append(text)

        assert received == ["partial"]
        manager.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_early_close_exits_stream_context(
        self, client: AnthropicClient, user_messages: list[dict[str, str]], fake_stream: type
    ) -> None:
        manager = _stream_manager(fake_stream(["a", "b"]))
        with patch.object(client.client.messages, "stream", MagicMock(return_value=manager)):
            iterator = client.stream_complete(user_messages, "Be brief.")
            assert await iterator.__anext__() == "a"
            await iterator.aclose()

        manager.__aexit__.assert_awaited_once()
