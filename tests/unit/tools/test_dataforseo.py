"""
DataForSEO client tests
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from seo_agent.core.errors import ErrorCategory, ErrorCode
from seo_agent.tools import (
    DataForSEOClient,
    ResearchAPIError,
    ResearchAuthError,
    ResearchConfigurationError,
    ResearchNetworkError,
    ResearchRateLimitError,
)


@pytest.fixture
def client():
    return DataForSEOClient(login="user", password="secret")


class TestDataForSEOClientInit:
    """Construction"""

    @pytest.mark.parametrize(("login", "password"), [(None, "secret"), ("user", None), ("", "")])
    def test_missing_credentials(self, login, password):
        with pytest.raises(ResearchConfigurationError) as exc_info:
            DataForSEOClient(login=login, password=password)
        assert exc_info.value.code == ErrorCode.AUTH_ERROR

    def test_base_url_trailing_slash(self):
        client = DataForSEOClient(login="u", password="p", base_url="https://sandbox.dataforseo.com/v3/")
        assert client.base_url == "https://sandbox.dataforseo.com/v3"


class TestFetchRankedResults:
    """fetch_ranked_results"""

    @pytest.mark.asyncio
    async def test_keeps_organic_items_ranked(self, client, make_response, serp_body):
        with patch("httpx.AsyncClient") as mock_client:
            post = AsyncMock(return_value=make_response(body=serp_body))
            mock_client.return_value.__aenter__.return_value.post = post

            snapshot = await client.fetch_ranked_results("remote work tools")

        assert snapshot.query == "remote work tools"
        assert snapshot.total_results == 98300000
        assert [entry.rank for entry in snapshot.items] == [1, 2]
        assert snapshot.items[0].url == "https://example.com/tools"
        assert snapshot.items[1].description == ""

        endpoint = post.call_args.args[0]
        payload = post.call_args.kwargs["json"]
        assert endpoint == "/serp/google/organic/live/advanced"
        assert payload[0]["keyword"] == "remote work tools"
        assert payload[0]["location_code"] == 2840
        assert payload[0]["language_code"] == "en"
        assert mock_client.call_args.kwargs["auth"] == ("user", "secret")

    @pytest.mark.asyncio
    async def test_caps_at_ten_entries(self, client, make_response):
        items = [
            {"type": "organic", "url": f"https://example.com/{i}", "title": f"T{i}", "domain": "example.com"}
            for i in range(15)
        ]
        body = {"status_code": 20000, "tasks": [{"result": [{"se_results_count": 15, "items": items}]}]}
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(return_value=make_response(body=body))

            snapshot = await client.fetch_ranked_results("q")

        assert len(snapshot.items) == 10
        assert snapshot.items[-1].rank == 10

    @pytest.mark.asyncio
    async def test_empty_result(self, client, make_response):
        body = {"status_code": 20000, "tasks": [{"result": None}]}
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(return_value=make_response(body=body))

            snapshot = await client.fetch_ranked_results("nothing here")

        assert snapshot.query == "nothing here"
        assert snapshot.total_results == 0
        assert snapshot.items == []


class TestFetchKeywords:
    """Keyword endpoints"""

    @pytest.mark.asyncio
    async def test_suggestions_nested_and_flat(self, client, make_response, suggestions_body):
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=make_response(body=suggestions_body)
            )

            suggestions = await client.fetch_keyword_suggestions("remote work tools")

        assert [s.keyword for s in suggestions] == ["remote work tools free", "remote work tools list"]
        assert suggestions[0].search_volume == 1300
        assert suggestions[0].competition_level == "LOW"
        assert suggestions[0].cpc == 2.1
        assert suggestions[0].keyword_difficulty == 28
        assert suggestions[1].search_volume == 480
        assert suggestions[1].competition_level == "unknown"

    @pytest.mark.asyncio
    async def test_related_keywords_unwraps_keyword_data(self, client, make_response):
        body = {
            "status_code": 20000,
            "tasks": [
                {
                    "result": [
                        {
                            "items": [
                                {
                                    "keyword_data": {
                                        "keyword": "async collaboration",
                                        "keyword_info": {"search_volume": 720},
                                    }
                                }
                            ]
                        }
                    ]
                }
            ],
        }
        with patch("httpx.AsyncClient") as mock_client:
            post = AsyncMock(return_value=make_response(body=body))
            mock_client.return_value.__aenter__.return_value.post = post

            related = await client.fetch_related_keywords("remote work")

        assert related[0].keyword == "async collaboration"
        assert related[0].search_volume == 720
        assert post.call_args.args[0] == "/dataforseo_labs/google/related_keywords/live"

    @pytest.mark.asyncio
    async def test_keyword_volumes(self, client, make_response):
        body = {
            "status_code": 20000,
            "tasks": [
                {
                    "result": [
                        {"keyword": "remote work", "search_volume": 40500, "competition": 0.12, "competition_level": "LOW", "cpc": 3.4},
                        {"keyword": None},
                    ]
                }
            ],
        }
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(return_value=make_response(body=body))

            volumes = await client.fetch_keyword_volumes(["remote work"])

        assert len(volumes) == 1
        assert volumes[0].search_volume == 40500
        assert volumes[0].competition == 0.12

    @pytest.mark.asyncio
    async def test_keyword_volumes_empty_input(self, client):
        with patch("httpx.AsyncClient") as mock_client:
            assert await client.fetch_keyword_volumes([]) == []
            mock_client.assert_not_called()


class TestErrorMapping:
    """Transport and API failures"""

    @pytest.mark.asyncio
    async def test_unauthorized(self, client, make_response):
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(return_value=make_response(401))

            with pytest.raises(ResearchAuthError) as exc_info:
                await client.fetch_ranked_results("q")

        assert exc_info.value.code == ErrorCode.AUTH_ERROR
        assert not exc_info.value.is_retryable()

    @pytest.mark.asyncio
    async def test_rate_limited(self, client, make_response):
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=make_response(429, headers={"Retry-After": "30"})
            )

            with pytest.raises(ResearchRateLimitError) as exc_info:
                await client.fetch_keyword_suggestions("q")

        assert exc_info.value.retry_after == 30
        assert exc_info.value.category == ErrorCategory.RETRYABLE

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("status", "retryable"), [(404, False), (500, True)])
    async def test_http_error_status(self, client, make_response, status, retryable):
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(return_value=make_response(status))

            with pytest.raises(ResearchAPIError) as exc_info:
                await client.fetch_ranked_results("q")

        assert exc_info.value.status_code == status
        assert exc_info.value.is_retryable() is retryable

    @pytest.mark.asyncio
    async def test_api_level_error_status(self, client, make_response):
        body = {"status_code": 40501, "status_message": "Invalid Field"}
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(return_value=make_response(body=body))

            with pytest.raises(ResearchAPIError, match="40501"):
                await client.fetch_ranked_results("q")

    @pytest.mark.asyncio
    async def test_invalid_json(self, client, make_response):
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=make_response(json_error=ValueError("Expecting value"))
            )

            with pytest.raises(ResearchAPIError, match="Invalid JSON"):
                await client.fetch_ranked_results("q")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [httpx.ConnectTimeout("timed out"), httpx.ConnectError("refused")],
    )
    async def test_network_errors(self, client, error):
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(side_effect=error)

            with pytest.raises(ResearchNetworkError) as exc_info:
                await client.fetch_ranked_results("q")

        assert exc_info.value.code == ErrorCode.NETWORK_ERROR
        assert exc_info.value.is_retryable()


class TestUnexpectedShapes:
    """Successful responses whose body does not have the documented shape"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            [{"unexpected": "list body"}],
            "ok",
            {"status_code": 20000, "tasks": ["not a task"]},
            {"status_code": 20000, "tasks": [{"result": "not a list"}]},
            {"status_code": 20000, "tasks": [{"result": [["nested", "list"]]}]},
            {"status_code": 20000, "tasks": [{"result": [{"items": {"type": "organic"}}]}]},
            {"status_code": 20000, "tasks": [{"result": [{"se_results_count": "many", "items": []}]}]},
        ],
    )
    async def test_ranked_results_raise_api_error(self, client, make_response, body):
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(return_value=make_response(body=body))

            with pytest.raises(ResearchAPIError, match="Unexpected"):
                await client.fetch_ranked_results("q")

    @pytest.mark.asyncio
    async def test_non_dict_items_are_skipped(self, client, make_response):
        body = {
            "status_code": 20000,
            "tasks": [
                {
                    "result": [
                        {
                            "items": [
                                "stray string",
                                None,
                                {"type": "organic", "url": "https://example.com", "title": "Kept", "domain": "example.com"},
                            ]
                        }
                    ]
                }
            ],
        }
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(return_value=make_response(body=body))

            snapshot = await client.fetch_ranked_results("q")

        assert [entry.title for entry in snapshot.items] == ["Kept"]

    @pytest.mark.asyncio
    async def test_suggestions_with_bad_record(self, client, make_response):
        body = {
            "status_code": 20000,
            "tasks": [{"result": [{"items": [{"keyword_data": "oops"}, {"keyword": "ok", "search_volume": "lots"}]}]}],
        }
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(return_value=make_response(body=body))

            with pytest.raises(ResearchAPIError, match="Unexpected keyword result"):
                await client.fetch_keyword_suggestions("q")

    @pytest.mark.asyncio
    async def test_keyword_volumes_list_body(self, client, make_response):
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(return_value=make_response(body=[]))

            with pytest.raises(ResearchAPIError, match="Unexpected response shape"):
                await client.fetch_keyword_volumes(["remote work"])
