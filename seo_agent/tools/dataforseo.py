"""
DataForSEO research client

- fetch_ranked_results: organic SERP results (top 10)
- fetch_keyword_suggestions: keyword ideas for a seed keyword
- fetch_related_keywords: related keywords for competitive analysis
- fetch_keyword_volumes: Google Ads search volume for a keyword list

One attempt per call; failures raise ResearchError subclasses.
"""

import logging
from typing import Any

import httpx

from .exceptions import (
    ResearchAPIError,
    ResearchAuthError,
    ResearchConfigurationError,
    ResearchNetworkError,
    ResearchRateLimitError,
)
from .schemas import KeywordSuggestion, KeywordVolume, RankedEntry, ResearchSnapshot

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.dataforseo.com/v3"
DEFAULT_LOCATION_CODE = 2840  # United States
DEFAULT_LANGUAGE_CODE = "en"
MAX_RANKED_RESULTS = 10
STATUS_OK = 20000

SERP_ENDPOINT = "/serp/google/organic/live/advanced"
SUGGESTIONS_ENDPOINT = "/dataforseo_labs/google/keyword_suggestions/live"
RELATED_ENDPOINT = "/dataforseo_labs/google/related_keywords/live"
VOLUME_ENDPOINT = "/keywords_data/google_ads/search_volume/live"


class DataForSEOClient:
    """
    DataForSEO API client

    Uses HTTP basic auth. Each call opens its own httpx.AsyncClient so no
    connection outlives the call.
    """

    def __init__(
        self,
        login: str | None,
        password: str | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
    ):
        if not login or not password:
            raise ResearchConfigurationError("DataForSEO credentials not configured")

        self._auth = (login, password)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def _post(self, endpoint: str, payload: list[dict[str, Any]]) -> dict[str, Any]:
        """POST a task list and return the decoded response body"""
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                auth=self._auth,
                timeout=self.timeout,
            ) as client:
                response = await client.post(endpoint, json=payload)
        except httpx.TimeoutException as e:
            logger.warning(f"dataforseo: Timeout on {endpoint}: {e}")
            raise ResearchNetworkError(f"Request timed out: {e}") from e
        except httpx.RequestError as e:
            logger.warning(f"dataforseo: Network error on {endpoint}: {e}")
            raise ResearchNetworkError(f"Network error: {e}") from e

        if response.status_code == 401:
            raise ResearchAuthError("Invalid credentials")
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise ResearchRateLimitError(
                "Rate limit exceeded",
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        if response.status_code >= 400:
            logger.error(f"dataforseo: Unexpected status {response.status_code} on {endpoint}")
            raise ResearchAPIError(
                f"API returned status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ResearchAPIError(f"Invalid JSON response: {e}", status_code=response.status_code) from e

        if not isinstance(data, dict):
            logger.warning(f"dataforseo: Unexpected response shape on {endpoint}: {type(data).__name__}")
            raise ResearchAPIError("Unexpected response shape", status_code=response.status_code)

        status_code = data.get("status_code", STATUS_OK)
        if status_code != STATUS_OK:
            raise ResearchAPIError(
                f"API error {status_code}: {data.get('status_message', 'unknown')}",
                status_code=response.status_code,
            )
        return data

    @staticmethod
    def _task_results(data: dict[str, Any]) -> list[Any]:
        tasks = data.get("tasks") or []
        if not isinstance(tasks, list) or not tasks:
            return []
        if not isinstance(tasks[0], dict):
            raise ResearchAPIError("Unexpected response shape: task is not an object")
        results = tasks[0].get("result") or []
        if not isinstance(results, list):
            raise ResearchAPIError("Unexpected response shape: result is not a list")
        return results

    @classmethod
    def _first_result(cls, data: dict[str, Any]) -> dict[str, Any] | None:
        results = cls._task_results(data)
        if not results:
            return None
        if not isinstance(results[0], dict):
            raise ResearchAPIError("Unexpected response shape: result is not an object")
        return results[0]

    @staticmethod
    def _items(result: dict[str, Any]) -> list[dict[str, Any]]:
        """Item dicts of a task result; anything else in the list is skipped."""
        items = result.get("items") or []
        if not isinstance(items, list):
            raise ResearchAPIError("Unexpected response shape: items is not a list")
        return [item for item in items if isinstance(item, dict)]

    async def fetch_ranked_results(
        self,
        query: str,
        location_code: int = DEFAULT_LOCATION_CODE,
        language_code: str = DEFAULT_LANGUAGE_CODE,
        depth: int = MAX_RANKED_RESULTS,
    ) -> ResearchSnapshot:
        """Fetch the top organic results for a query.

        Only ``organic`` items are kept, at most 10, ranked by their position
        in that filtered list.
        """
        payload = [
            {
                "keyword": query,
                "location_code": location_code,
                "language_code": language_code,
                "device": "desktop",
                "depth": depth,
            }
        ]
        data = await self._post(SERP_ENDPOINT, payload)

        result = self._first_result(data)
        if not result:
            return ResearchSnapshot.empty(query)

        organic = [item for item in self._items(result) if item.get("type") == "organic"]
        try:
            entries = [
                RankedEntry(
                    rank=index,
                    url=item.get("url") or "",
                    title=item.get("title") or "",
                    description=item.get("description") or "",
                    domain=item.get("domain") or "",
                )
                for index, item in enumerate(organic[:MAX_RANKED_RESULTS], start=1)
            ]
            snapshot = ResearchSnapshot(
                query=result.get("keyword") or query,
                total_results=result.get("se_results_count") or 0,
                items=entries,
            )
        except (TypeError, ValueError) as e:
            raise ResearchAPIError(f"Unexpected SERP result: {e}") from e

        logger.info(f"dataforseo: {len(entries)} organic results for '{query}'")
        return snapshot

    async def fetch_keyword_suggestions(
        self,
        seed: str,
        location_code: int = DEFAULT_LOCATION_CODE,
        language_code: str = DEFAULT_LANGUAGE_CODE,
        limit: int = 100,
    ) -> list[KeywordSuggestion]:
        """Fetch keyword suggestions containing the seed keyword."""
        payload = [
            {
                "keyword": seed,
                "location_code": location_code,
                "language_code": language_code,
                "limit": limit,
            }
        ]
        data = await self._post(SUGGESTIONS_ENDPOINT, payload)
        return self._parse_suggestions(self._first_result(data))

    async def fetch_related_keywords(
        self,
        seed: str,
        location_code: int = DEFAULT_LOCATION_CODE,
        language_code: str = DEFAULT_LANGUAGE_CODE,
        limit: int = 50,
    ) -> list[KeywordSuggestion]:
        """Fetch keywords related to the seed keyword."""
        payload = [
            {
                "keyword": seed,
                "location_code": location_code,
                "language_code": language_code,
                "limit": limit,
            }
        ]
        data = await self._post(RELATED_ENDPOINT, payload)
        return self._parse_suggestions(self._first_result(data))

    async def fetch_keyword_volumes(
        self,
        keywords: list[str],
        location_code: int = DEFAULT_LOCATION_CODE,
        language_code: str = DEFAULT_LANGUAGE_CODE,
    ) -> list[KeywordVolume]:
        """Fetch search volume, competition and CPC for each keyword."""
        if not keywords:
            return []

        payload = [
            {
                "keywords": keywords,
                "location_code": location_code,
                "language_code": language_code,
            }
        ]
        data = await self._post(VOLUME_ENDPOINT, payload)

        try:
            return [
                KeywordVolume(
                    keyword=item["keyword"],
                    search_volume=item.get("search_volume") or 0,
                    competition=item.get("competition") or 0.0,
                    competition_level=item.get("competition_level") or "unknown",
                    cpc=item.get("cpc") or 0.0,
                )
                for item in self._task_results(data)
                if isinstance(item, dict) and item.get("keyword")
            ]
        except (TypeError, ValueError) as e:
            raise ResearchAPIError(f"Unexpected search volume result: {e}") from e

    @classmethod
    def _parse_suggestions(cls, result: dict[str, Any] | None) -> list[KeywordSuggestion]:
        """Parse suggestion items, flat or nested under keyword_info/keyword_properties."""
        if not result:
            return []

        try:
            return cls._build_suggestions(cls._items(result))
        except (TypeError, ValueError) as e:
            raise ResearchAPIError(f"Unexpected keyword result: {e}") from e

    @staticmethod
    def _build_suggestions(items: list[dict[str, Any]]) -> list[KeywordSuggestion]:
        suggestions = []
        for item in items:
            # related_keywords wraps each record in keyword_data
            record = item.get("keyword_data") or item
            if not isinstance(record, dict):
                continue
            keyword = record.get("keyword")
            if not keyword:
                continue

            info = record.get("keyword_info")
            info = info if isinstance(info, dict) else {}
            properties = record.get("keyword_properties")
            properties = properties if isinstance(properties, dict) else {}
            suggestions.append(
                KeywordSuggestion(
                    keyword=keyword,
                    search_volume=record.get("search_volume", info.get("search_volume")) or 0,
                    competition_level=record.get("competition_level", info.get("competition_level"))
                    or "unknown",
                    cpc=record.get("cpc", info.get("cpc")) or 0.0,
                    keyword_difficulty=record.get(
                        "keyword_difficulty", properties.get("keyword_difficulty")
                    )
                    or 0,
                )
            )
        return suggestions
