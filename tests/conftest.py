"""Pytest configuration and fixtures for tests."""

import json
from collections.abc import AsyncIterator, Sequence
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from seo_agent.config import DataForSEOSettings, ServiceSettings, Settings
from seo_agent.llm.base import LLMInterface
from seo_agent.llm.schemas import LLMResponse, TokenUsage
from seo_agent.tools.dataforseo import DataForSEOClient
from seo_agent.tools.schemas import KeywordSuggestion, RankedEntry, ResearchSnapshot

TOPIC = "best productivity tools for remote teams"
PRIMARY_KEYWORD = "productivity tools for remote teams"
H1 = "Best Productivity Tools for Remote Teams"


class FakeLLM(LLMInterface):
    """Scripted LLM client.

    ``responses`` are consumed by complete() in order; an Exception instance
    is raised instead of returned. ``fragments`` feed stream_complete(); an
    Exception among them is raised at that point of the stream.
    """

    def __init__(
        self,
        responses: Sequence[str | Exception] = (),
        fragments: Sequence[str | Exception] = (),
        tokens: int = 100,
    ):
        self.responses = list(responses)
        self.fragments = list(fragments)
        self.tokens = tokens
        self.calls: list[dict[str, Any]] = []
        self.stream_calls: list[dict[str, Any]] = []
        self.stream_closed = False

    @property
    def provider_name(self) -> str:
        return "fake"

    @property
    def default_model(self) -> str:
        return "fake-model"

    async def complete(self, messages, system_prompt, config=None, metadata=None) -> LLMResponse:
        self.calls.append(
            {"messages": messages, "system_prompt": system_prompt, "config": config, "metadata": metadata}
        )
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return LLMResponse(
            content=item,
            token_usage=TokenUsage(input=self.tokens // 2, output=self.tokens - self.tokens // 2),
            model="fake-model",
            provider="fake",
        )

    async def stream_complete(self, messages, system_prompt, config=None, metadata=None) -> AsyncIterator[str]:
        self.stream_calls.append(
            {"messages": messages, "system_prompt": system_prompt, "config": config, "metadata": metadata}
        )
        try:
            for item in self.fragments:
                if isinstance(item, Exception):
                    raise item
                yield item
        finally:
            self.stream_closed = True


@pytest.fixture
def settings() -> Settings:
    """Settings with every service configured."""
    return Settings(
        llm={
            "openai": ServiceSettings(service="openai", api_key="sk-test", source="override"),
            "gemini": ServiceSettings(service="gemini", api_key="gm-test", source="override"),
            "anthropic": ServiceSettings(service="anthropic", api_key="an-test", source="override"),
        },
        dataforseo=DataForSEOSettings(login="login", password="password"),
    )


@pytest.fixture
def snapshot() -> ResearchSnapshot:
    """Research snapshot with two organic entries."""
    return ResearchSnapshot(
        query=TOPIC,
        total_results=1250000,
        items=[
            RankedEntry(
                rank=1,
                url="https://example.com/remote-tools",
                title="15 Remote Team Tools",
                description="A roundup of collaboration software.",
                domain="example.com",
            ),
            RankedEntry(
                rank=2,
                url="https://blog.example.org/productivity",
                title="Productivity for Distributed Teams",
                description="",
                domain="blog.example.org",
            ),
        ],
    )


@pytest.fixture
def suggestions() -> list[KeywordSuggestion]:
    return [
        KeywordSuggestion(keyword="remote team tools", search_volume=2400, competition_level="MEDIUM", keyword_difficulty=42),
        KeywordSuggestion(keyword="remote collaboration apps", search_volume=880, competition_level="LOW", keyword_difficulty=31),
    ]


@pytest.fixture
def research(snapshot: ResearchSnapshot, suggestions: list[KeywordSuggestion]) -> MagicMock:
    """DataForSEO client mock returning the snapshot and suggestions."""
    client = MagicMock(spec=DataForSEOClient)
    client.fetch_ranked_results = AsyncMock(return_value=snapshot)
    client.fetch_keyword_suggestions = AsyncMock(return_value=suggestions)
    client.fetch_related_keywords = AsyncMock(return_value=[])
    client.fetch_keyword_volumes = AsyncMock(return_value=[])
    return client


@pytest.fixture
def keyword_plan_json() -> str:
    plan = {
        "primaryKeyword": {
            "keyword": PRIMARY_KEYWORD,
            "searchVolume": 1900,
            "competition": "0.42",
            "competitionLevel": "medium",
            "cpc": 4.2,
            "intent": "commercial",
            "aiCitationFormat": "comparison",
        },
        "secondaryKeywords": [
            {"keyword": "remote team tools", "volume": 2400, "intent": "commercial", "competition": "medium", "useIn": "H2"},
            {"keyword": "remote collaboration apps", "volume": 880, "intent": "commercial", "competition": "low", "useIn": "H3"},
        ],
        "longTailClusters": [
            {"theme": "free tools", "keywords": [{"keyword": "free remote team tools", "volume": 320, "intent": "commercial"}]}
        ],
        "questions": [
            {"question": "What tools do remote teams use?", "priority": "HIGH", "volume": 590, "placement": "FAQ"}
        ],
        "contentStructure": {
            "h1": H1,
            "metaTitle": "Best Productivity Tools for Remote Teams (2025)",
            "metaDescription": "Compare productivity tools for remote teams.",
            "targetWordCount": 2500,
            "sections": [
                {"type": "h2", "title": "Communication", "wordCount": 400, "intent": "informational", "keywords": ["remote team tools"]}
            ],
        },
        "competitiveAnalysis": {
            "totalKeywordsDiscovered": 140,
            "averageVolume": 760,
            "intentDistribution": {"informational": 40, "commercial": 55, "transactional": 5},
            "contentGaps": ["async video"],
        },
    }
    return "Here is the plan:\n```json\n" + json.dumps(plan) + "\n```"


@pytest.fixture
def outline_json() -> str:
    outline = {
        "metadata": {
            "primaryKeyword": PRIMARY_KEYWORD,
            "h1": H1,
            "metaTitle": "Best Productivity Tools for Remote Teams (2025)",
            "metaDescription": "Compare productivity tools for remote teams.",
            "targetWordCount": 2500,
        },
        "keyTakeaway": {"mainAnswer": "Pick tools that cover chat, tasks and docs.", "bullets": ["Chat", "Tasks"]},
        "introduction": {"paragraphs": [{"wordCount": 120, "whatToWrite": ["Hook"], "keywords": [PRIMARY_KEYWORD]}]},
        "sections": [
            {
                "type": "h2",
                "title": "Communication",
                "wordCount": 400,
                "intent": "informational",
                "paragraphs": [],
                "subsections": [{"type": "h3", "title": "Chat apps", "wordCount": 200, "intent": "informational", "paragraphs": []}],
            }
        ],
        "faq": [
            {
                "question": "What tools do remote teams use?",
                "priority": "HIGH",
                "answerStructure": {"directAnswer": "Chat and task tools.", "context": "Most teams combine both."},
                "wordCount": 60,
            }
        ],
        "conclusion": {"paragraphs": []},
        "citations": [{"sourceName": "Remote Work Report", "url": "https://example.com/report", "type": "survey", "useIn": "intro"}],
    }
    return json.dumps(outline)


@pytest.fixture
def article_text() -> str:
    return (
        f"# {H1}\n\n"
        f"> Choosing {PRIMARY_KEYWORD} starts with communication.\n\n"
        "## Communication\n\n"
        "Teams that write things down tend to move faster.\n\n"
        "## References\n\n"
        "1. [Remote Work Report](https://example.com/report)\n"
        "2. [Async Guide](https://example.org/async)\n"
    )


@pytest.fixture
def make_llm() -> type[FakeLLM]:
    """Factory for scripted LLM clients."""
    return FakeLLM
