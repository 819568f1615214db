"""
Research provider schemas

ResearchSnapshot: ranked organic results for one query
KeywordSuggestion / KeywordVolume: keyword metrics
"""

from pydantic import BaseModel, ConfigDict, Field


class RankedEntry(BaseModel):
    """One organic search result"""

    model_config = ConfigDict(frozen=True)

    rank: int = Field(..., ge=1, description="1-based position among organic results")
    url: str = Field(..., description="Result URL")
    title: str = Field(default="", description="Result title")
    description: str = Field(default="", description="Result snippet")
    domain: str = Field(default="", description="Result domain")


class ResearchSnapshot(BaseModel):
    """
    Ranked search results for a query

    Consumed by the keyword phase as text only.
    """

    model_config = ConfigDict(frozen=True)

    query: str = Field(..., description="Search query")
    total_results: int = Field(default=0, ge=0, description="Estimated total result count")
    items: list[RankedEntry] = Field(default_factory=list, description="Organic results, best first")

    @classmethod
    def empty(cls, query: str) -> "ResearchSnapshot":
        return cls(query=query, total_results=0, items=[])


class KeywordSuggestion(BaseModel):
    """Keyword suggestion with volume and difficulty"""

    model_config = ConfigDict(frozen=True)

    keyword: str
    search_volume: int = 0
    competition_level: str = "unknown"
    cpc: float = 0.0
    keyword_difficulty: int = 0


class KeywordVolume(BaseModel):
    """Search volume record for one keyword"""

    model_config = ConfigDict(frozen=True)

    keyword: str
    search_volume: int = 0
    competition: float = 0.0
    competition_level: str = "unknown"
    cpc: float = 0.0
