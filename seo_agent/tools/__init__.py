"""
Research tools

Keyword-metrics and SERP data from DataForSEO.
"""

from .dataforseo import DataForSEOClient
from .exceptions import (
    ResearchAPIError,
    ResearchAuthError,
    ResearchConfigurationError,
    ResearchError,
    ResearchNetworkError,
    ResearchRateLimitError,
)
from .schemas import KeywordSuggestion, KeywordVolume, RankedEntry, ResearchSnapshot

__all__ = [
    "DataForSEOClient",
    "KeywordSuggestion",
    "KeywordVolume",
    "RankedEntry",
    "ResearchAPIError",
    "ResearchAuthError",
    "ResearchConfigurationError",
    "ResearchError",
    "ResearchNetworkError",
    "ResearchRateLimitError",
    "ResearchSnapshot",
]
