"""Content metrics calculation utilities.

Provides metrics for the generated markdown article:
- Word count (markdown formatting characters stripped)
- Reading time estimation
"""

import math
import re

from pydantic import BaseModel

# Markdown formatting characters removed before counting
MARKDOWN_CHARS_PATTERN = re.compile(r"[#*_`\[\]()]")

WORDS_PER_MINUTE = 200


class ArticleMetrics(BaseModel):
    """Article metrics."""

    word_count: int
    reading_time: str


def count_words(text: str) -> int:
    """Count whitespace-separated words after stripping markdown characters."""
    return len(MARKDOWN_CHARS_PATTERN.sub("", text).split())


def reading_time(word_count: int, wpm: int = WORDS_PER_MINUTE) -> str:
    """
    Estimate reading time.

    Args:
        word_count: Number of words
        wpm: Words per minute

    Returns:
        str: "<minutes> min", minutes rounded up
    """
    return f"{math.ceil(word_count / wpm)} min"


class ContentMetrics:
    """Content metrics calculator."""

    def __init__(self, wpm: int = WORDS_PER_MINUTE):
        self.wpm = wpm

    def article_metrics(self, content: str) -> ArticleMetrics:
        words = count_words(content)
        return ArticleMetrics(word_count=words, reading_time=reading_time(words, self.wpm))
