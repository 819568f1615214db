"""Tests for content metrics."""

import pytest

from seo_agent.helpers import ContentMetrics, count_words, reading_time


class TestCountWords:
    def test_plain_text(self) -> None:
        assert count_words("one two  three\nfour") == 4

    def test_markdown_characters_stripped(self) -> None:
        """Formatting characters on their own do not count as words."""
        assert count_words("# Hello **world** _again_ `code`") == 4
        assert count_words("## \n\n* * *") == 0

    def test_link_counts_as_one_word(self) -> None:
        assert count_words("[guide](https://example.com/guide)") == 1

    def test_empty(self) -> None:
        assert count_words("") == 0


class TestReadingTime:
    @pytest.mark.parametrize(
        ("words", "expected"),
        [(0, "0 min"), (1, "1 min"), (200, "1 min"), (201, "2 min"), (2500, "13 min")],
    )
    def test_rounds_up(self, words: int, expected: str) -> None:
        assert reading_time(words) == expected

    def test_custom_wpm(self) -> None:
        assert reading_time(500, wpm=250) == "2 min"


class TestContentMetrics:
    def test_article_metrics(self) -> None:
        metrics = ContentMetrics().article_metrics("# Title\n\n" + "word " * 399)

        assert metrics.word_count == 400
        assert metrics.reading_time == "2 min"
