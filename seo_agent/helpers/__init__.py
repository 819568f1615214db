"""Response parsers and content metrics for the generation pipeline."""

from .content_metrics import ArticleMetrics, ContentMetrics, count_words, reading_time
from .output_parser import OutputParser, extract_references, parse_keyword_plan, parse_outline
from .schemas import Parsed, ParseResult

__all__ = [
    "ArticleMetrics",
    "ContentMetrics",
    "OutputParser",
    "ParseResult",
    "Parsed",
    "count_words",
    "extract_references",
    "parse_keyword_plan",
    "parse_outline",
    "reading_time",
]
