"""LLM output parser for JSON and Markdown content.

This module provides robust parsing of LLM outputs:
- JSON object extraction from free text (greedy first ``{`` to last ``}``)
- Deterministic fixes for common JSON issues
- Typed keyword plan / outline parsing with deterministic fallbacks
- Reference extraction from the article's trailing References section
"""

import json
import logging
import re

from pydantic import ValidationError

from seo_agent.helpers.schemas import Parsed, ParseResult
from seo_agent.pipeline.schemas import KeywordPlan, Outline, Reference

logger = logging.getLogger(__name__)


class OutputParser:
    """LLM output parser."""

    # Greedy: first "{" to last "}"
    _JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")

    # Regex patterns for Markdown detection
    _MARKDOWN_PATTERNS = [
        re.compile(r"^#{1,3}\s", re.MULTILINE),  # Headings
        re.compile(r"^[*-]\s", re.MULTILINE),  # Unordered list
        re.compile(r"^\d+\.\s", re.MULTILINE),  # Ordered list
    ]

    # Regex for trailing comma fix
    _TRAILING_COMMA_OBJ = re.compile(r",\s*}")
    _TRAILING_COMMA_ARR = re.compile(r",\s*]")

    def extract_json_object(self, content: str) -> ParseResult:
        """
        Extract and parse the JSON object embedded in model output.

        Processing flow:
        1. Take the span from the first "{" to the last "}"
        2. Attempt JSON parse
        3. On failure, apply deterministic fixes and retry once
        4. Only a JSON object counts as success

        Args:
            content: Raw LLM output content

        Returns:
            ParseResult: Parse result (success/failure, data, applied fixes)
        """
        match = self._JSON_OBJECT_PATTERN.search(content or "")
        if not match:
            return self._failure(content, [])

        candidate = match.group(0)
        fixes_applied: list[str] = []

        data = self._loads(candidate)
        if data is None:
            fixed, fix_names = self.apply_deterministic_fixes(candidate)
            if fixed is not None:
                fixes_applied.extend(fix_names)
                data = self._loads(fixed)

        if not isinstance(data, dict):
            return self._failure(content, fixes_applied)

        if fixes_applied:
            logger.info("JSON repaired before parsing", extra={"fixes_applied": fixes_applied})

        return ParseResult(
            success=True,
            data=data,
            raw=content,
            format_detected="json",
            fixes_applied=fixes_applied,
        )

    @staticmethod
    def _loads(candidate: str) -> object | None:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            return None

    def _failure(self, content: str, fixes_applied: list[str]) -> ParseResult:
        return ParseResult(
            success=False,
            data=None,
            raw=content or "",
            format_detected="markdown" if self.looks_like_markdown(content or "") else "unknown",
            fixes_applied=fixes_applied,
        )

    def apply_deterministic_fixes(self, content: str) -> tuple[str | None, list[str]]:
        """
        Apply deterministic fixes.

        Allowed fixes:
        - Trailing comma removal: ,} -> }, ,] -> ]

        Prohibited fixes:
        - Value guessing/completion
        - Structure changes

        Returns:
            tuple[str | None, list[str]]: (fixed string or None, list of applied fix names)
        """
        fixed = content
        changed = False

        if self._TRAILING_COMMA_OBJ.search(fixed):
            fixed = self._TRAILING_COMMA_OBJ.sub("}", fixed)
            changed = True

        if self._TRAILING_COMMA_ARR.search(fixed):
            fixed = self._TRAILING_COMMA_ARR.sub("]", fixed)
            changed = True

        if changed:
            return fixed, ["trailing_comma_removed"]
        return None, []

    def looks_like_markdown(self, content: str) -> bool:
        """Determine if content is Markdown format."""
        return any(pattern.search(content) for pattern in self._MARKDOWN_PATTERNS)


_parser = OutputParser()


def parse_keyword_plan(
    text: str,
    topic: str,
    target_word_count: int | None = None,
) -> Parsed[KeywordPlan]:
    """Parse the keyword research response.

    Never raises: unparseable or invalid output yields ``KeywordPlan.fallback``.
    """
    result = _parser.extract_json_object(text)
    if result.success:
        try:
            return Parsed.ok(KeywordPlan.model_validate(result.data), raw=text)
        except ValidationError as e:
            logger.warning(
                "Keyword plan failed validation, using fallback",
                extra={"topic": topic, "errors": e.error_count()},
            )
    else:
        logger.warning(
            "Keyword plan response is not a JSON object, using fallback",
            extra={"topic": topic, "format_detected": result.format_detected},
        )
    return Parsed.fallback(KeywordPlan.fallback(topic, target_word_count), raw=text)


def parse_outline(text: str, plan: KeywordPlan) -> Parsed[Outline]:
    """Parse the outline response.

    Never raises: unparseable or invalid output yields ``Outline.fallback(plan)``.
    """
    result = _parser.extract_json_object(text)
    if result.success:
        try:
            return Parsed.ok(Outline.model_validate(result.data), raw=text)
        except ValidationError as e:
            logger.warning(
                "Outline failed validation, using fallback",
                extra={"primary_keyword": plan.primary_keyword.keyword, "errors": e.error_count()},
            )
    else:
        logger.warning(
            "Outline response is not a JSON object, using fallback",
            extra={
                "primary_keyword": plan.primary_keyword.keyword,
                "format_detected": result.format_detected,
            },
        )
    return Parsed.fallback(Outline.fallback(plan), raw=text)


_REFERENCES_HEADING = re.compile(r"^#{1,6}[ \t]*references\b.*$", re.IGNORECASE | re.MULTILINE)
_NUMBERED_LINE = re.compile(r"^\d+\.")
_MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


def extract_references(article: str) -> list[Reference]:
    """Extract numbered ``[label](url)`` lines from the trailing References section.

    Numbers are assigned 1..n in order of appearance; numbering already in
    the text is ignored and lines without a link are skipped.
    """
    headings = list(_REFERENCES_HEADING.finditer(article))
    if not headings:
        return []

    section = article[headings[-1].end():]
    references: list[Reference] = []
    for line in section.splitlines():
        if not _NUMBERED_LINE.match(line):
            continue
        link = _MARKDOWN_LINK.search(line)
        if link:
            references.append(
                Reference(number=len(references) + 1, source=link.group(1), url=link.group(2))
            )
    return references
