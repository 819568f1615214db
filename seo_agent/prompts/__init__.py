"""Prompt assemblers for the keyword research, outline and article phases."""

from .article import ARTICLE_SYSTEM_PROMPT, build_article_prompt
from .keyword_research import KEYWORD_RESEARCH_SYSTEM_PROMPT, build_keyword_research_prompt
from .outline import OUTLINE_SYSTEM_PROMPT, build_outline_prompt
from .template import PromptTemplate, PromptTemplateError

__all__ = [
    "ARTICLE_SYSTEM_PROMPT",
    "KEYWORD_RESEARCH_SYSTEM_PROMPT",
    "OUTLINE_SYSTEM_PROMPT",
    "PromptTemplate",
    "PromptTemplateError",
    "build_article_prompt",
    "build_keyword_research_prompt",
    "build_outline_prompt",
]
