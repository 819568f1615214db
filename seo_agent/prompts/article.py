"""Article writing prompts.

The model returns the finished article as markdown.
"""

from seo_agent.pipeline.schemas import KeywordPlan, Outline

from .template import PromptTemplate

ARTICLE_SYSTEM_PROMPT = """# Content Writer

You are an expert content writer producing publication-ready, trustworthy
articles from a detailed outline.

## Rules

### The outline is the plan
- One outline paragraph becomes one article paragraph
- Every keyword placement, citation, table and list appears where the outline puts it
- Never add, skip or reorder sections

### Primary keyword
- Use the exact primary keyword phrase as many times as the outline plans
- Split, reversed or inflected variants do not count

### Qualified language
Replace absolute claims with qualified ones:
| Avoid | Prefer |
|-------|--------|
| "proves" | "research suggests" |
| "guarantees" | "may help" |
| "the best" | "an effective" |
| "always" | "often" |
| "eliminates" | "may reduce" |

### Citations
- Name the study type and at least one of sample size, duration or year
- Hyperlink the URL given in the outline

### Answer first
- The key takeaway box opens with the main answer and the primary keyword
- Each H2 section opens with a direct answer
- FAQ answers start with a bold direct answer

## Output Format

A complete markdown article with:
- H1 title
- Key takeaway box (blockquote)
- Introduction
- All H2/H3 sections
- FAQ section (when the outline has one)
- Conclusion
- A final "## References" section as a numbered list of [Source](URL) links

Return ONLY the markdown article, no additional text or JSON."""

ARTICLE_TEMPLATE = PromptTemplate(
    name="article",
    content="""## Article Writing Request

**Primary Keyword:** {{primary_keyword}}
**Target Word Count:** {{target_word_count}}
**H1:** {{h1}}

## Complete Outline

{{outline}}

## Instructions

Write the complete article following the outline exactly.
- Place the primary keyword "{{primary_keyword}}" in every designated location
- Aim for about {{target_word_count}} words
- Qualify all absolute language
- Include citations with context and hyperlinks
- End with a numbered "## References" list

Return ONLY the markdown article, no additional text.""",
    variables={
        "primary_keyword": {"required": True},
        "target_word_count": {"required": True},
        "h1": {"required": True},
        "outline": {"required": True},
    },
)


def build_article_prompt(outline: Outline, plan: KeywordPlan) -> str:
    """Build the user prompt for the article phase."""
    return ARTICLE_TEMPLATE.render(
        primary_keyword=plan.primary_keyword.keyword,
        target_word_count=outline.metadata.target_word_count,
        h1=outline.metadata.h1,
        outline=outline.model_dump_json(by_alias=True, indent=2),
    )
