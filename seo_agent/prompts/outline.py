"""Outline generation prompts.

The model returns a JSON outline (camelCase keys, see Outline).
"""

from collections.abc import Sequence

from seo_agent.pipeline.schemas import InternalLink, KeywordPlan

from .template import PromptTemplate

OUTLINE_SYSTEM_PROMPT = """# Content Outline Specialist

You turn a keyword plan into a clean, actionable article outline that a writer
can execute without guessing.

## Goals

1. Answer-first structure: a key takeaway box before the introduction, direct
   answers at the start of every section
2. Trustworthy content: credible citations with URLs, balanced language,
   a limitations section before the conclusion
3. Search performance: secondary keywords mapped to sections, questions mapped
   to the FAQ

## Rules

- Follow the content structure from the keyword plan as the outline template
- Count only exact occurrences of the primary keyword phrase; plan 6-8 of them
- FAQ answers are 50-75 words with the direct answer first
- Every HIGH priority question from the plan belongs in the FAQ

## Output Format

Return a JSON object with this structure:
{
  "metadata": {
    "primaryKeyword": "string",
    "h1": "string",
    "metaTitle": "string",
    "metaDescription": "string",
    "targetWordCount": number
  },
  "keyTakeaway": {"mainAnswer": "string", "bullets": ["string"]},
  "introduction": {"paragraphs": [{"wordCount": number, "whatToWrite": ["string"], "keywords": ["string"]}]},
  "sections": [
    {
      "type": "h2",
      "title": "string",
      "wordCount": number,
      "intent": "string",
      "paragraphs": [{"wordCount": number, "whatToWrite": ["string"], "keywords": ["string"]}],
      "subsections": [
        {"type": "h3", "title": "string", "wordCount": number, "intent": "string", "paragraphs": []}
      ]
    }
  ],
  "faq": [
    {
      "question": "string",
      "priority": "string",
      "answerStructure": {"directAnswer": "string", "context": "string"},
      "wordCount": number
    }
  ],
  "conclusion": {"paragraphs": [{"wordCount": number, "whatToWrite": ["string"], "keywords": ["string"]}]},
  "citations": [{"sourceName": "string", "url": "string", "type": "string", "useIn": "string"}]
}

Return ONLY valid JSON, no additional text."""

OUTLINE_TEMPLATE = PromptTemplate(
    name="outline",
    content="""## Outline Generation Request

**Primary Keyword:** {{primary_keyword}}
**Search Volume:** {{search_volume}}
**Target Word Count:** {{target_word_count}}

**Content Structure from Keyword Research:**

{{content_structure}}

## Secondary Keywords to Include

{{secondary_keywords}}

## Questions for FAQ Section

{{questions}}
{{internal_links}}
## Instructions

Create a detailed article outline following the content structure above.
Plan 6-8 placements of the exact phrase "{{primary_keyword}}".
Keep metadata.targetWordCount at {{target_word_count}}.
{{faq_instruction}}

Return ONLY the JSON object, no additional text.""",
    variables={
        "primary_keyword": {"required": True},
        "target_word_count": {"required": True},
        "content_structure": {"required": True},
    },
)

FAQ_INSTRUCTION = "Include ALL HIGH priority questions in the FAQ section."
NO_FAQ_INSTRUCTION = "Do not include an FAQ section; return an empty \"faq\" array."


def _format_secondary_keywords(plan: KeywordPlan) -> str:
    if not plan.secondary_keywords:
        return "None provided."
    return "\n".join(
        f"{i}. {k.keyword} ({k.volume}/month) - Use in: {k.use_in}"
        for i, k in enumerate(plan.secondary_keywords, start=1)
    )


def _format_questions(plan: KeywordPlan) -> str:
    if not plan.questions:
        return "None provided."
    return "\n".join(
        f"{i}. [{q.priority}] {q.question} ({q.volume}/month)"
        for i, q in enumerate(plan.questions, start=1)
    )


def _format_internal_links(internal_links: Sequence[InternalLink] | None) -> str:
    if not internal_links:
        return ""
    lines = "\n".join(f"{i}. {link.title} - {link.url}" for i, link in enumerate(internal_links, start=1))
    return f"\n## Internal Links Available\n\n{lines}\n"


def build_outline_prompt(
    plan: KeywordPlan,
    internal_links: Sequence[InternalLink] | None = None,
    include_faq: bool = True,
) -> str:
    """Build the user prompt for the outline phase."""
    structure = plan.content_structure
    return OUTLINE_TEMPLATE.render(
        primary_keyword=plan.primary_keyword.keyword,
        search_volume=plan.primary_keyword.search_volume,
        target_word_count=structure.target_word_count,
        content_structure=structure.model_dump_json(by_alias=True, indent=2),
        secondary_keywords=_format_secondary_keywords(plan),
        questions=_format_questions(plan),
        internal_links=_format_internal_links(internal_links),
        faq_instruction=FAQ_INSTRUCTION if include_faq else NO_FAQ_INSTRUCTION,
    )
