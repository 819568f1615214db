"""Keyword research prompts.

The model returns a JSON keyword plan (camelCase keys, see KeywordPlan).
"""

from seo_agent.pipeline.schemas import DEFAULT_TARGET_WORD_COUNT

from .template import PromptTemplate

KEYWORD_RESEARCH_SYSTEM_PROMPT = """# Keyword Research Strategist

You are a keyword research strategist who builds data-driven keyword plans for
content that search engines rank and AI assistants cite. Balance search volume,
competition, business value and citation potential.

## Deliverables

1. One primary keyword (500-10K monthly searches preferred; justify lower volume)
2. 8-15 secondary keywords that become H2/H3 topics
3. 5 long-tail clusters of about 6 keywords each
4. 8-10 real user questions for an FAQ section
5. A content structure (H1, meta title, meta description, sections, word counts)
6. A short competitive analysis

## Rules

- Use only the metrics present in the supplied data; never invent volumes
- H1, meta title and meta description must all contain the exact primary keyword phrase
- Prefer formats assistants quote: FAQ blocks, how-to steps, definitions, comparisons

## Output Format

Return a JSON object with this structure:
{
  "primaryKeyword": {
    "keyword": "string",
    "searchVolume": number,
    "competition": "string",
    "competitionLevel": "low|medium|high",
    "cpc": number,
    "intent": "informational|commercial|transactional",
    "aiCitationFormat": "string"
  },
  "secondaryKeywords": [
    {"keyword": "string", "volume": number, "intent": "string", "competition": "string", "useIn": "string"}
  ],
  "longTailClusters": [
    {"theme": "string", "keywords": [{"keyword": "string", "volume": number, "intent": "string"}]}
  ],
  "questions": [
    {"question": "string", "priority": "HIGH|MEDIUM|LOW", "volume": number, "placement": "string"}
  ],
  "contentStructure": {
    "h1": "string",
    "metaTitle": "string",
    "metaDescription": "string",
    "targetWordCount": number,
    "sections": [
      {"type": "h2|h3", "title": "string", "wordCount": number, "intent": "string", "keywords": ["string"]}
    ]
  },
  "competitiveAnalysis": {
    "totalKeywordsDiscovered": number,
    "averageVolume": number,
    "intentDistribution": {"informational": number, "commercial": number, "transactional": number},
    "contentGaps": ["string"]
  }
}

Return ONLY valid JSON, no additional text."""

KEYWORD_RESEARCH_TEMPLATE = PromptTemplate(
    name="keyword_research",
    content="""## Keyword Research Request

**Topic:** {{topic}}
**Target Audience:** {{target_audience}}
**Content Type:** {{content_type}}
**Target Word Count:** {{target_word_count}}

## SERP Analysis Data

{{serp_data}}

## Keyword Data

{{keyword_data}}

## Instructions

Based on the data above:
1. Pick the best primary keyword for "{{topic}}"
2. Select 8-15 secondary keywords for H2/H3 sections
3. Build 5 long-tail keyword clusters
4. List 8-10 user questions for the FAQ section
5. Build a content structure whose targetWordCount is {{target_word_count}}
6. Summarize the competitive landscape

Return ONLY the JSON object, no additional text.""",
    variables={
        "topic": {"required": True},
        "serp_data": {"required": True},
        "keyword_data": {"required": True},
        "target_audience": {"default": "General readers"},
        "content_type": {"default": "blog post"},
        "target_word_count": {"default": DEFAULT_TARGET_WORD_COUNT},
    },
)


def build_keyword_research_prompt(
    topic: str,
    serp_data: str,
    keyword_data: str,
    target_audience: str | None = None,
    content_type: str | None = None,
    target_word_count: int | None = None,
) -> str:
    """Build the user prompt for the keyword research phase."""
    return KEYWORD_RESEARCH_TEMPLATE.render(
        topic=topic,
        serp_data=serp_data,
        keyword_data=keyword_data,
        target_audience=target_audience,
        content_type=content_type,
        target_word_count=target_word_count,
    )
