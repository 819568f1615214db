"""Pipeline schemas.

Input, per-phase outputs and the result envelope of a generation run.

Wire-facing models use camelCase aliases so that model JSON such as
``primaryKeyword`` or ``searchVolume`` validates directly and HTTP output
keeps the camelCase shape. Dump with ``by_alias=True``.
"""

import json
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_TARGET_WORD_COUNT = 2500


class CamelModel(BaseModel):
    """Immutable value object serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class GeneratedModel(CamelModel):
    """Record parsed from model output.

    Models often emit ``null`` for numbers or strings they could not fill in;
    those keys fall back to the field default instead of failing the record.
    Required fields still reject ``null``.
    """

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


# =============================================================================
# Input
# =============================================================================


class InternalLink(CamelModel):
    """Internal link the article may reference."""

    url: str = Field(..., pattern=r"^https?://\S+$", description="Absolute http(s) URL")
    title: str = Field(..., min_length=1, description="Link title, used as anchor text")
    relevance: Literal["high", "medium", "low"] | None = None


class ArticleGenerationInput(CamelModel):
    """Generation request."""

    topic: str = Field(..., min_length=1, max_length=500, description="Topic or seed keyword")
    target_audience: str | None = Field(default=None, description="Target audience description")
    content_type: str | None = Field(default=None, description="Content type (blog post, guide, ...)")
    target_word_count: int | None = Field(default=None, ge=500, le=10000)
    # Reserved: the keyword plan is always computed because later phases need it
    include_keyword_research: bool = True
    include_faq: bool = Field(default=True, alias="includeFAQ")
    internal_links: list[InternalLink] = Field(default_factory=list)

    @field_validator("topic")
    @classmethod
    def topic_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("topic must not be blank")
        return value.strip()


# =============================================================================
# Keyword plan
# =============================================================================


class PrimaryKeyword(GeneratedModel):
    keyword: str = Field(..., min_length=1)
    search_volume: int = 0
    competition: str = "medium"
    competition_level: str = "medium"
    cpc: float = 0.0
    intent: str = "informational"
    ai_citation_format: str = ""


class SecondaryKeyword(GeneratedModel):
    keyword: str
    volume: int = 0
    intent: str = ""
    competition: str = ""
    use_in: str = ""


class LongTailKeyword(GeneratedModel):
    keyword: str
    volume: int = 0
    intent: str = ""


class LongTailCluster(GeneratedModel):
    theme: str
    keywords: list[LongTailKeyword] = Field(default_factory=list)


class QuestionKeyword(GeneratedModel):
    question: str
    priority: str = "MEDIUM"
    volume: int = 0
    placement: str = ""


class ContentSection(GeneratedModel):
    type: str = "h2"
    title: str
    word_count: int = 0
    intent: str = ""
    keywords: list[str] = Field(default_factory=list)
    subsections: list["ContentSection"] = Field(default_factory=list)


class ContentStructure(GeneratedModel):
    h1: str = Field(..., min_length=1)
    meta_title: str
    meta_description: str = ""
    target_word_count: int = DEFAULT_TARGET_WORD_COUNT
    sections: list[ContentSection] = Field(default_factory=list)


class IntentDistribution(GeneratedModel):
    informational: float = 0
    commercial: float = 0
    transactional: float = 0


class CompetitiveAnalysis(GeneratedModel):
    total_keywords_discovered: int = 0
    average_volume: float = 0
    intent_distribution: IntentDistribution = Field(default_factory=IntentDistribution)
    content_gaps: list[str] = Field(default_factory=list)


class KeywordPlan(GeneratedModel):
    """Output of the keyword research phase."""

    primary_keyword: PrimaryKeyword
    secondary_keywords: list[SecondaryKeyword] = Field(default_factory=list)
    long_tail_clusters: list[LongTailCluster] = Field(default_factory=list)
    questions: list[QuestionKeyword] = Field(default_factory=list)
    content_structure: ContentStructure
    competitive_analysis: CompetitiveAnalysis = Field(default_factory=CompetitiveAnalysis)

    @classmethod
    def fallback(cls, topic: str, target_word_count: int | None = None) -> "KeywordPlan":
        """Plan used when the model output cannot be parsed."""
        return cls(
            primary_keyword=PrimaryKeyword(
                keyword=topic,
                search_volume=1000,
                competition="medium",
                competition_level="medium",
                cpc=1.5,
                intent="informational",
                ai_citation_format="comprehensive guide",
            ),
            content_structure=ContentStructure(
                h1=topic,
                meta_title=topic,
                meta_description=f"Learn about {topic}",
                target_word_count=target_word_count or DEFAULT_TARGET_WORD_COUNT,
            ),
            competitive_analysis=CompetitiveAnalysis(
                intent_distribution=IntentDistribution(informational=100, commercial=0, transactional=0),
            ),
        )


# =============================================================================
# Outline
# =============================================================================


class OutlineMetadata(GeneratedModel):
    primary_keyword: str
    h1: str = Field(..., min_length=1)
    meta_title: str
    meta_description: str = ""
    target_word_count: int = DEFAULT_TARGET_WORD_COUNT


class KeyTakeaway(GeneratedModel):
    main_answer: str = ""
    bullets: list[str] = Field(default_factory=list)


class OutlineParagraph(GeneratedModel):
    word_count: int = 0
    what_to_write: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)


class ParagraphBlock(GeneratedModel):
    paragraphs: list[OutlineParagraph] = Field(default_factory=list)


class OutlineSubsection(GeneratedModel):
    type: str = "h3"
    title: str
    word_count: int = 0
    intent: str = ""
    paragraphs: list[OutlineParagraph] = Field(default_factory=list)


class OutlineSection(GeneratedModel):
    type: str = "h2"
    title: str
    word_count: int = 0
    intent: str = ""
    paragraphs: list[OutlineParagraph] = Field(default_factory=list)
    subsections: list[OutlineSubsection] = Field(default_factory=list)


class AnswerStructure(GeneratedModel):
    direct_answer: str = ""
    context: str = ""


class FAQItem(GeneratedModel):
    question: str
    priority: str = "MEDIUM"
    answer_structure: AnswerStructure = Field(default_factory=AnswerStructure)
    word_count: int = 0


class Citation(GeneratedModel):
    source_name: str
    url: str = ""
    type: str = ""
    use_in: str = ""


class Outline(GeneratedModel):
    """Output of the outline phase."""

    metadata: OutlineMetadata
    key_takeaway: KeyTakeaway = Field(default_factory=KeyTakeaway)
    introduction: ParagraphBlock = Field(default_factory=ParagraphBlock)
    sections: list[OutlineSection] = Field(default_factory=list)
    faq: list[FAQItem] = Field(default_factory=list)
    conclusion: ParagraphBlock = Field(default_factory=ParagraphBlock)
    citations: list[Citation] = Field(default_factory=list)

    @classmethod
    def fallback(cls, plan: KeywordPlan) -> "Outline":
        """Outline with empty bodies and metadata copied from the plan."""
        structure = plan.content_structure
        return cls(
            metadata=OutlineMetadata(
                primary_keyword=plan.primary_keyword.keyword,
                h1=structure.h1,
                meta_title=structure.meta_title,
                meta_description=structure.meta_description,
                target_word_count=structure.target_word_count,
            ),
        )


# =============================================================================
# Result envelope
# =============================================================================


class ArticleResult(CamelModel):
    title: str
    content: str
    word_count: int
    reading_time: str


class SEOSummary(CamelModel):
    meta_title: str
    meta_description: str
    primary_keyword: str
    secondary_keywords: list[str] = Field(default_factory=list)


class Reference(CamelModel):
    number: int = Field(..., ge=1)
    source: str
    url: str


class PlacedInternalLink(CamelModel):
    anchor_text: str
    url: str
    placement: str = "body"


class GenerationData(CamelModel):
    article: ArticleResult
    seo: SEOSummary
    outline: Outline
    keyword_research: KeywordPlan
    references: list[Reference] = Field(default_factory=list)
    internal_links: list[PlacedInternalLink] = Field(default_factory=list)


class TokensUsed(CamelModel):
    keyword_research: int = 0
    outline: int = 0
    article: int = 0
    # True when the article count is the len/4 approximation from streaming mode
    article_estimated: bool = False


class GenerationMetadata(CamelModel):
    generated_at: str = Field(..., description="ISO-8601 UTC timestamp")
    processing_time: int = Field(..., ge=0, description="Wall-clock duration in milliseconds")
    tokens_used: TokensUsed


class GenerationResult(CamelModel):
    """Envelope returned by a successful run."""

    success: bool = True
    data: GenerationData
    metadata: GenerationMetadata


# =============================================================================
# Stream events
# =============================================================================


class _BaseEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude={"type"})

    def to_sse(self) -> str:
        """Frame as a server-sent event."""
        return f"event: {self.type}\ndata: {json.dumps(self.payload())}\n\n"  # type: ignore[attr-defined]


class ProgressEvent(_BaseEvent):
    type: Literal["progress"] = "progress"
    phase: str
    progress: int = Field(..., ge=0, le=100)
    message: str


class ChunkEvent(_BaseEvent):
    type: Literal["chunk"] = "chunk"
    content: str


class CompleteEvent(_BaseEvent):
    type: Literal["complete"] = "complete"
    result: GenerationResult

    def payload(self) -> dict[str, Any]:
        return self.result.to_wire()


class ErrorEvent(_BaseEvent):
    type: Literal["error"] = "error"
    message: str
    code: str


StreamEvent = Annotated[
    ProgressEvent | ChunkEvent | CompleteEvent | ErrorEvent,
    Field(discriminator="type"),
]
