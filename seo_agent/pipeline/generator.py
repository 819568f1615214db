"""Content generation pipeline.

Drives the four phases of a run in order:

    SERP analysis -> keyword research -> outline -> article

Two execution modes share the same phase code:
- ``generate``: buffered, returns the GenerationResult envelope
- ``generate_stream``: yields progress / chunk events and ends with exactly
  one ``complete`` or ``error`` event

Research failures degrade to placeholder text; generation failures end the run.
"""

import math
import time
import uuid
from collections.abc import AsyncIterator, Sequence
from contextlib import aclosing
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from seo_agent.config import Settings
from seo_agent.core.errors import ErrorCode, to_error_payload
from seo_agent.helpers.content_metrics import ContentMetrics
from seo_agent.helpers.output_parser import extract_references, parse_keyword_plan, parse_outline
from seo_agent.llm.base import LLMInterface, get_llm_client
from seo_agent.llm.schemas import LLMCallMetadata, LLMProvider, LLMRequestConfig, LLMResponse
from seo_agent.observability.logger import clear_context, get_logger, set_context
from seo_agent.prompts.article import ARTICLE_SYSTEM_PROMPT, build_article_prompt
from seo_agent.prompts.keyword_research import (
    KEYWORD_RESEARCH_SYSTEM_PROMPT,
    build_keyword_research_prompt,
)
from seo_agent.prompts.outline import OUTLINE_SYSTEM_PROMPT, build_outline_prompt
from seo_agent.tools.dataforseo import DataForSEOClient
from seo_agent.tools.exceptions import ResearchError
from seo_agent.tools.schemas import KeywordSuggestion, ResearchSnapshot

from .schemas import (
    ArticleGenerationInput,
    ArticleResult,
    ChunkEvent,
    CompleteEvent,
    ErrorEvent,
    GenerationData,
    GenerationMetadata,
    GenerationResult,
    KeywordPlan,
    Outline,
    PlacedInternalLink,
    ProgressEvent,
    SEOSummary,
    StreamEvent,
    TokensUsed,
)

logger = get_logger(__name__)

SERP_UNAVAILABLE = "SERP data unavailable."
KEYWORDS_UNAVAILABLE = "Keyword suggestions unavailable."

MAX_KEYWORD_SUGGESTIONS = 30
SERP_DESCRIPTION_LIMIT = 150

STRUCTURED_TEMPERATURE = 0.3
ARTICLE_TEMPERATURE = 0.7
ARTICLE_MAX_TOKENS = 8000

# Streaming cannot read provider usage, so article tokens are estimated
CHARS_PER_TOKEN = 4


class PipelinePhase(str, Enum):
    """Run states, in execution order (ERROR is absorbing)."""

    INIT = "init"
    SERP_ANALYSIS = "serp_analysis"
    KEYWORD_RESEARCH = "keyword_research"
    OUTLINE = "outline"
    ARTICLE = "article"
    DONE = "done"
    ERROR = "error"


_PHASE_ORDER = [
    PipelinePhase.INIT,
    PipelinePhase.SERP_ANALYSIS,
    PipelinePhase.KEYWORD_RESEARCH,
    PipelinePhase.OUTLINE,
    PipelinePhase.ARTICLE,
    PipelinePhase.DONE,
]


class PipelineStateError(Exception):
    """Invalid phase transition."""

    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, current: PipelinePhase, requested: PipelinePhase):
        self.message = f"Cannot move from {current.value} to {requested.value}"
        super().__init__(self.message)


@dataclass
class PipelineRun:
    """Mutable state of one generation run.

    Owned by a single run; never shared between requests.
    """

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    phase: PipelinePhase = PipelinePhase.INIT
    started_at: float = field(default_factory=time.perf_counter)
    phase_started_at: float = field(default_factory=time.perf_counter)
    tokens: dict[str, int] = field(
        default_factory=lambda: {"keyword_research": 0, "outline": 0, "article": 0}
    )
    article_estimated: bool = False
    error: str | None = None

    def advance(self, phase: PipelinePhase) -> None:
        """Move strictly forward to the next phase."""
        if phase == PipelinePhase.ERROR or self.phase == PipelinePhase.ERROR:
            raise PipelineStateError(self.phase, phase)
        if _PHASE_ORDER.index(phase) != _PHASE_ORDER.index(self.phase) + 1:
            raise PipelineStateError(self.phase, phase)
        self.phase = phase
        self.phase_started_at = time.perf_counter()

    def fail(self, error: BaseException) -> None:
        self.error = str(error) or type(error).__name__
        self.phase = PipelinePhase.ERROR

    def phase_duration_ms(self) -> int:
        return int((time.perf_counter() - self.phase_started_at) * 1000)

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.started_at) * 1000)

    def tokens_used(self) -> TokensUsed:
        return TokensUsed(
            keyword_research=self.tokens["keyword_research"],
            outline=self.tokens["outline"],
            article=self.tokens["article"],
            article_estimated=self.article_estimated,
        )


def format_serp_snapshot(snapshot: ResearchSnapshot) -> str:
    """Serialize a research snapshot into prompt text."""
    sections = ["### SERP Analysis"]
    sections.append(f"**Keyword:** {snapshot.query}")
    sections.append(f"**Total Results:** {snapshot.total_results:,}")

    if snapshot.items:
        sections.append("\n**Top 10 Results:**")
        for entry in snapshot.items:
            sections.append(f"{entry.rank}. **{entry.title}**")
            sections.append(f"   - URL: {entry.url}")
            sections.append(f"   - Domain: {entry.domain}")
            if entry.description:
                sections.append(f"   - Description: {entry.description[:SERP_DESCRIPTION_LIMIT]}...")

    return "\n".join(sections)


def format_keyword_suggestions(suggestions: Sequence[KeywordSuggestion]) -> str:
    """Serialize keyword suggestions (top 30 by volume) into prompt text."""
    sections = ["### Keyword Suggestions"]
    sections.append(f"**Total Keywords Found:** {len(suggestions)}")

    if suggestions:
        sections.append("\n**Top Keywords by Volume:**")
        ranked = sorted(suggestions, key=lambda s: s.search_volume, reverse=True)
        for i, kw in enumerate(ranked[:MAX_KEYWORD_SUGGESTIONS], start=1):
            sections.append(
                f'{i}. "{kw.keyword}" - {kw.search_volume}/month, '
                f"{kw.competition_level} competition, KD: {kw.keyword_difficulty}"
            )

    return "\n".join(sections)


class ContentGenerator:
    """SEO article generator.

    Collaborators are injected; ``from_settings`` builds them from explicit
    configuration and fails fast on missing credentials.
    """

    def __init__(
        self,
        llm: LLMInterface,
        research: DataForSEOClient,
        metrics: ContentMetrics | None = None,
    ):
        self.llm = llm
        self.research = research
        self.metrics = metrics or ContentMetrics()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        provider: LLMProvider | str | None = None,
    ) -> "ContentGenerator":
        """Build a generator for one provider.

        Raises:
            ValueError: Unknown provider
            LLMConfigurationError: Missing LLM API key
            ResearchConfigurationError: Missing DataForSEO credentials
        """
        research = DataForSEOClient(
            login=settings.dataforseo.login,
            password=settings.dataforseo.password,
            base_url=settings.dataforseo.base_url,
            timeout=settings.request_timeout,
        )
        llm = get_llm_client(provider or settings.default_provider, settings)
        return cls(llm=llm, research=research)

    # ------------------------------------------------------------------
    # Execution modes
    # ------------------------------------------------------------------

    async def generate(self, request: ArticleGenerationInput) -> GenerationResult:
        """Run all phases and return the result envelope.

        Raises:
            LLMError: A generation phase failed
        """
        run = PipelineRun()
        set_context(run_id=run.run_id)
        logger.info(
            "Generation started",
            extra_data={"topic": request.topic, "provider": self.llm.provider_name, "mode": "buffered"},
        )

        try:
            self._enter(run, PipelinePhase.SERP_ANALYSIS)
            serp_text = await self._analyze_serp(request.topic, run)

            self._enter(run, PipelinePhase.KEYWORD_RESEARCH)
            plan = await self._research_keywords(request, serp_text, run)

            self._enter(run, PipelinePhase.OUTLINE)
            outline = await self._generate_outline(request, plan, run)

            self._enter(run, PipelinePhase.ARTICLE)
            response = await self._write_article(outline, plan, run)
            run.tokens["article"] = response.token_usage.total
            self._complete_phase(run, tokens=run.tokens["article"])

            result = self._build_result(request, plan, outline, response.content, run)
            run.advance(PipelinePhase.DONE)
        except Exception as e:
            self._fail(run, e)
            raise
        finally:
            clear_context()

        logger.info(
            "Generation completed",
            extra_data={"processing_time_ms": result.metadata.processing_time},
        )
        return result

    async def generate_stream(self, request: ArticleGenerationInput) -> AsyncIterator[StreamEvent]:
        """Run all phases, yielding progress, article chunks and a final event.

        The first event is yielded before any work starts. After that every
        failure becomes a single trailing ``error`` event; nothing follows it.
        """
        run = PipelineRun()
        set_context(run_id=run.run_id)
        logger.info(
            "Generation started",
            extra_data={"topic": request.topic, "provider": self.llm.provider_name, "mode": "stream"},
        )

        try:
            yield ProgressEvent(phase="serp_analysis", progress=5, message="Analyzing SERP results...")
            self._enter(run, PipelinePhase.SERP_ANALYSIS)
            serp_text = await self._analyze_serp(request.topic, run)

            yield ProgressEvent(phase="keyword_research", progress=20, message="Performing keyword research...")
            self._enter(run, PipelinePhase.KEYWORD_RESEARCH)
            plan = await self._research_keywords(request, serp_text, run)
            yield ProgressEvent(phase="keyword_research", progress=35, message="Keyword research complete")

            yield ProgressEvent(phase="outline", progress=40, message="Generating article outline...")
            self._enter(run, PipelinePhase.OUTLINE)
            outline = await self._generate_outline(request, plan, run)
            yield ProgressEvent(phase="outline", progress=55, message="Outline complete")

            yield ProgressEvent(phase="article", progress=60, message="Writing article...")
            self._enter(run, PipelinePhase.ARTICLE)
            parts: list[str] = []
            async with aclosing(self._stream_article(outline, plan, run)) as fragments:
                async for fragment in fragments:
                    parts.append(fragment)
                    yield ChunkEvent(content=fragment)
            content = "".join(parts)

            run.tokens["article"] = math.ceil(len(content) / CHARS_PER_TOKEN)
            run.article_estimated = True
            self._complete_phase(run, tokens=run.tokens["article"], estimated=True)

            yield ProgressEvent(phase="article", progress=95, message="Finalizing...")
            result = self._build_result(request, plan, outline, content, run)
            run.advance(PipelinePhase.DONE)

            yield ProgressEvent(phase="done", progress=100, message="Article complete")
            logger.info(
                "Generation completed",
                extra_data={"processing_time_ms": result.metadata.processing_time},
            )
            yield CompleteEvent(result=result)
        except Exception as e:
            self._fail(run, e)
            payload = to_error_payload(e)
            yield ErrorEvent(message=payload.message, code=payload.code)
        finally:
            clear_context()

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    async def _analyze_serp(self, topic: str, run: PipelineRun) -> str:
        try:
            snapshot = await self.research.fetch_ranked_results(topic)
        except ResearchError as e:
            logger.warning(
                f"SERP analysis failed, continuing without SERP data: {e.message}",
                extra_data={"code": e.code.value, "category": e.category.value},
            )
            self._complete_phase(run, degraded=True)
            return SERP_UNAVAILABLE

        self._complete_phase(run, results=len(snapshot.items))
        return format_serp_snapshot(snapshot)

    async def _fetch_keyword_data(self, topic: str) -> str:
        try:
            suggestions = await self.research.fetch_keyword_suggestions(topic)
        except ResearchError as e:
            logger.warning(
                f"Keyword suggestions failed, continuing without them: {e.message}",
                extra_data={"code": e.code.value, "category": e.category.value},
            )
            return KEYWORDS_UNAVAILABLE
        return format_keyword_suggestions(suggestions)

    async def _research_keywords(
        self,
        request: ArticleGenerationInput,
        serp_text: str,
        run: PipelineRun,
    ) -> KeywordPlan:
        keyword_data = await self._fetch_keyword_data(request.topic)
        prompt = build_keyword_research_prompt(
            topic=request.topic,
            serp_data=serp_text,
            keyword_data=keyword_data,
            target_audience=request.target_audience,
            content_type=request.content_type,
            target_word_count=request.target_word_count,
        )

        response = await self._complete(
            prompt,
            KEYWORD_RESEARCH_SYSTEM_PROMPT,
            LLMRequestConfig(temperature=STRUCTURED_TEMPERATURE),
            run,
        )
        run.tokens["keyword_research"] = response.token_usage.total

        parsed = parse_keyword_plan(response.content, request.topic, request.target_word_count)
        self._complete_phase(
            run,
            tokens=response.token_usage.total,
            fallback=parsed.is_fallback,
            primary_keyword=parsed.value.primary_keyword.keyword,
        )
        return parsed.value

    async def _generate_outline(
        self,
        request: ArticleGenerationInput,
        plan: KeywordPlan,
        run: PipelineRun,
    ) -> Outline:
        prompt = build_outline_prompt(plan, request.internal_links, request.include_faq)

        response = await self._complete(
            prompt,
            OUTLINE_SYSTEM_PROMPT,
            LLMRequestConfig(temperature=STRUCTURED_TEMPERATURE),
            run,
        )
        run.tokens["outline"] = response.token_usage.total

        parsed = parse_outline(response.content, plan)
        outline = parsed.value
        if not request.include_faq and outline.faq:
            outline = outline.model_copy(update={"faq": []})

        self._complete_phase(run, tokens=response.token_usage.total, fallback=parsed.is_fallback)
        return outline

    async def _write_article(self, outline: Outline, plan: KeywordPlan, run: PipelineRun) -> LLMResponse:
        return await self._complete(
            build_article_prompt(outline, plan),
            ARTICLE_SYSTEM_PROMPT,
            LLMRequestConfig(temperature=ARTICLE_TEMPERATURE, max_tokens=ARTICLE_MAX_TOKENS),
            run,
        )

    def _stream_article(self, outline: Outline, plan: KeywordPlan, run: PipelineRun) -> AsyncIterator[str]:
        return self.llm.stream_complete(
            messages=[{"role": "user", "content": build_article_prompt(outline, plan)}],
            system_prompt=ARTICLE_SYSTEM_PROMPT,
            config=LLMRequestConfig(temperature=ARTICLE_TEMPERATURE, max_tokens=ARTICLE_MAX_TOKENS),
            metadata=LLMCallMetadata(run_id=run.run_id, phase=run.phase.value),
        )

    async def _complete(
        self,
        prompt: str,
        system_prompt: str,
        config: LLMRequestConfig,
        run: PipelineRun,
    ) -> LLMResponse:
        return await self.llm.complete(
            messages=[{"role": "user", "content": prompt}],
            system_prompt=system_prompt,
            config=config,
            metadata=LLMCallMetadata(run_id=run.run_id, phase=run.phase.value),
        )

    # ------------------------------------------------------------------
    # Result and bookkeeping
    # ------------------------------------------------------------------

    def _build_result(
        self,
        request: ArticleGenerationInput,
        plan: KeywordPlan,
        outline: Outline,
        content: str,
        run: PipelineRun,
    ) -> GenerationResult:
        metrics = self.metrics.article_metrics(content)
        return GenerationResult(
            success=True,
            data=GenerationData(
                article=ArticleResult(
                    title=outline.metadata.h1,
                    content=content,
                    word_count=metrics.word_count,
                    reading_time=metrics.reading_time,
                ),
                seo=SEOSummary(
                    meta_title=outline.metadata.meta_title,
                    meta_description=outline.metadata.meta_description,
                    primary_keyword=plan.primary_keyword.keyword,
                    secondary_keywords=[k.keyword for k in plan.secondary_keywords],
                ),
                outline=outline,
                keyword_research=plan,
                references=extract_references(content),
                internal_links=[
                    PlacedInternalLink(anchor_text=link.title, url=link.url, placement="body")
                    for link in request.internal_links
                ],
            ),
            metadata=GenerationMetadata(
                generated_at=datetime.now(UTC).isoformat(),
                processing_time=run.elapsed_ms(),
                tokens_used=run.tokens_used(),
            ),
        )

    def _enter(self, run: PipelineRun, phase: PipelinePhase) -> None:
        run.advance(phase)
        logger.phase_started(phase.value, run_id=run.run_id)

    def _complete_phase(self, run: PipelineRun, **extra) -> None:
        logger.phase_completed(run.phase.value, duration_ms=run.phase_duration_ms(), **extra)

    def _fail(self, run: PipelineRun, error: Exception) -> None:
        phase = run.phase.value
        run.fail(error)
        payload = to_error_payload(error)
        logger.phase_failed(phase, payload.message, payload.code, run_id=run.run_id)
