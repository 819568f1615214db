"""Articles API router.

Endpoints for generating SEO articles, buffered or as server-sent events.
"""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from seo_agent.config import Settings
from seo_agent.core.errors import APIError, ErrorCode, to_error_payload
from seo_agent.llm.exceptions import LLMConfigurationError
from seo_agent.llm.schemas import LLMProvider
from seo_agent.pipeline.generator import ContentGenerator
from seo_agent.pipeline.schemas import ArticleGenerationInput, StreamEvent
from seo_agent.tools.exceptions import ResearchConfigurationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/articles", tags=["articles"])

GeneratorFactory = Callable[[Settings, LLMProvider], ContentGenerator]

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


# =============================================================================
# Dependencies
# =============================================================================


def get_settings(request: Request) -> Settings:
    """Settings loaded at application start."""
    return request.app.state.settings


def get_generator_factory() -> GeneratorFactory:
    """Factory used to build one generator per request."""
    return ContentGenerator.from_settings


def _resolve_provider(provider: str | None, settings: Settings) -> LLMProvider:
    allowed = [p.value for p in LLMProvider]
    if not provider:
        default = (settings.default_provider or LLMProvider.default().value).lower()
        try:
            return LLMProvider(default)
        except ValueError:
            logger.error(f"DEFAULT_LLM_PROVIDER '{default}' is not one of {allowed}")
            raise APIError(
                status_code=500,
                code=ErrorCode.CONFIGURATION_ERROR,
                message=f"Configured default provider '{default}' is not supported",
            ) from None

    try:
        return LLMProvider(provider.lower())
    except ValueError:
        raise APIError(
            status_code=400,
            code=ErrorCode.VALIDATION_ERROR,
            message=f"Unknown provider '{provider}'",
            details=[{"loc": ["query", "provider"], "msg": f"Must be one of {allowed}"}],
        ) from None


def _build_generator(
    factory: GeneratorFactory,
    settings: Settings,
    provider: LLMProvider,
) -> ContentGenerator:
    try:
        return factory(settings, provider)
    except (LLMConfigurationError, ResearchConfigurationError) as e:
        logger.error(f"Generator configuration failed: {e}")
        raise APIError(
            status_code=500,
            code=ErrorCode.CONFIGURATION_ERROR,
            message=str(e),
        ) from e


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/generate")
async def generate_article(
    body: ArticleGenerationInput,
    provider: str | None = Query(default=None, description="openai | gemini | anthropic"),
    settings: Settings = Depends(get_settings),
    factory: GeneratorFactory = Depends(get_generator_factory),
) -> dict[str, Any]:
    """Generate a complete SEO article and return the result envelope."""
    llm_provider = _resolve_provider(provider, settings)
    generator = _build_generator(factory, settings, llm_provider)

    try:
        result = await generator.generate(body)
    except Exception as e:
        logger.error(f"Article generation failed: {e}", exc_info=True)
        payload = to_error_payload(e)
        raise APIError(
            status_code=500,
            code=ErrorCode(payload.code),
            message=payload.message,
        ) from e

    return result.to_wire()


@router.post("/generate/stream")
async def generate_article_stream(
    body: ArticleGenerationInput,
    provider: str | None = Query(default=None, description="openai | gemini | anthropic"),
    settings: Settings = Depends(get_settings),
    factory: GeneratorFactory = Depends(get_generator_factory),
) -> StreamingResponse:
    """Generate an article as server-sent events.

    Each event is framed as ``event: <type>`` / ``data: <json>``. Failures
    before the first event produce a plain JSON error response.
    """
    llm_provider = _resolve_provider(provider, settings)
    generator = _build_generator(factory, settings, llm_provider)

    events = generator.generate_stream(body)
    try:
        first = await anext(events)
    except Exception as e:
        await events.aclose()
        logger.error(f"Streaming generation failed to start: {e}", exc_info=True)
        payload = to_error_payload(e)
        raise APIError(
            status_code=500,
            code=ErrorCode(payload.code),
            message=payload.message,
        ) from e

    async def event_source(first_event: StreamEvent) -> AsyncIterator[str]:
        async with aclosing(events):
            yield first_event.to_sse()
            async for event in events:
                yield event.to_sse()

    return StreamingResponse(
        event_source(first),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.get("/health")
async def articles_health(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    """Report which external services are configured."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "services": settings.snapshot(),
    }
