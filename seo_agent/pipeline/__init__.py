"""Generation pipeline schemas.

The orchestrator lives in ``seo_agent.pipeline.generator``.
"""

from .schemas import (
    ArticleGenerationInput,
    ArticleResult,
    ChunkEvent,
    CompleteEvent,
    ErrorEvent,
    GenerationResult,
    InternalLink,
    KeywordPlan,
    Outline,
    PlacedInternalLink,
    ProgressEvent,
    Reference,
    StreamEvent,
    TokensUsed,
)

__all__ = [
    "ArticleGenerationInput",
    "ArticleResult",
    "ChunkEvent",
    "CompleteEvent",
    "ErrorEvent",
    "GenerationResult",
    "InternalLink",
    "KeywordPlan",
    "Outline",
    "PlacedInternalLink",
    "ProgressEvent",
    "Reference",
    "StreamEvent",
    "TokensUsed",
]
