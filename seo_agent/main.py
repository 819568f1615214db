"""FastAPI application entry point.

SEO content agent API server with endpoints for:
- Article generation (buffered and server-sent events)
- Service configuration health
- Liveness
"""

import logging
import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from seo_agent import __version__
from seo_agent.config import Settings, load_settings
from seo_agent.core.errors import APIError, ErrorCode
from seo_agent.observability.logger import configure_logging
from seo_agent.routers import articles

logger = logging.getLogger(__name__)

SERVICE_NAME = "SEO Content Agent"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Explicit settings (loaded from the environment when None)
    """
    if settings is None:
        load_dotenv()
        settings = load_settings()
    configure_logging(settings.log_level, settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(f"{SERVICE_NAME} starting", extra={"services": settings.snapshot()})
        yield
        logger.info(f"{SERVICE_NAME} shutting down")

    app = FastAPI(
        title=SERVICE_NAME,
        description="Generates SEO-optimized long-form articles from a topic",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=3600,
    )

    app.include_router(articles.router)
    _register_exception_handlers(app)

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Service description."""
        return {
            "name": SERVICE_NAME,
            "version": __version__,
            "endpoints": {
                "generate": "POST /api/articles/generate",
                "generateStream": "POST /api/articles/generate/stream",
                "health": "GET /api/articles/health",
            },
        }

    @app.get("/health")
    async def health(request: Request) -> dict[str, Any]:
        """Liveness check."""
        return {
            "status": "ok",
            "uptime": round(time.monotonic() - request.app.state.started_at, 3),
        }

    return app


# =============================================================================
# Error Handlers (no stack details in responses)
# =============================================================================


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = APIError(
            status_code=400,
            code=ErrorCode.VALIDATION_ERROR,
            message="Invalid request body",
            details=jsonable_encoder(exc.errors()),
        )
        return JSONResponse(status_code=error.status_code, content=error.to_response_body())

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_response_body())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler with request correlation."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        logger.error(
            f"Unhandled exception [request_id={request_id}]: {exc}",
            exc_info=True,
            extra={
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method,
            },
        )

        error = APIError(
            status_code=500,
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal server error (request_id={request_id})",
        )
        return JSONResponse(status_code=error.status_code, content=error.to_response_body())


app = create_app()


# =============================================================================
# Main Entry Point
# =============================================================================


def run() -> None:
    """Console entry point."""
    import os

    import uvicorn

    uvicorn.run(
        "seo_agent.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8000")),
        reload=os.getenv("ENVIRONMENT", "production") == "development",
    )


if __name__ == "__main__":
    run()
