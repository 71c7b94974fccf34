"""
FastAPI Application
==================

Main FastAPI application serving card previews and health checks.
Host applications mount it or reuse ``send_social_card`` in their own routes.
"""

from contextlib import asynccontextmanager
import uuid
from typing import AsyncGenerator, Any, Dict

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
import uvicorn

from socialcards.config.settings import get_settings
from socialcards.config.logging import get_logger
from socialcards.config.cache import initialize_cache, close_cache, get_cache_store
from socialcards.core.cache.guard import CacheGuard
from socialcards.api.routes.health import router as health_router
from socialcards.api.routes.previews import router as previews_router
from socialcards.models.schemas import ErrorResponse

# Registers the bundled example previews
import socialcards.cards.examples  # noqa: F401

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    logger.info("Starting FastAPI application")

    try:
        await initialize_cache()
        logger.info("Cache store initialized")
    except Exception as e:
        logger.error("Failed to initialize cache store", error=str(e))
        raise RuntimeError(f"Cache initialization failed: {e}")

    app.state.card_guard = CacheGuard(store=get_cache_store())

    try:
        yield
    finally:
        # Shutdown
        logger.info("Shutting down FastAPI application")
        try:
            await close_cache()
        except Exception as e:
            logger.error("Error closing cache store", error=str(e))


def create_app() -> FastAPI:
    """
    Application factory function for creating FastAPI app instance.
    Used by integration tests and external deployment scripts.

    Returns:
        FastAPI application instance
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Render card templates to PNG social images",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.include_router(health_router)
    app.include_router(previews_router)

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next) -> Any:  # type: ignore
        """Add request ID to all requests."""
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response

    @app.exception_handler(HTTPException)
    async def custom_http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """Custom HTTP exception handler with structured error response."""
        error_response = ErrorResponse(
            error=str(exc.detail),
            error_code=str(exc.status_code),
            details=None,
            request_id=getattr(request.state, "request_id", None),
        )

        logger.error(
            "HTTP exception",
            status_code=exc.status_code,
            detail=exc.detail,
            request_id=error_response.request_id,
        )

        return JSONResponse(status_code=exc.status_code, content=error_response.model_dump(mode="json"))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """General exception handler for unexpected errors."""
        error_response = ErrorResponse(
            error="Internal server error",
            error_code="INTERNAL_ERROR",
            details={"exception": str(exc)} if settings.debug else None,
            request_id=getattr(request.state, "request_id", None),
        )

        logger.error(
            "Unhandled exception",
            exception=str(exc),
            request_id=error_response.request_id,
            exc_info=True,
        )

        return JSONResponse(status_code=500, content=error_response.model_dump(mode="json"))

    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Service information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "health_check": "/health",
            "previews": "/previews" if settings.show_previews else None,
        }

    return app


app = create_app()


# Development server runner
def run_development_server() -> None:
    """Run development server with auto-reload."""
    settings = get_settings()
    uvicorn.run(
        "socialcards.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    run_development_server()
