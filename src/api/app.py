"""
FastAPI Application Factory.

Usage:
    # Development
    uvicorn api.app:create_app --factory --reload

    # Production
    uvicorn api.app:app --host 0.0.0.0 --port 8080 --workers 4
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.constants import (
    ENDPOINT_NOT_FOUND_MESSAGE,
    INTERNAL_ERROR_MESSAGE,
    PRODUCTS_REQUIRED_MESSAGE,
)
from config.settings import get_settings
from core.logging import configure_logging, get_logger
from core.middleware import RequestTracingMiddleware
from api.routes.outfits import error_envelope


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Store clients are created lazily on the first generation request.
    """
    settings = get_settings()

    configure_logging(
        json_logs=settings.is_production,
        log_level="DEBUG" if settings.debug else "INFO",
    )

    logger.info(
        "Starting outfit generator API",
        environment=settings.environment,
        port=settings.port,
        catalog_table=settings.catalog_table,
        private_store_configured=settings.private_store_configured,
        enforce_outfit_constraints=settings.enforce_outfit_constraints,
    )

    yield

    logger.info("Shutting down outfit generator API")


# =============================================================================
# Error envelopes
# =============================================================================

async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    # A missing body is treated like a missing products array
    if any(
        "products" in error.get("loc", ()) or tuple(error.get("loc", ())) == ("body",)
        for error in errors
    ):
        message = PRODUCTS_REQUIRED_MESSAGE
    elif errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {location} {first.get('msg', '')}".strip()
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content=error_envelope(message))


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Any unmatched route, including a known path with the wrong method, is a 404
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content=error_envelope(ENDPOINT_NOT_FOUND_MESSAGE))
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", error=str(exc), error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content=error_envelope(INTERNAL_ERROR_MESSAGE))


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title="Outfit Generator API",
        description="""
        Assembles complete outfits from product IDs.

        ## Main Endpoints

        - `POST /generate` - Generate an outfit around the given products
        - `GET /models` - Available generation models

        ## Health Checks

        - `/health` - Basic health check
        - `/health/detailed` - Catalog and private store status
        - `/ready` - Kubernetes readiness probe
        - `/live` - Kubernetes liveness probe
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # =========================================================================
    # Middleware (order matters - first added = outermost)
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )

    # Request tracing (adds X-Request-ID, logs timing)
    app.add_middleware(RequestTracingMiddleware)

    # =========================================================================
    # Error handlers
    # =========================================================================

    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    # =========================================================================
    # Routes
    # =========================================================================

    from api.routes.health import router as health_router
    app.include_router(health_router, tags=["Health"])

    from api.routes.outfits import router as outfits_router
    app.include_router(outfits_router)

    return app


# Create default app instance for uvicorn
# Usage: uvicorn api.app:app
app = create_app()
