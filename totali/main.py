"""Main FastAPI application entry point.

This module builds the Totali API. It handles all core application setup
including:
- FastAPI application construction and configuration
- Middleware setup for CORS, correlation ids and request logging
- Database and pricing-cache lifecycle
- Route registration and API versioning
- Error rendering into the response envelope
- Health check endpoints

There is no module-level application: servers and tests call
``create_application()``.
"""

# Standard library imports
import time
from contextlib import asynccontextmanager
from typing import Optional

# FastAPI imports
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Internal imports
from totali.api.v1.router import api_router
from totali.core.config import Settings, get_settings
from totali.core.exceptions import AppException
from totali.core.logging import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
    get_logger,
    setup_logging,
)
from totali.database.session import SessionManager
from totali.models.domain.common import error_body
from totali.services.categories import ensure_system_categories
from totali.services.pricing_cache import PricingCache

logger = get_logger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path"))
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    Handles all application setup including middleware, routes, and error handlers.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Handle application startup and shutdown events.
        This context manager ensures proper resource management.
        """
        setup_logging(settings)
        logger.info("Starting up application...", version=settings.APP_VERSION)

        app.state.db = SessionManager(settings.DB)
        app.state.pricing_cache = PricingCache.from_settings(settings)
        try:
            await app.state.db.init_models()
            if settings.FEATURES.SEED_SYSTEM_CATEGORIES:
                async with app.state.db.session() as session:
                    await ensure_system_categories(session)
            logger.info("Services initialized successfully")

            yield  # Application runs here

        except Exception as e:
            logger.error("Startup failed", error=e)
            raise

        finally:
            logger.info("Shutting down application...")
            await app.state.pricing_cache.close()
            await app.state.db.dispose()
            logger.info("Cleanup completed")

    # Initialize FastAPI with custom configurations
    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Personal item value tracking and usage analytics",
        version=settings.APP_VERSION,
        lifespan=lifespan,
        docs_url="/api/docs" if not settings.PROD else None,
        redoc_url="/api/redoc" if not settings.PROD else None,
    )
    app.state.settings = settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add custom middleware; the last one added runs first
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        """Handle custom application exceptions"""
        if exc.status_code >= 500:
            logger.error("Request failed", error=exc, path=request.url.path)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.detail),
            headers=exc.headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors with clear messages"""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=error_body("Validation failed", _validation_message(exc))
        )

    # Register routers
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    async def health_check(request: Request):
        """
        Health check endpoint for monitoring systems.
        Checks critical service dependencies.
        """
        database_ok = await request.app.state.db.healthcheck()
        services_status = {
            "database": "connected" if database_ok else "unavailable",
            "pricing_cache": await request.app.state.pricing_cache.status(),
        }
        body = {
            "status": "healthy" if database_ok else "unhealthy",
            "timestamp": time.time(),
            "version": app.version,
            "services": services_status,
            "database_metrics": request.app.state.db.get_metrics(),
        }
        if not database_ok:
            return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body)
        return body

    app.add_api_route("/health", health_check, methods=["GET"], tags=["health"])
    app.add_api_route(
        f"{settings.API_V1_PREFIX}/health",
        health_check,
        methods=["GET"],
        tags=["health"],
        include_in_schema=False,
    )

    return app


# Only run the server directly in development
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    # Run the application with hot reload in development
    uvicorn.run(
        "totali.main:create_application",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=not settings.PROD,
        log_level="debug" if settings.DEBUG else "info"
    )
