"""Main FastAPI application module for InferDev.

This module creates and configures the FastAPI application instance with all
necessary middleware, routers, and lifecycle handlers.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from inferdev.api.middleware.error_handler import ErrorHandlerMiddleware, application_error_response
from inferdev.api.middleware.logging_middleware import LoggingMiddleware
from inferdev.api.middleware.request_id import RequestIDMiddleware, get_request_id
from inferdev.clients.recommender_client import RecommenderClient
from inferdev.core.config import Settings, get_settings
from inferdev.services.catalog_service import CatalogService
from inferdev.services.session_service import SurveySessionManager, SurveySessionStore
from inferdev.services.survey_service import SurveyService
from inferdev.utils.constants import SurveyMode
from inferdev.utils.exceptions import InferDevError
from inferdev.utils.logger import get_logger

logger = get_logger(__name__)


def build_services(app: FastAPI, settings: Settings) -> None:
    """Create the backend client and survey services on ``app.state``."""
    mode = SurveyMode(settings.SURVEY_MODE)

    client: Optional[RecommenderClient] = None
    if mode != SurveyMode.LOCAL:
        client = RecommenderClient(
            settings.RECOMMENDER_API_URL,
            token=settings.RECOMMENDER_API_TOKEN,
            timeout=settings.RECOMMENDER_TIMEOUT,
        )

    catalog_service = CatalogService(
        client=client,
        catalog_path=settings.CATALOG_PATH,
        cache_ttl_seconds=settings.CATALOG_CACHE_TTL_SECONDS,
    )
    survey_service = SurveyService(catalog_service, client=client, user_id=settings.SURVEY_USER_ID)
    store = SurveySessionStore(ttl_minutes=settings.SESSION_TTL_MINUTES, max_sessions=settings.MAX_SESSIONS)

    app.state.recommender_client = client
    app.state.catalog_service = catalog_service
    app.state.session_manager = SurveySessionManager(survey_service, store=store, default_mode=mode)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle events.

    Args:
        app: FastAPI application instance
    """
    settings: Settings = app.state.settings
    logger.info(
        "Starting InferDev API",
        extra={
            "app_name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.APP_ENV,
            "survey_mode": settings.SURVEY_MODE,
        }
    )

    build_services(app, settings)

    yield

    logger.info("Shutting down InferDev API")
    if app.state.recommender_client is not None:
        await app.state.recommender_client.close()


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to run with; the environment's when omitted

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Career survey that recommends a developer job from answers to adaptive questions",
        version=settings.APP_VERSION,
        docs_url=f"{settings.API_V1_PREFIX}/docs" if settings.ENABLE_API_DOCS else None,
        redoc_url=f"{settings.API_V1_PREFIX}/redoc" if settings.ENABLE_API_DOCS else None,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json" if settings.ENABLE_API_DOCS else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app = register_exception_handlers(app, settings)
    app = register_middleware(app, settings)
    app = register_routers(app, settings)
    app = register_health_checks(app, settings)

    if settings.ENABLE_METRICS:
        setup_metrics(app)

    return app


def register_exception_handlers(app: FastAPI, settings: Settings) -> FastAPI:
    """Register custom exception handlers.

    Args:
        app: FastAPI application instance
        settings: Application settings

    Returns:
        FastAPI: Application with exception handlers registered
    """

    @app.exception_handler(InferDevError)
    async def application_exception_handler(request: Request, exc: InferDevError) -> JSONResponse:
        """Map application errors to their HTTP status and error envelope."""
        return application_error_response(exc, request, debug=settings.APP_DEBUG)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Handle HTTP exceptions."""
        request_id = get_request_id()

        logger.warning(
            f"HTTP exception: {exc.detail}",
            extra={
                "request_id": request_id,
                "status_code": exc.status_code,
                "path": request.url.path,
            }
        )

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": "HTTP_ERROR",
                    "message": exc.detail,
                    "request_id": request_id,
                }
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed request bodies, e.g. an unknown enum value in the intake form."""
        request_id = get_request_id()
        errors = exc.errors()

        logger.warning(
            "Request validation error",
            extra={
                "request_id": request_id,
                "errors": [error.get("msg") for error in errors],
                "path": request.url.path,
            }
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": {
                    "code": "REQUEST_VALIDATION_ERROR",
                    "message": "Validation error",
                    "details": {
                        "errors": [
                            {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
                            for error in errors
                        ]
                    },
                    "request_id": request_id,
                }
            },
        )

    return app


def register_middleware(app: FastAPI, settings: Settings) -> FastAPI:
    """Register application middleware.

    Args:
        app: FastAPI application instance
        settings: Application settings

    Returns:
        FastAPI: Application with middleware registered
    """
    # Executed in reverse order of registration
    app.add_middleware(ErrorHandlerMiddleware, debug=settings.APP_DEBUG)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=1024)

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time to response headers."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        return response

    return app


def register_routers(app: FastAPI, settings: Settings) -> FastAPI:
    """Register API routers under the versioned prefix.

    Args:
        app: FastAPI application instance
        settings: Application settings

    Returns:
        FastAPI: Application with routers registered
    """
    # Import routers here to avoid circular imports
    from inferdev.routers import catalog, health, survey

    api_prefix = settings.API_V1_PREFIX
    app.include_router(health.router, prefix=api_prefix)
    app.include_router(catalog.router, prefix=api_prefix)
    app.include_router(survey.router, prefix=api_prefix)

    return app


def register_health_checks(app: FastAPI, settings: Settings) -> FastAPI:
    """Register unversioned health check endpoints.

    Args:
        app: FastAPI application instance
        settings: Application settings

    Returns:
        FastAPI: Application with health checks registered
    """

    @app.get("/health", tags=["Health"], summary="Basic health check", response_model=Dict[str, Any])
    async def health_check() -> Dict[str, Any]:
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.APP_ENV,
        }

    @app.get("/", tags=["Root"], summary="Root endpoint", response_model=Dict[str, str])
    async def root() -> Dict[str, str]:
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "docs": f"{settings.API_V1_PREFIX}/docs",
            "health": "/health",
        }

    return app


def setup_metrics(app: FastAPI) -> None:
    """Setup Prometheus metrics.

    Args:
        app: FastAPI application instance
    """
    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=[".*health.*", "/metrics"],
        inprogress_name="inferdev_inprogress",
        inprogress_labels=True,
    )

    instrumentator.instrument(app).expose(
        app,
        endpoint="/metrics",
        tags=["Metrics"],
        include_in_schema=False,
    )

    logger.info("Prometheus metrics enabled at /metrics")


# Create the application instance
app = create_application()


__all__ = ["app", "create_application"]


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "inferdev.api.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=settings.is_development(),
        log_config=None,
        access_log=False,
    )
