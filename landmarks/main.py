# Application assembly: lifespan-managed upstream client, middleware, error envelopes.

import uuid
from contextlib import asynccontextmanager
from typing import Callable

import httpx
import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from landmarks.api.routes import router as landmarks_router
from landmarks.core.config import Settings, settings as default_settings
from landmarks.core.exceptions import (
    LandmarkError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from landmarks.core.middleware import RateLimitMiddleware
from landmarks.logging import configure_logging
from landmarks.middleware.logging import LoggingMiddleware
from landmarks.models.dto import (
    ErrorResponse,
    ValidationErrorResponse,
    dump,
)
from landmarks.services.rate_limiter import RateLimiter
from landmarks.services.wikipedia import WikipediaClient, build_http_client

logger = structlog.get_logger(__name__)

HttpClientFactory = Callable[[Settings], httpx.AsyncClient]


def create_app(
    settings: Settings = default_settings,
    http_client_factory: HttpClientFactory = build_http_client,
) -> FastAPI:
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("application_startup", version=settings.VERSION, env=settings.ENV)
        http_client = http_client_factory(settings)
        app.state.wikipedia = WikipediaClient(http_client, settings)
        app.state.rate_limiter = RateLimiter(
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
            max_clients=settings.RATE_LIMIT_MAX_CLIENTS,
            sweep_interval=settings.RATE_LIMIT_SWEEP_SECONDS,
        )
        try:
            yield
        finally:
            logger.info("application_shutdown")
            await http_client.aclose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.BRIEF_DESCRIPTION,
        lifespan=lifespan,
    )

    # Last added runs first: logging wraps rate limiting
    app.add_middleware(RateLimitMiddleware, path_prefix="/api/landmarks")
    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_methods=["GET"],
            allow_headers=["*"],
            expose_headers=["Retry-After", "X-Request-ID"],
        )
    app.add_middleware(LoggingMiddleware)

    app.include_router(landmarks_router, prefix="/api")

    @app.get("/health", status_code=status.HTTP_200_OK)
    async def health_check():
        return {"status": "ok", "version": settings.VERSION}

    _register_exception_handlers(app)
    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        body = ValidationErrorResponse(error=exc.error, details=exc.details)
        return JSONResponse(status_code=exc.status_code, content=dump(body))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=exc.status_code, content=dump(ErrorResponse(error=exc.error)))

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError):
        logger.error(
            "upstream_request_failed",
            path=request.url.path,
            upstream_status=exc.upstream_status,
            message=exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=dump(ErrorResponse(error=exc.error, message=exc.message)),
        )

    @app.exception_handler(LandmarkError)
    async def landmark_error_handler(request: Request, exc: LandmarkError):
        return JSONResponse(
            status_code=exc.status_code,
            content=dump(ErrorResponse(error=exc.error, message=exc.message)),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        error_id = str(uuid.uuid4())
        logger.error("unhandled_exception", error_id=error_id, error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=dump(ErrorResponse(
                error="Internal server error",
                message="An unexpected error occurred. Please report this error ID.",
                error_id=error_id,
            )),
        )


app = create_app()
