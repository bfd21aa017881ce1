"""FastAPI application factory and main entrypoint."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from api.config import API_VERSION, get_settings
from api.exceptions import AisoError
from api.logging import setup_logging
from api.schemas.responses import ErrorCode, ErrorResponse
from worker.errors import ExtractionError

# Initialize logging
setup_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    logger.info(
        "Starting AISO Audit API",
        env=settings.env,
        debug=settings.debug,
        version=API_VERSION,
        result_store="redis" if settings.redis_url else "memory",
        generation_enabled=settings.generation_enabled,
    )

    yield

    logger.info("Shutting down AISO Audit API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="AISO Content Audit",
        description="Audit, benchmark and rewrite web content for search and answer engines",
        version=API_VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    # Middleware (order matters - first added = last executed)
    # CORS must be last (first to process)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging and tracing
    from api.middleware import LoggingMiddleware, RequestIDMiddleware

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Register exception handlers
    register_exception_handlers(app)

    # Register routers
    from api.routers import health, v1

    app.include_router(health.router, prefix="/api")
    app.include_router(v1.router, prefix="/v1")

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Map application and pipeline errors to JSON error envelopes."""

    @app.exception_handler(AisoError)
    async def aiso_error_handler(request: Request, exc: AisoError) -> ORJSONResponse:
        logger.warning(
            "Application error",
            error_code=exc.code,
            message=exc.message,
            path=request.url.path,
        )
        return ORJSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse.build(
                exc.code, exc.message, field=exc.field, details=exc.details or None
            ),
        )

    @app.exception_handler(ExtractionError)
    async def extraction_error_handler(request: Request, exc: ExtractionError) -> ORJSONResponse:
        """Pages that could not be fetched, were blocked, or had no usable content."""
        logger.warning(
            "Extraction failed",
            reason=exc.reason.value,
            url=exc.url,
            path=request.url.path,
        )
        return ORJSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=ErrorResponse.build(
                ErrorCode.EXTRACTION_FAILED,
                str(exc),
                details={"reason": exc.reason.value, "url": exc.url},
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        errors = jsonable_encoder(exc.errors())
        first_error = errors[0] if errors else {"msg": "Validation error"}

        # Drop the leading "body"/"query" segment
        field = ".".join(str(loc) for loc in first_error.get("loc", [])[1:])

        logger.warning(
            "Validation error",
            path=request.url.path,
            errors=errors,
        )
        return ORJSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=ErrorResponse.build(
                ErrorCode.VALIDATION_ERROR,
                first_error.get("msg", "Validation error"),
                field=field or None,
                details={"errors": errors},
            ),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            path=request.url.path,
            method=request.method,
        )
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse.build(
                ErrorCode.INTERNAL_ERROR, "An unexpected error occurred"
            ),
        )


app = create_app()


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
