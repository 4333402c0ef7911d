"""
FastAPI main application for the Library Catalog API.
"""

import time
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config import APIConfig
from api.config import config as api_config
from api.dependencies import get_store
from api.responses import HealthResponse, error_response
from api.routers import authors, books
from catalog.errors import AppError
from catalog.seed import sample_authors, sample_books
from catalog.store import EntityStore
from utilities.logger import RequestLogger, setup_logging

# Setup logging
logger = structlog.get_logger(__name__)


def _request_validation_message(exc: RequestValidationError) -> tuple:
    errors = exc.errors()
    first = errors[0] if errors else {}
    if first.get("type") == "json_invalid":
        return "Invalid JSON payload", "INVALID_JSON"
    if first.get("type") == "missing" and tuple(first.get("loc", ()))[:1] == ("body",):
        return "Request body is required", "VALIDATION_ERROR"
    return first.get("msg", "Invalid request"), "VALIDATION_ERROR"


def create_app(
    settings: Optional[APIConfig] = None,
    store: Optional[EntityStore] = None,
) -> FastAPI:
    """
    Build the application around an explicitly owned store.

    Args:
        settings: Configuration; defaults to the environment-derived ``config``
        store: Store to serve; a new one (seeded per ``seed_sample_data``) when omitted
    """
    settings = settings or api_config
    if store is None:
        store = EntityStore()
        if settings.seed_sample_data:
            store.seed(sample_authors(), sample_books())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        setup_logging(
            log_level=settings.log_level,
            log_format=settings.log_format,
            log_file=settings.log_file,
            debug=settings.debug,
        )
        logger.info("Starting Library Catalog API", **app.state.store.counts())
        yield
        logger.info("Shutting down Library Catalog API")

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-Id", str(uuid4()))
        # Read back by the 500 handler, which runs outside this middleware
        request.state.request_id = request_id
        request_logger = RequestLogger().bind_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        start = time.time()
        try:
            response = await call_next(request)
        except Exception as exc:
            request_logger.log_request_failed(str(exc), int((time.time() - start) * 1000))
            raise
        duration_ms = int((time.time() - start) * 1000)
        request_logger.log_request_complete(response.status_code, duration_ms)
        response.headers["X-Request-Id"] = request_id
        return response

    # Exception handlers
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """Handle typed catalog errors."""
        logger.warning(
            "Request rejected",
            error_code=exc.error_code,
            status_code=exc.status_code,
            error=exc.message,
            path=request.url.path,
        )
        return error_response(
            exc.message,
            exc.status_code,
            exc.error_code,
            request.url.path,
            request.method,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Handle undecodable or missing request bodies."""
        message, error_code = _request_validation_message(exc)
        return error_response(
            message,
            status.HTTP_400_BAD_REQUEST,
            error_code,
            request.url.path,
            request.method,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions, including unmatched routes."""
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message, error_code = f"Route {request.url.path} not found", "ROUTE_NOT_FOUND"
        else:
            message, error_code = str(exc.detail), "HTTP_ERROR"
        return error_response(
            message,
            exc.status_code,
            error_code,
            request.url.path,
            request.method,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path, exc_info=exc)
        response = error_response(
            str(exc) if settings.debug else "Internal Server Error",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_SERVER_ERROR",
            request.url.path,
            request.method,
            stack="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)) if settings.debug else None,
        )
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            response.headers["X-Request-Id"] = request_id
        return response

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health_check(request: Request):
        """Health check endpoint."""
        counts = get_store(request).counts()
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(timezone.utc),
            version=settings.api_version,
            authors=counts["authors"],
            books=counts["books"],
        )

    app.include_router(authors.router)
    app.include_router(books.router)

    return app


# Create FastAPI application
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=api_config.debug,
        log_level="info"
    )
