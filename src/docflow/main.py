"""DocFlow - Main FastAPI Application

Document management with an admin-reviewed replace/remove workflow.

This module creates and configures the FastAPI application, including:
- API routers (documents, permission requests)
- Middleware (request ID correlation, CORS)
- Exception handlers mapping workflow errors to HTTP responses
- Health and observability endpoints
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .config import get_settings
from .documents.router import router as documents_router
from .errors import DocumentWorkflowError
from .observability.logging_config import configure_logging
from .observability.metrics import workflow_denials_total
from .observability.middleware import RequestIDMiddleware
from .observability.router import router as observability_router
from .permission_requests.router import router as permission_requests_router

settings = get_settings()

# Configure logging
configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)

_docs_enabled = settings.ENV != "production"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("DocFlow API starting up...")
    logger.info(f"Environment: {settings.ENV}")
    logger.info(f"Upload directory: {os.path.abspath(settings.UPLOAD_DIR)}")

    yield

    logger.info("DocFlow API shutting down...")


# Create FastAPI application
app = FastAPI(
    title="DocFlow API",
    description="Document management with admin-reviewed replace and remove permissions",
    version=__version__,
    docs_url="/docs" if _docs_enabled else None,
    redoc_url="/redoc" if _docs_enabled else None,
    openapi_url="/openapi.json" if _docs_enabled else None,
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE CONFIGURATION
# =============================================================================

# Request correlation
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(DocumentWorkflowError)
async def workflow_exception_handler(
    request: Request,
    exc: DocumentWorkflowError
) -> JSONResponse:
    """Render workflow violations (not found, forbidden, bad request)."""
    logger.info(
        f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}",
        extra={"method": request.method, "path": request.url.path, "status_code": exc.status_code},
    )
    workflow_denials_total.labels(error=exc.error_code).inc()
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error_code,
            "message": exc.message,
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies, bad enum values and missing form fields"""
    logger.warning(f"Rejected {request.method} {request.url.path}: invalid payload")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request,
    exc: SQLAlchemyError
) -> JSONResponse:
    """Unexpected storage failures. The transaction is rolled back by get_db."""
    logger.error(
        f"Database failure on {request.method} {request.url.path}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "database_error",
            "message": "The document store is unavailable. Please try again later.",
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "Something went wrong while processing the request.",
        },
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

# Observability (health, metrics, ready)
app.include_router(observability_router)

app.include_router(documents_router, prefix="/api/v1")
app.include_router(permission_requests_router, prefix="/api/v1")

# Uploaded files, addressed by the url_doc of each document
app.mount(
    "/uploads",
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)


# =============================================================================
# ROOT ENDPOINTS
# =============================================================================

@app.get("/", include_in_schema=False)
async def root() -> dict[str, Any]:
    """Root endpoint - API information."""
    return {
        "name": "DocFlow API",
        "version": __version__,
        "status": "running",
        "docs": "/docs" if _docs_enabled else None,
    }


@app.get("/api/v1", include_in_schema=False)
async def api_root() -> dict[str, Any]:
    """API v1 root endpoint."""
    return {
        "version": "v1",
        "status": "active",
        "endpoints": {
            "documents": "/api/v1/documents",
            "permission_requests": "/api/v1/permission-requests",
        }
    }


def create_app() -> FastAPI:
    """Application factory for tests and ASGI servers."""
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "docflow.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.ENV == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
