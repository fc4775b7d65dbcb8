"""Main FastAPI Application

Wires middleware, global exception handlers, the cleanup scheduler and
the API routers from `presentation`.

Run locally for development with:

    uvicorn main:app --reload

Keep application logic in `application`, `core`, and
`infrastructure` to preserve a clean architecture.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from loguru import logger

from core.config import settings
from core.database import init_db, close_db, health_check
from core.logging_config import configure_logging  # noqa: F401  (configures on import)
from core.exceptions import (
    DomainException,
    AuthenticationException,
    AuthorizationException,
    ConcurrencyConflictException,
    DuplicateResourceException,
    ValidationException,
    ResourceNotFoundException,
    RepositoryException,
    StorageException,
)
from presentation.api.v1.container import get_cleanup_scheduler
from presentation.api.v1.endpoints import (
    admin_cleanup_router,
    applications_router,
    files_router,
)
from presentation.api.v1.schemas.common import error_response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})...")

    await init_db()
    logger.info("Database initialized")

    scheduler = get_cleanup_scheduler()
    if settings.CLEANUP_SCHEDULER_ENABLED:
        scheduler.start()

    yield

    # Shutdown
    logger.info("Shutting down gracefully...")
    await scheduler.stop()
    await close_db()
    logger.info("Database connections closed")


# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Talent marketplace: applications, chat bootstrap and retention cleanup",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)


# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global Exception Handlers
@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException):
    """Handle domain-level exceptions"""
    if isinstance(exc, AuthenticationException):
        status_code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(exc, AuthorizationException):
        status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, ValidationException):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, ResourceNotFoundException):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, (DuplicateResourceException, ConcurrencyConflictException)):
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(exc, (RepositoryException, StorageException)):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        status_code = status.HTTP_400_BAD_REQUEST

    if status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}")
        message = "Internal server error"
    else:
        logger.warning(f"Domain exception: {str(exc)}")
        message = exc.message if isinstance(exc, ValidationException) else str(exc)

    return JSONResponse(status_code=status_code, content=error_response(message))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400 with the field errors"""
    logger.warning(f"Request validation failed on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response("Validation failed", exc.errors()),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler"""
    logger.opt(exception=exc).error(f"Unhandled exception: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response("Internal server error")
    )


# Include API routes
app.include_router(
    files_router,
    prefix="/api/v1/files",
    tags=["Files"]
)

app.include_router(
    applications_router,
    prefix="/api/v1/applications",
    tags=["Applications"]
)

app.include_router(
    admin_cleanup_router,
    prefix="/api/v1/admin/cleanup",
    tags=["Admin Cleanup"]
)


@app.get("/health", tags=["Health"])
async def health():
    """Liveness probe with a database ping"""
    database_ok = await health_check()
    return {
        "success": True,
        "message": "OK",
        "data": {
            "status": "healthy" if database_ok else "degraded",
            "database": database_ok,
            "environment": settings.ENVIRONMENT,
        },
    }
