"""
Roll-up Gate Quoting System - Main Application

FastAPI application serving the quoting core:
- Quote calculation with automatic motor/axle selection
- Quote saving, approval and deletion
- Catalog administration
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rollup_quotes.config.settings import settings
from rollup_quotes.database.base import close_db, init_db
from rollup_quotes.exceptions import (
    CatalogUnavailableError,
    IdempotencyConflictError,
    InvalidInputError,
    InvalidStatusTransitionError,
    PersistenceFailureError,
    QuoteNotFoundError,
)
from rollup_quotes.utils.logging import get_logger, request_logger, setup_logging

from rollup_quotes.api.routes import catalog, quotes

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    setup_logging()
    logger.info("Starting Roll-up Gate Quoting System", version=settings.app_version)

    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down Roll-up Gate Quoting System")
    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="""
## Roll-up Gate Quoting API

Prices custom roll-up gates from dimensions, profile and accessories,
selects a motor and axle for each gate, and stores confirmed quotes.

### Authentication

All endpoints except `/health` require a valid bearer token.
    """,
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing."""
    start_time = time.time()
    request_logger.log_request(method=request.method, path=request.url.path)

    response = await call_next(request)

    request_logger.log_response(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=(time.time() - start_time) * 1000,
    )
    return response


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed messages."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Validation error", "errors": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx may carry exception instances or Decimals that JSON cannot encode.
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc), "field": exc.field},
    )


@app.exception_handler(QuoteNotFoundError)
async def quote_not_found_handler(request: Request, exc: QuoteNotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvalidStatusTransitionError)
async def status_transition_handler(request: Request, exc: InvalidStatusTransitionError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


@app.exception_handler(IdempotencyConflictError)
async def idempotency_conflict_handler(request: Request, exc: IdempotencyConflictError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc), "quote_id": exc.quote_id},
    )


@app.exception_handler(CatalogUnavailableError)
async def catalog_unavailable_handler(request: Request, exc: CatalogUnavailableError):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Catalog unavailable, retry the request", "retry": True},
    )


@app.exception_handler(PersistenceFailureError)
async def persistence_failure_handler(request: Request, exc: PersistenceFailureError):
    logger.error("Quote save failed", error_message=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Quote could not be saved, retry with the same idempotency key",
            "retry": True,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(
        "Unhandled exception",
        error_type=type(exc).__name__,
        error_message=str(exc),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred"},
    )


app.include_router(quotes.router, prefix=f"{settings.api_prefix}/quotes", tags=["Quotes"])
app.include_router(catalog.router, prefix=f"{settings.api_prefix}/catalog", tags=["Catalog"])


@app.get("/health", tags=["System"])
async def health_check():
    """System health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
    }


def run() -> None:
    import uvicorn

    uvicorn.run(
        "rollup_quotes.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=settings.workers if not settings.debug else 1,
    )


if __name__ == "__main__":
    run()
