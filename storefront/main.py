"""FastAPI application entry point.

Storefront API for the furniture and art catalog: public catalog reads,
customer actions and the admin back-office.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront import __version__
from storefront.config import settings
from storefront.core.errors import (
    BlobStoreError,
    ConflictError,
    EntityNotFoundError,
    ImageValidationError,
    ProductUnavailableError,
    StoreError,
)
from storefront.core.site_settings import get_site_settings_cache
from storefront.infra.database import close_db_engine, get_db_session, verify_db_connection
from storefront.infra.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from storefront.schemas.common import ErrorResponse

# Import routers
from storefront.api.routes.actions import router as actions_router
from storefront.api.routes.admin import router as admin_router
from storefront.api.routes.catalog import router as catalog_router
from storefront.api.routes.health import router as health_router

# Setup logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Startup:
    - Load site settings and start their refresh loop
    - Verify database connection

    Shutdown:
    - Stop the refresh loop
    - Close database connections
    """
    logger.info("Storefront starting", environment=settings.environment)

    site_settings = get_site_settings_cache()
    try:
        async with get_db_session() as session:
            await site_settings.load(session)
    except Exception as e:
        logger.warning("Failed to load site settings, using defaults", error=str(e))
    await site_settings.start_refresh_loop(get_db_session)

    db_ok = await verify_db_connection()
    if not db_ok:
        logger.warning("Database connection failed - will retry on first request")

    yield

    # Shutdown
    logger.info("Storefront shutting down")
    await site_settings.stop()
    await close_db_engine()
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="Warehouse 414 Storefront",
    description="Catalog, customer actions and back-office API",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.environment == "dev" else None,
    redoc_url=None,
)

# CORS middleware (mainly for local development)
if settings.environment == "dev":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Bind a request id to every log event of the request and echo it back."""
    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    bind_request_context(request_id, request.method, request.url.path)
    try:
        response = await call_next(request)
    finally:
        clear_request_context()
    response.headers["X-Request-ID"] = request_id
    return response


# =============================================================================
# Exception Handlers
# =============================================================================


def _error(status_code: int, exc: Exception) -> JSONResponse:
    body = ErrorResponse(error=str(exc), error_type=type(exc).__name__)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(EntityNotFoundError)
async def not_found_handler(request: Request, exc: EntityNotFoundError) -> JSONResponse:
    logger.info("Entity not found", kind=exc.kind, key=str(exc.key), path=request.url.path)
    return _error(status.HTTP_404_NOT_FOUND, exc)


@app.exception_handler(ProductUnavailableError)
async def unavailable_handler(request: Request, exc: ProductUnavailableError) -> JSONResponse:
    return _error(status.HTTP_409_CONFLICT, exc)


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return _error(status.HTTP_409_CONFLICT, exc)


@app.exception_handler(ImageValidationError)
async def image_validation_handler(request: Request, exc: ImageValidationError) -> JSONResponse:
    logger.info("Image rejected", error=str(exc), path=request.url.path)
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, exc)


@app.exception_handler(StoreError)
@app.exception_handler(BlobStoreError)
async def unavailable_backend_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Backend unavailable", error=str(exc), path=request.url.path)
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, exc)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions."""
    logger.error(
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "Internal server error",
            "error_type": type(exc).__name__,
        },
    )


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router, tags=["Health"])
app.include_router(catalog_router, tags=["Catalog"])
app.include_router(actions_router, tags=["Customer actions"])
app.include_router(admin_router, prefix="/admin", tags=["Admin"])


@app.get("/")
async def root() -> dict:
    """Root endpoint - basic service info."""
    return {
        "service": "Warehouse 414 Storefront",
        "version": __version__,
        "environment": settings.environment,
    }
