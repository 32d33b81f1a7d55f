"""Async PostgreSQL access for the storefront.

One ``AsyncSession`` is one unit of work: an HTTP request or a maintenance
script run. Writes made through it (a hold row and the product status change,
for instance) are committed together or not at all.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from storefront.config import settings
from storefront.core.errors import StoreError
from storefront.infra.logging import get_logger

logger = get_logger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def engine_options() -> dict[str, Any]:
    """Pool options for the async engine, sized for a Cloud Run instance."""
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_pool_max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 1800,
        "echo": settings.debug,
    }


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the process-wide engine, created on first use."""
    global _engine, _session_factory

    if _session_factory is None:
        options = engine_options()
        logger.info(
            "Creating database engine",
            pool_size=options["pool_size"],
            max_overflow=options["max_overflow"],
        )
        _engine = create_async_engine(settings.database_url, **options)
        # Rows stay readable after commit; product views are built from them
        _session_factory = async_sessionmaker(
            bind=_engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    return _session_factory


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Open a session that commits when the block exits normally.

    Any exception rolls the whole unit of work back and propagates. A failed
    commit is reported as StoreError.

    Example:
        async with get_db_session() as session:
            store = SqlCatalogStore(session)
            await InquiryService(store).place_hold(product_id, request)
    """
    session = get_session_factory()()

    try:
        yield session
        try:
            await session.commit()
        except SQLAlchemyError as e:
            logger.error("Commit failed", error=str(e))
            raise StoreError(f"commit failed: {e}") from e

    except Exception:
        await session.rollback()
        raise

    finally:
        await session.close()


async def close_db_engine() -> None:
    """Dispose of the engine and its pooled connections (application shutdown)."""
    global _engine, _session_factory

    if _engine is not None:
        logger.info("Closing database engine")
        await _engine.dispose()
    _engine = None
    _session_factory = None


async def verify_db_connection() -> bool:
    """Run ``SELECT 1``; False when the database cannot be reached."""
    try:
        async with get_db_session() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Database connection failed", error=str(e))
        return False

    logger.info("Database connection verified")
    return True
