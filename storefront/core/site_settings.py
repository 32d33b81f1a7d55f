"""Site settings cache with periodic refresh from database.

Key/value settings (such as ``hold_duration_hours``) are edited from the
back-office and stored in the ``settings`` table. Business logic reads them
from an immutable in-memory snapshot instead of querying the table on every
operation. The snapshot is swapped as a whole on each reload.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from types import MappingProxyType

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.config import settings
from storefront.infra.logging import get_logger

logger = get_logger(__name__)

HOLD_DURATION_KEY = "hold_duration_hours"


def parse_hold_duration(value: str | None, default: int) -> int:
    """Parse a stored hold duration in hours.

    Missing, non-integer and non-positive values fall back to ``default``.
    """
    if value is None:
        return default
    try:
        hours = int(value.strip())
    except ValueError:
        return default
    return hours if hours > 0 else default


@dataclass(frozen=True)
class SiteSettingsSnapshot:
    """Immutable view of the settings table at one point in time."""

    values: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def hold_duration_hours(self, default: int | None = None) -> int:
        fallback = settings.default_hold_duration_hours if default is None else default
        return parse_hold_duration(self.get(HOLD_DURATION_KEY), fallback)


class SiteSettingsCache:
    """In-memory cache for site settings.

    Loads settings from database and refreshes periodically. Readers always
    see a complete snapshot: a reload replaces it atomically under a lock.
    """

    def __init__(self, refresh_interval_seconds: float = 300) -> None:
        """Initialize the site settings cache.

        Args:
            refresh_interval_seconds: Interval between cache refreshes (default: 5 minutes)
        """
        self._snapshot = SiteSettingsSnapshot()
        self._refresh_interval = refresh_interval_seconds
        self._lock = asyncio.Lock()
        self._refresh_task: asyncio.Task[None] | None = None

    async def snapshot(self) -> SiteSettingsSnapshot:
        """Current settings snapshot (empty until the first load)."""
        async with self._lock:
            return self._snapshot

    async def hold_duration_hours(self) -> int:
        """Configured hold duration, 48 hours unless overridden."""
        return (await self.snapshot()).hold_duration_hours()

    async def load(self, db_session: AsyncSession) -> None:
        """Load all settings from database.

        Args:
            db_session: Active database session
        """
        try:
            result = await db_session.execute(text("SELECT key, value FROM settings"))
            rows = result.fetchall()

            snapshot = SiteSettingsSnapshot(
                values=MappingProxyType({key: value for key, value in rows})
            )

            async with self._lock:
                self._snapshot = snapshot

            logger.info("Loaded site settings", keys=sorted(snapshot.values))

        except Exception as e:
            logger.error(
                "Failed to load site settings from database",
                error=str(e),
                exc_info=True,
            )
            raise

    async def start_refresh_loop(
        self,
        db_session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]],
    ) -> None:
        """Start periodic refresh loop in background.

        Args:
            db_session_factory: Function that returns an async context manager for database sessions
        """
        if self._refresh_task is not None:
            logger.warning("Refresh loop already running")
            return

        logger.info("Starting site settings refresh loop")
        self._refresh_task = asyncio.create_task(
            self._refresh_loop(db_session_factory)
        )

    async def stop(self) -> None:
        """Stop the periodic refresh loop."""
        if self._refresh_task is None:
            logger.debug("No refresh loop running")
            return

        logger.info("Stopping site settings refresh loop")
        self._refresh_task.cancel()

        try:
            await self._refresh_task
        except asyncio.CancelledError:
            logger.info("Refresh loop cancelled successfully")

        self._refresh_task = None

    async def _refresh_loop(
        self,
        db_session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]],
    ) -> None:
        while True:
            await asyncio.sleep(self._refresh_interval)
            try:
                async with db_session_factory() as session:
                    await self.load(session)

            except asyncio.CancelledError:
                logger.info("Refresh loop cancelled")
                raise
            except Exception as e:
                logger.error(
                    "Error in refresh loop, will retry after interval",
                    error=str(e),
                    interval_seconds=self._refresh_interval,
                )


# Global singleton instance
_site_settings_cache: SiteSettingsCache | None = None


def get_site_settings_cache() -> SiteSettingsCache:
    """Get or create the global site settings cache singleton."""
    global _site_settings_cache

    if _site_settings_cache is None:
        _site_settings_cache = SiteSettingsCache(
            refresh_interval_seconds=settings.site_settings_refresh_seconds,
        )
        logger.info("Created global SiteSettingsCache singleton")

    return _site_settings_cache
