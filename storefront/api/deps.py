"""FastAPI dependencies for dependency injection.

Provides:
- Database session scoped to the request (one unit of work)
- Catalog store over that session
- Storage client
- Services wired from settings and the site settings cache
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.site_settings import get_site_settings_cache
from storefront.infra.database import get_db_session
from storefront.infra.storage import StorageClient, get_storage_client
from storefront.services.admin_service import AdminService
from storefront.services.catalog_service import CatalogService
from storefront.services.image_service import ImageService
from storefront.services.inquiry_service import InquiryService
from storefront.services.spec_sheet_service import SpecSheetService
from storefront.store.sql_store import SqlCatalogStore


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session committed when the request succeeds.

    Yields:
        AsyncSession
    """
    async with get_db_session() as session:
        yield session


DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_store(db: DbSession) -> SqlCatalogStore:
    return SqlCatalogStore(db)


async def get_storage() -> StorageClient:
    """Get storage client dependency."""
    return get_storage_client()


# Type aliases for cleaner annotations
Store = Annotated[SqlCatalogStore, Depends(get_store)]
Storage = Annotated[StorageClient, Depends(get_storage)]


async def get_catalog_service(store: Store) -> CatalogService:
    return CatalogService(store)


async def get_inquiry_service(store: Store) -> InquiryService:
    """Inquiry service using the hold duration currently configured by the site."""
    hold_duration_hours = await get_site_settings_cache().hold_duration_hours()
    return InquiryService(store, hold_duration_hours=hold_duration_hours)


async def get_spec_sheet_service(store: Store) -> SpecSheetService:
    return SpecSheetService(store)


async def get_admin_service(store: Store) -> AdminService:
    return AdminService(store)


async def get_image_service(store: Store, storage: Storage) -> ImageService:
    return ImageService(store, storage)


Catalog = Annotated[CatalogService, Depends(get_catalog_service)]
Inquiries = Annotated[InquiryService, Depends(get_inquiry_service)]
SpecSheets = Annotated[SpecSheetService, Depends(get_spec_sheet_service)]
Admin = Annotated[AdminService, Depends(get_admin_service)]
Images = Annotated[ImageService, Depends(get_image_service)]
