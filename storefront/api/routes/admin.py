"""Back-office endpoints.

Authentication is handled in front of the service; every route here assumes
an authorized admin.
"""

from uuid import UUID

from fastapi import APIRouter, File, Query, UploadFile, status

from storefront.api.deps import Admin, Images, Inquiries
from storefront.core.attributes import AttributeKind
from storefront.schemas.admin import (
    AttributeIn,
    AttributeOut,
    CategoryWithCounts,
    DashboardStats,
    DesignerImportRequest,
    FeaturedImageRequest,
    GoLiveDateRequest,
    HoldView,
    ImageOrder,
    ImageUploadResponse,
    ImportResult,
    InquiryView,
    InventorySchedule,
    OfferView,
    ProductIn,
    ProductPatch,
    ReleaseResult,
    SpecSheetDownloadView,
)
from storefront.schemas.catalog import ProductStatus, ProductView
from storefront.services.image_service import ImageUpload
from storefront.services.inquiry_service import INQUIRIES_TABLE, OFFERS_TABLE

router = APIRouter()


# =============================================================================
# Attributes
# =============================================================================


@router.get("/attributes/{kind}", response_model=list[AttributeOut])
async def list_attributes(kind: AttributeKind, admin: Admin) -> list[AttributeOut]:
    return await admin.list_attributes(kind)


@router.post(
    "/attributes/{kind}",
    response_model=AttributeOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_attribute(kind: AttributeKind, data: AttributeIn, admin: Admin) -> AttributeOut:
    return await admin.create_attribute(kind, data)


@router.put("/attributes/{kind}/{attribute_id}", response_model=AttributeOut)
async def update_attribute(
    kind: AttributeKind,
    attribute_id: UUID,
    data: AttributeIn,
    admin: Admin,
) -> AttributeOut:
    return await admin.update_attribute(kind, attribute_id, data)


@router.delete("/attributes/{kind}/{attribute_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attribute(kind: AttributeKind, attribute_id: UUID, admin: Admin) -> None:
    await admin.delete_attribute(kind, attribute_id)


@router.get("/categories/with-counts", response_model=list[CategoryWithCounts])
async def categories_with_counts(admin: Admin) -> list[CategoryWithCounts]:
    return await admin.categories_with_counts()


@router.post("/designers/import", response_model=ImportResult)
async def import_designers(request: DesignerImportRequest, admin: Admin) -> ImportResult:
    """Bulk upsert designers by slug; entries without a name or slug are skipped."""
    return await admin.import_designers(request.designers)


# =============================================================================
# Products
# =============================================================================


@router.get("/products", response_model=list[ProductView])
async def list_products(
    admin: Admin,
    product_status: ProductStatus | None = Query(default=None, alias="status"),
) -> list[ProductView]:
    return await admin.list_products(product_status)


@router.get("/products/{product_id}", response_model=ProductView)
async def get_product(product_id: UUID, admin: Admin) -> ProductView:
    return await admin.get_product(product_id)


@router.post("/products", response_model=ProductView, status_code=status.HTTP_201_CREATED)
async def create_product(data: ProductIn, admin: Admin) -> ProductView:
    return await admin.create_product(data)


@router.patch("/products/{product_id}", response_model=ProductView)
async def update_product(product_id: UUID, data: ProductPatch, admin: Admin) -> ProductView:
    return await admin.update_product(product_id, data)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: UUID, admin: Admin) -> None:
    await admin.delete_product(product_id)


@router.put("/products/{product_id}/go-live-date", status_code=status.HTTP_204_NO_CONTENT)
async def set_go_live_date(product_id: UUID, request: GoLiveDateRequest, admin: Admin) -> None:
    await admin.set_go_live_date(product_id, request.go_live_date)


# =============================================================================
# Images
# =============================================================================


@router.post(
    "/products/{product_id}/images",
    response_model=ImageUploadResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_images(
    product_id: UUID,
    images: Images,
    files: list[UploadFile] = File(..., description="Image files (JPEG, PNG, WebP, GIF)"),
) -> ImageUploadResponse:
    uploads = [
        ImageUpload(filename=file.filename or "upload", data=await file.read())
        for file in files
    ]
    stored = await images.upload_images(product_id, uploads)
    return ImageUploadResponse(
        images=stored,
        message=f"Successfully uploaded {len(stored)} images",
    )


@router.put("/products/{product_id}/images/order", status_code=status.HTTP_204_NO_CONTENT)
async def reorder_images(product_id: UUID, order: list[ImageOrder], images: Images) -> None:
    await images.reorder_images(product_id, order)


@router.put("/products/{product_id}/featured-image", status_code=status.HTTP_204_NO_CONTENT)
async def set_featured_image(
    product_id: UUID,
    request: FeaturedImageRequest,
    images: Images,
) -> None:
    await images.set_featured_image(product_id, request.image_url)


@router.delete("/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_image(image_id: UUID, images: Images) -> None:
    await images.delete_image(image_id)


# =============================================================================
# Customer requests
# =============================================================================


@router.get("/holds", response_model=list[HoldView])
async def list_holds(admin: Admin) -> list[HoldView]:
    return await admin.list_holds()


@router.delete("/holds/{hold_id}", status_code=status.HTTP_204_NO_CONTENT)
async def release_hold(hold_id: UUID, inquiries: Inquiries) -> None:
    """Release a hold; its product becomes available again."""
    await inquiries.release_hold(hold_id)


@router.post("/holds/release-expired", response_model=ReleaseResult)
async def release_expired_holds(inquiries: Inquiries) -> ReleaseResult:
    return ReleaseResult(released=await inquiries.release_expired_holds())


@router.get("/offers", response_model=list[OfferView])
async def list_offers(admin: Admin) -> list[OfferView]:
    return await admin.list_offers()


@router.post("/offers/{offer_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_offer_read(offer_id: UUID, inquiries: Inquiries) -> None:
    await inquiries.mark_read(OFFERS_TABLE, offer_id)


@router.delete("/offers/{offer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_offer(offer_id: UUID, inquiries: Inquiries) -> None:
    await inquiries.delete_record(OFFERS_TABLE, offer_id)


@router.get("/inquiries", response_model=list[InquiryView])
async def list_inquiries(admin: Admin) -> list[InquiryView]:
    return await admin.list_inquiries()


@router.post("/inquiries/{inquiry_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_inquiry_read(inquiry_id: UUID, inquiries: Inquiries) -> None:
    await inquiries.mark_read(INQUIRIES_TABLE, inquiry_id)


@router.delete("/inquiries/{inquiry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inquiry(inquiry_id: UUID, inquiries: Inquiries) -> None:
    await inquiries.delete_record(INQUIRIES_TABLE, inquiry_id)


@router.get("/spec-sheet-downloads", response_model=list[SpecSheetDownloadView])
async def list_spec_sheet_downloads(admin: Admin) -> list[SpecSheetDownloadView]:
    return await admin.list_spec_sheet_downloads()


# =============================================================================
# Dashboard and inventory
# =============================================================================


@router.get("/dashboard", response_model=DashboardStats)
async def dashboard(admin: Admin) -> DashboardStats:
    return await admin.dashboard_stats()


@router.get("/inventory", response_model=InventorySchedule)
async def inventory(admin: Admin) -> InventorySchedule:
    """Inventory products grouped by go-live date; unscheduled ones listed separately."""
    return await admin.inventory_schedule()
