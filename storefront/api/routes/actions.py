"""Customer action endpoints: holds, offers, purchase inquiries and spec sheets."""

from uuid import UUID

from fastapi import APIRouter, status

from storefront.api.deps import Inquiries, SpecSheets
from storefront.schemas.actions import (
    HoldRequest,
    HoldResponse,
    OfferRequest,
    PurchaseInquiryRequest,
    SpecSheet,
    SpecSheetRequest,
    SubmissionResponse,
)

router = APIRouter()


@router.post(
    "/products/{product_id}/holds",
    response_model=HoldResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Hold an available product",
)
async def place_hold(product_id: UUID, request: HoldRequest, inquiries: Inquiries) -> HoldResponse:
    """Reserve the product for the configured hold duration.

    Responds 409 when the product is not available.
    """
    return await inquiries.place_hold(product_id, request)


@router.post(
    "/products/{product_id}/offers",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_offer(
    product_id: UUID,
    request: OfferRequest,
    inquiries: Inquiries,
) -> SubmissionResponse:
    return await inquiries.submit_offer(product_id, request)


@router.post(
    "/products/{product_id}/inquiries",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_purchase_inquiry(
    product_id: UUID,
    request: PurchaseInquiryRequest,
    inquiries: Inquiries,
) -> SubmissionResponse:
    return await inquiries.submit_purchase_inquiry(product_id, request)


@router.post("/products/{slug}/spec-sheet", response_model=SpecSheet)
async def request_spec_sheet(
    slug: str,
    request: SpecSheetRequest,
    spec_sheets: SpecSheets,
) -> SpecSheet:
    return await spec_sheets.request_spec_sheet(slug, request)
