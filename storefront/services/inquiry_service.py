"""Inquiry Service - customer holds, offers and purchase inquiries.

Placing a hold does two writes: the hold row and the product's
available -> on_hold transition. Both go through the same store session, so
they commit or roll back together. The transition is conditional on the
product still being available, which also rejects a second hold on a
product someone else just held.

Hold expiry is not enforced here; ``release_expired_holds`` is run
periodically by ``scripts/release_expired_holds.py``.
"""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from storefront.config import settings
from storefront.core.errors import EntityNotFoundError, ProductUnavailableError
from storefront.infra.logging import get_logger
from storefront.schemas.actions import (
    HoldRequest,
    HoldResponse,
    OfferRequest,
    PurchaseInquiryRequest,
    SubmissionResponse,
)
from storefront.schemas.catalog import ProductStatus
from storefront.store.base import CatalogStore

logger = get_logger(__name__)

HOLDS_TABLE = "product_holds"
OFFERS_TABLE = "offers"
INQUIRIES_TABLE = "purchase_inquiries"
PRODUCTS_TABLE = "products"

# Customer records an admin can mark as read
READABLE_TABLES = frozenset({OFFERS_TABLE, INQUIRIES_TABLE})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InquiryService:
    """Customer-initiated product actions and their back-office handling."""

    def __init__(self, store: CatalogStore, hold_duration_hours: int | None = None) -> None:
        """Initialize inquiry service.

        Args:
            store: Catalog store; all writes of one call share its unit of work
            hold_duration_hours: Hold length (defaults to settings.default_hold_duration_hours)
        """
        self.store = store
        self.hold_duration_hours = hold_duration_hours or settings.default_hold_duration_hours

    async def _require_product(self, product_id: UUID) -> dict[str, Any]:
        product = await self.store.get(PRODUCTS_TABLE, product_id)
        if product is None:
            raise EntityNotFoundError("product", product_id)
        return product

    async def place_hold(
        self,
        product_id: UUID,
        request: HoldRequest,
        now: datetime | None = None,
    ) -> HoldResponse:
        """Hold a product for a customer.

        The hold expires ``hold_duration_hours`` after ``now``.

        Raises:
            EntityNotFoundError: If the product does not exist
            ProductUnavailableError: If the product is not available
            StoreError: If a write fails (nothing is committed)
        """
        now = now or _utcnow()
        await self._require_product(product_id)

        held = await self.store.transition_status(
            product_id, ProductStatus.AVAILABLE, ProductStatus.ON_HOLD
        )
        if not held:
            logger.warning("Hold rejected, product not available", product_id=str(product_id))
            raise ProductUnavailableError(product_id)

        expires_at = now + timedelta(hours=self.hold_duration_hours)
        row = await self.store.insert(
            HOLDS_TABLE,
            {
                "product_id": product_id,
                "customer_name": request.customer_name,
                "customer_email": request.customer_email,
                "customer_phone": request.customer_phone,
                "hold_duration_hours": self.hold_duration_hours,
                "created_at": now,
                "expires_at": expires_at,
            },
        )

        logger.info(
            "Hold placed",
            hold_id=str(row["id"]),
            product_id=str(product_id),
            hold_duration_hours=self.hold_duration_hours,
            expires_at=expires_at.isoformat(),
        )
        return HoldResponse(
            id=row["id"],
            product_id=product_id,
            hold_duration_hours=self.hold_duration_hours,
            created_at=now,
            expires_at=expires_at,
        )

    async def submit_offer(self, product_id: UUID, request: OfferRequest) -> SubmissionResponse:
        """Record an offer on a product.

        Raises:
            EntityNotFoundError: If the product does not exist
        """
        await self._require_product(product_id)
        row = await self.store.insert(
            OFFERS_TABLE,
            {"product_id": product_id, **request.model_dump()},
        )
        logger.info(
            "Offer submitted",
            offer_id=str(row["id"]),
            product_id=str(product_id),
            offer_amount=str(request.offer_amount),
        )
        return SubmissionResponse(id=row["id"], product_id=product_id)

    async def submit_purchase_inquiry(
        self,
        product_id: UUID,
        request: PurchaseInquiryRequest,
    ) -> SubmissionResponse:
        """Record a purchase inquiry on a product.

        Raises:
            EntityNotFoundError: If the product does not exist
        """
        await self._require_product(product_id)
        row = await self.store.insert(
            INQUIRIES_TABLE,
            {"product_id": product_id, **request.model_dump()},
        )
        logger.info("Purchase inquiry submitted", inquiry_id=str(row["id"]), product_id=str(product_id))
        return SubmissionResponse(id=row["id"], product_id=product_id)

    async def release_hold(self, hold_id: UUID) -> None:
        """Delete a hold and make its product available again.

        A product that left on_hold in the meantime (e.g. sold) keeps its status.

        Raises:
            EntityNotFoundError: If the hold does not exist
        """
        hold = await self.store.get(HOLDS_TABLE, hold_id)
        if hold is None:
            raise EntityNotFoundError("hold", hold_id)

        await self.store.transition_status(
            hold["product_id"], ProductStatus.ON_HOLD, ProductStatus.AVAILABLE
        )
        await self.store.delete(HOLDS_TABLE, hold_id)
        logger.info("Hold released", hold_id=str(hold_id), product_id=str(hold["product_id"]))

    async def release_expired_holds(self, now: datetime | None = None) -> int:
        """Release every hold whose expiry has passed.

        Returns:
            Number of holds released
        """
        now = now or _utcnow()
        expired = await self.store.expired_holds(now)

        for hold in expired:
            await self.store.transition_status(
                hold["product_id"], ProductStatus.ON_HOLD, ProductStatus.AVAILABLE
            )
            await self.store.delete(HOLDS_TABLE, hold["id"])

        logger.info("Expired holds released", count=len(expired), now=now.isoformat())
        return len(expired)

    async def mark_read(self, table: str, record_id: UUID) -> None:
        """Mark an offer or inquiry as read.

        Raises:
            ValueError: If ``table`` has no read flag
            EntityNotFoundError: If the record does not exist
        """
        if table not in READABLE_TABLES:
            raise ValueError(f"{table} records cannot be marked read")
        if not await self.store.update(table, record_id, {"is_read": True}):
            raise EntityNotFoundError(table, record_id)

    async def delete_record(self, table: str, record_id: UUID) -> None:
        """Delete an offer or inquiry.

        Raises:
            EntityNotFoundError: If the record does not exist
        """
        if table not in READABLE_TABLES:
            raise ValueError(f"{table} records cannot be deleted here")
        if not await self.store.delete(table, record_id):
            raise EntityNotFoundError(table, record_id)
