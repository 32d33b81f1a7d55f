"""Admin Service - back-office catalog management.

Covers attribute and product CRUD, the designer bulk import, customer
request lists, the dashboard and the inventory go-live schedule. Writes go
through the catalog store; aggregate reads run SQL directly on the store's
session.
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert

from storefront.core.attributes import AttributeKind
from storefront.core.errors import EntityNotFoundError
from storefront.infra.logging import get_logger
from storefront.models import (
    Category,
    Designer,
    Offer,
    Product,
    ProductHold,
    PurchaseInquiry,
    SpecSheetDownload,
    Subcategory,
    product_colors,
)
from storefront.schemas.admin import (
    AttributeIn,
    AttributeOut,
    CategoryWithCounts,
    CustomerRequestView,
    DashboardStats,
    DesignerImportEntry,
    HoldView,
    ImportResult,
    InquiryView,
    InventoryDay,
    InventorySchedule,
    OfferView,
    ProductIn,
    ProductPatch,
    SpecSheetDownloadView,
    SubcategoryWithCount,
)
from storefront.schemas.catalog import ProductStatus, ProductView
from storefront.store.base import ProductQuery
from storefront.store.sql_store import ATTRIBUTE_MODELS, SqlCatalogStore

logger = get_logger(__name__)

PRODUCTS_TABLE = "products"


def normalize_designer_entries(
    entries: Iterable[DesignerImportEntry],
) -> tuple[list[dict[str, Any]], int]:
    """Trim import entries and drop the unusable ones.

    Entries whose name or slug is blank after trimming are skipped. When a
    slug repeats, the last entry wins.

    Returns:
        (rows to upsert, number of skipped entries)
    """
    rows: dict[str, dict[str, Any]] = {}
    skipped = 0
    for entry in entries:
        name = (entry.name or "").strip()
        slug = (entry.slug or "").strip()
        if not name or not slug:
            skipped += 1
            continue
        rows[slug] = {"name": name, "slug": slug, "about": (entry.about or "").strip() or None}
    return list(rows.values()), skipped


def import_message(imported: int, skipped: int) -> str:
    message = f"Successfully imported {imported} designers"
    if skipped:
        message += f", skipped {skipped} invalid entries"
    return message


def assemble_category_counts(
    categories: Iterable[Mapping[str, Any]],
    subcategories: Iterable[Mapping[str, Any]],
    category_counts: Mapping[UUID, int],
    subcategory_counts: Mapping[UUID, int],
) -> list[CategoryWithCounts]:
    """Attach product and subcategory counts to each category.

    Subcategories without a category are left out.
    """
    children: dict[UUID, list[SubcategoryWithCount]] = defaultdict(list)
    for sub in subcategories:
        if sub["category_id"] is None:
            continue
        children[sub["category_id"]].append(
            SubcategoryWithCount(
                id=sub["id"],
                name=sub["name"],
                slug=sub["slug"],
                category_id=sub["category_id"],
                product_count=subcategory_counts.get(sub["id"], 0),
            )
        )

    return [
        CategoryWithCounts(
            id=cat["id"],
            name=cat["name"],
            slug=cat["slug"],
            product_count=category_counts.get(cat["id"], 0),
            subcategory_count=len(children[cat["id"]]),
            subcategories=children[cat["id"]],
        )
        for cat in categories
    ]


def group_inventory(products: Iterable[ProductView]) -> InventorySchedule:
    """Group inventory by go-live date, earliest date first.

    Input order is kept inside each group.
    """
    by_day: dict[date, list[ProductView]] = defaultdict(list)
    unscheduled: list[ProductView] = []
    for product in products:
        if product.go_live_date is None:
            unscheduled.append(product)
        else:
            by_day[product.go_live_date].append(product)

    return InventorySchedule(
        scheduled=[
            InventoryDay(go_live_date=day, products=by_day[day]) for day in sorted(by_day)
        ],
        unscheduled=unscheduled,
    )


class AdminService:
    """Back-office operations over one store session."""

    def __init__(self, store: SqlCatalogStore) -> None:
        self.store = store

    # =========================================================================
    # Attributes
    # =========================================================================

    @staticmethod
    def _attribute_row(kind: AttributeKind, data: Mapping[str, Any]) -> dict[str, Any]:
        """Keep only the fields the kind's table has."""
        columns = ATTRIBUTE_MODELS[kind].__table__.columns.keys()
        return {key: value for key, value in data.items() if key in columns}

    async def list_attributes(self, kind: AttributeKind) -> list[AttributeOut]:
        model = ATTRIBUTE_MODELS[kind]
        result = await self.store.execute(
            "list_attributes", select(model).order_by(model.name), kind=kind.value
        )
        return [AttributeOut.model_validate(obj) for obj in result.scalars().all()]

    async def create_attribute(self, kind: AttributeKind, data: AttributeIn) -> AttributeOut:
        """Create an attribute entity.

        Raises:
            ConflictError: If the slug is already taken
        """
        row = await self.store.insert(
            kind.value, self._attribute_row(kind, data.model_dump(exclude_none=True))
        )
        logger.info("Attribute created", kind=kind.value, slug=data.slug)
        return AttributeOut.model_validate(row)

    async def update_attribute(
        self,
        kind: AttributeKind,
        attribute_id: UUID,
        data: AttributeIn,
    ) -> AttributeOut:
        patch = self._attribute_row(kind, data.model_dump(exclude_unset=True))
        if not await self.store.update(kind.value, attribute_id, patch):
            raise EntityNotFoundError(kind.value, attribute_id)
        row = await self.store.get(kind.value, attribute_id)
        logger.info("Attribute updated", kind=kind.value, attribute_id=str(attribute_id))
        return AttributeOut.model_validate(row)

    async def delete_attribute(self, kind: AttributeKind, attribute_id: UUID) -> None:
        """Delete an attribute; products referencing it keep a null reference."""
        if not await self.store.delete(kind.value, attribute_id):
            raise EntityNotFoundError(kind.value, attribute_id)
        logger.info("Attribute deleted", kind=kind.value, attribute_id=str(attribute_id))

    async def categories_with_counts(self) -> list[CategoryWithCounts]:
        categories = await self.store.execute(
            "list_categories",
            select(Category.id, Category.name, Category.slug).order_by(Category.name),
        )
        subcategories = await self.store.execute(
            "list_subcategories",
            select(
                Subcategory.id, Subcategory.name, Subcategory.slug, Subcategory.category_id
            ).order_by(Subcategory.name),
        )
        category_counts = await self.store.execute(
            "count_by_category",
            select(Product.category_id, func.count())
            .where(Product.category_id.is_not(None))
            .group_by(Product.category_id),
        )
        subcategory_counts = await self.store.execute(
            "count_by_subcategory",
            select(Product.subcategory_id, func.count())
            .where(Product.subcategory_id.is_not(None))
            .group_by(Product.subcategory_id),
        )

        return assemble_category_counts(
            categories.mappings().all(),
            subcategories.mappings().all(),
            dict(category_counts.tuples().all()),
            dict(subcategory_counts.tuples().all()),
        )

    async def import_designers(self, entries: list[DesignerImportEntry]) -> ImportResult:
        """Upsert designers by slug.

        Existing designers get their name and about replaced.
        """
        rows, skipped = normalize_designer_entries(entries)

        if rows:
            stmt = pg_insert(Designer).values(rows)
            stmt = stmt.on_conflict_do_update(
                index_elements=[Designer.slug],
                set_={"name": stmt.excluded.name, "about": stmt.excluded.about},
            )
            await self.store.execute("import_designers", stmt, count=len(rows))

        logger.info("Designers imported", imported=len(rows), skipped=skipped)
        return ImportResult(
            imported=len(rows),
            skipped=skipped,
            message=import_message(len(rows), skipped),
        )

    # =========================================================================
    # Products
    # =========================================================================

    async def list_products(self, status: ProductStatus | None = None) -> list[ProductView]:
        """All products, newest first, optionally of one status."""
        statuses = frozenset({status}) if status is not None else None
        return await self.store.query_products(ProductQuery(statuses=statuses))

    async def get_product(self, product_id: UUID) -> ProductView:
        products = await self.store.query_products(ProductQuery(product_id=product_id, limit=1))
        if not products:
            raise EntityNotFoundError("product", product_id)
        return products[0]

    async def _replace_colors(self, product_id: UUID, color_ids: Iterable[UUID]) -> None:
        await self.store.execute(
            "clear_colors",
            delete(product_colors).where(product_colors.c.product_id == product_id),
        )
        rows = [{"product_id": product_id, "color_id": color_id} for color_id in dict.fromkeys(color_ids)]
        if rows:
            await self.store.execute("assign_colors", insert(product_colors).values(rows))

    async def create_product(self, data: ProductIn) -> ProductView:
        """Create a product with its colors.

        Raises:
            ConflictError: If the slug or sku is taken, or a reference is dangling
        """
        row = await self.store.insert(PRODUCTS_TABLE, data.model_dump(exclude={"color_ids"}))
        if data.color_ids:
            await self._replace_colors(row["id"], data.color_ids)

        logger.info("Product created", product_id=str(row["id"]), slug=data.slug)
        return await self.get_product(row["id"])

    async def update_product(self, product_id: UUID, data: ProductPatch) -> ProductView:
        """Apply the fields that were sent; ``color_ids`` replaces the color set."""
        patch = data.model_dump(exclude_unset=True, exclude={"color_ids"})
        if patch and not await self.store.update(PRODUCTS_TABLE, product_id, patch):
            raise EntityNotFoundError("product", product_id)
        if not patch and await self.store.get(PRODUCTS_TABLE, product_id) is None:
            raise EntityNotFoundError("product", product_id)

        if data.color_ids is not None:
            await self._replace_colors(product_id, data.color_ids)

        logger.info("Product updated", product_id=str(product_id), fields=sorted(patch))
        return await self.get_product(product_id)

    async def delete_product(self, product_id: UUID) -> None:
        if not await self.store.delete(PRODUCTS_TABLE, product_id):
            raise EntityNotFoundError("product", product_id)
        logger.info("Product deleted", product_id=str(product_id))

    # =========================================================================
    # Customer requests
    # =========================================================================

    async def _list_requests(self, model: type, view: type[CustomerRequestView]) -> list[Any]:
        result = await self.store.execute(
            f"list_{model.__tablename__}",
            select(model).order_by(model.created_at.desc()),
        )
        return [view.model_validate(obj) for obj in result.scalars().all()]

    async def list_holds(self, now: datetime | None = None) -> list[HoldView]:
        """Holds newest first, flagged when already expired."""
        now = now or datetime.now(timezone.utc)
        holds = await self._list_requests(ProductHold, HoldView)
        return [
            hold.model_copy(update={"is_expired": hold.expires_at <= now}) for hold in holds
        ]

    async def list_offers(self) -> list[OfferView]:
        return await self._list_requests(Offer, OfferView)

    async def list_inquiries(self) -> list[InquiryView]:
        return await self._list_requests(PurchaseInquiry, InquiryView)

    async def list_spec_sheet_downloads(self) -> list[SpecSheetDownloadView]:
        return await self._list_requests(SpecSheetDownload, SpecSheetDownloadView)

    # =========================================================================
    # Dashboard and inventory
    # =========================================================================

    async def dashboard_stats(self, now: datetime | None = None) -> DashboardStats:
        """Counts shown on the admin dashboard. Active holds expire after ``now``."""
        now = now or datetime.now(timezone.utc)

        products = await self.store.execute(
            "product_stats",
            select(
                func.count().label("total_products"),
                func.count()
                .filter(Product.status == ProductStatus.AVAILABLE)
                .label("available_products"),
                func.count().filter(Product.status == ProductStatus.SOLD).label("sold_products"),
            ).select_from(Product),
        )
        holds = await self.store.execute(
            "hold_stats",
            select(func.count().label("active_holds"))
            .select_from(ProductHold)
            .where(ProductHold.expires_at > now),
        )
        offers = await self.store.execute(
            "offer_stats",
            select(
                func.count().label("total_offers"),
                func.count().filter(Offer.is_read.is_(False)).label("unread_offers"),
            ).select_from(Offer),
        )
        inquiries = await self.store.execute(
            "inquiry_stats",
            select(
                func.count().label("total_inquiries"),
                func.count().filter(PurchaseInquiry.is_read.is_(False)).label("unread_inquiries"),
            ).select_from(PurchaseInquiry),
        )

        return DashboardStats(
            **products.mappings().one(),
            **holds.mappings().one(),
            **offers.mappings().one(),
            **inquiries.mappings().one(),
        )

    async def inventory_schedule(self) -> InventorySchedule:
        """Inventory products by go-live date, oldest additions first within a day."""
        products = await self.store.query_products(
            ProductQuery(statuses=frozenset({ProductStatus.INVENTORY}))
        )
        return group_inventory(reversed(products))

    async def set_go_live_date(self, product_id: UUID, go_live_date: date | None) -> None:
        if not await self.store.update(PRODUCTS_TABLE, product_id, {"go_live_date": go_live_date}):
            raise EntityNotFoundError("product", product_id)
        logger.info(
            "Go-live date set",
            product_id=str(product_id),
            go_live_date=go_live_date.isoformat() if go_live_date else None,
        )
