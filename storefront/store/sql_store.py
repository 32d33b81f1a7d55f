"""SQLAlchemy implementation of the catalog store."""

import asyncio
from collections.abc import Mapping
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import delete, inspect, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.attributes import AttributeKind
from storefront.core.errors import ConflictError, StoreError
from storefront.infra.logging import get_logger
from storefront.models import (
    Base,
    Category,
    Color,
    Country,
    Designer,
    Maker,
    Offer,
    Period,
    Product,
    ProductHold,
    ProductImage,
    PurchaseInquiry,
    SiteSetting,
    SpecSheetDownload,
    Style,
    Subcategory,
)
from storefront.schemas.catalog import ProductStatus, ProductView
from storefront.store.base import ProductQuery

logger = get_logger(__name__)

ATTRIBUTE_MODELS: dict[AttributeKind, type[Base]] = {
    AttributeKind.DESIGNERS: Designer,
    AttributeKind.MAKERS: Maker,
    AttributeKind.CATEGORIES: Category,
    AttributeKind.SUBCATEGORIES: Subcategory,
    AttributeKind.STYLES: Style,
    AttributeKind.PERIODS: Period,
    AttributeKind.COUNTRIES: Country,
    AttributeKind.COLORS: Color,
}

TABLE_MODELS: dict[str, type[Base]] = {
    model.__tablename__: model
    for model in (
        *ATTRIBUTE_MODELS.values(),
        Product,
        ProductImage,
        ProductHold,
        Offer,
        PurchaseInquiry,
        SpecSheetDownload,
        SiteSetting,
    )
}


def model_for(table: str) -> type[Base]:
    """Model class backing ``table``.

    Raises:
        KeyError: If the table is unknown
    """
    try:
        return TABLE_MODELS[table]
    except KeyError:
        raise KeyError(f"Unknown table: {table}") from None


def row_to_dict(obj: Base) -> dict[str, Any]:
    """Column values of a loaded instance, without triggering lazy loads."""
    state = inspect(obj)
    return {attr.key: state.dict.get(attr.key) for attr in state.mapper.column_attrs}


def build_product_select(query: ProductQuery):
    """Translate a ProductQuery into a SELECT over products, newest first."""
    stmt = select(Product)

    for column, value in query.equals.items():
        stmt = stmt.where(getattr(Product, column) == value)

    if query.any_of:
        stmt = stmt.where(
            or_(*(getattr(Product, column) == value for column, value in query.any_of.items()))
        )

    if query.search:
        stmt = stmt.where(
            or_(
                Product.name.icontains(query.search, autoescape=True),
                Product.short_description.icontains(query.search, autoescape=True),
            )
        )

    if query.year_from is not None:
        stmt = stmt.where(Product.year_created >= query.year_from)
    if query.year_to is not None:
        stmt = stmt.where(Product.year_created <= query.year_to)

    if query.statuses is not None:
        stmt = stmt.where(Product.status.in_(sorted(query.statuses, key=lambda s: s.value)))

    if query.product_id is not None:
        stmt = stmt.where(Product.id == query.product_id)

    if query.exclude_id is not None:
        stmt = stmt.where(Product.id != query.exclude_id)

    if query.slug is not None:
        stmt = stmt.where(Product.slug == query.slug)

    # id breaks created_at ties so repeated reads return the same order
    stmt = stmt.order_by(Product.created_at.desc(), Product.id)

    if query.limit is not None:
        stmt = stmt.limit(query.limit)

    return stmt


class SqlCatalogStore:
    """CatalogStore over a single AsyncSession.

    An AsyncSession cannot run two statements at once, so calls are
    serialised with a lock; callers may still issue them concurrently.
    Writes become visible to other sessions when the session's unit of
    work commits.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._lock = asyncio.Lock()

    async def execute(self, operation: str, stmt: Any, **context: Any) -> Any:
        """Run a statement on the session, mapping driver errors to StoreError."""
        async with self._lock:
            try:
                return await self.session.execute(stmt)
            except IntegrityError as e:
                logger.warning("Store constraint violated", operation=operation, error=str(e.orig), **context)
                raise ConflictError(f"{operation} violates a constraint: {e.orig}") from e
            except SQLAlchemyError as e:
                logger.error("Store operation failed", operation=operation, error=str(e), **context)
                raise StoreError(f"{operation} failed: {e}") from e

    async def resolve(self, kind: AttributeKind, slug: str) -> UUID | None:
        model = ATTRIBUTE_MODELS[kind]
        result = await self.execute(
            "resolve",
            select(model.id).where(model.slug == slug),
            kind=kind.value,
            slug=slug,
        )
        return result.scalar_one_or_none()

    async def query_products(self, query: ProductQuery) -> list[ProductView]:
        stmt = build_product_select(query).execution_options(populate_existing=True)
        result = await self.execute("query_products", stmt)
        return [ProductView.model_validate(product) for product in result.scalars().all()]

    async def get(self, table: str, row_id: UUID) -> dict[str, Any] | None:
        model = model_for(table)
        result = await self.execute(
            "get", select(model).where(model.id == row_id), table=table, row_id=str(row_id)
        )
        obj = result.scalar_one_or_none()
        return row_to_dict(obj) if obj is not None else None

    async def insert(self, table: str, row: Mapping[str, Any]) -> dict[str, Any]:
        """Insert inside a SAVEPOINT so a failed insert leaves the session usable."""
        model = model_for(table)
        obj = model(**row)
        async with self._lock:
            try:
                async with self.session.begin_nested():
                    self.session.add(obj)
            except IntegrityError as e:
                logger.warning("Store constraint violated", operation="insert", table=table, error=str(e.orig))
                raise ConflictError(f"insert into {table} violates a constraint: {e.orig}") from e
            except SQLAlchemyError as e:
                logger.error("Store operation failed", operation="insert", table=table, error=str(e))
                raise StoreError(f"insert into {table} failed: {e}") from e
        return row_to_dict(obj)

    async def update(self, table: str, row_id: UUID, patch: Mapping[str, Any]) -> bool:
        model = model_for(table)
        result = await self.execute(
            "update",
            update(model).where(model.id == row_id).values(**patch),
            table=table,
            row_id=str(row_id),
        )
        return result.rowcount > 0

    async def delete(self, table: str, row_id: UUID) -> bool:
        model = model_for(table)
        result = await self.execute(
            "delete",
            delete(model).where(model.id == row_id),
            table=table,
            row_id=str(row_id),
        )
        return result.rowcount > 0

    async def transition_status(
        self,
        product_id: UUID,
        from_status: ProductStatus,
        to_status: ProductStatus,
    ) -> bool:
        result = await self.execute(
            "transition_status",
            update(Product)
            .where(Product.id == product_id, Product.status == from_status)
            .values(status=to_status),
            product_id=str(product_id),
        )
        return result.rowcount == 1

    async def expired_holds(self, now: datetime) -> list[dict[str, Any]]:
        result = await self.execute(
            "expired_holds",
            select(ProductHold).where(ProductHold.expires_at <= now).order_by(ProductHold.expires_at),
        )
        return [row_to_dict(hold) for hold in result.scalars().all()]
