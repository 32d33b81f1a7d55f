"""Shared fixtures: an in-memory catalog store and the API client."""

from collections import defaultdict
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from storefront.core.attributes import AttributeKind
from storefront.core.errors import StoreError
from storefront.schemas.catalog import ColorRef, ProductStatus, ProductView
from storefront.store.base import ProductQuery

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeCatalogStore:
    """In-memory CatalogStore.

    Products are kept as ProductView values; every other table is a dict of
    rows. ``fail_on`` names operations that raise StoreError.
    """

    def __init__(self) -> None:
        self.products: dict[UUID, ProductView] = {}
        self.rows: dict[str, dict[UUID, dict[str, Any]]] = defaultdict(dict)
        self.resolve_calls: list[tuple[AttributeKind, str]] = []
        self.queries: list[ProductQuery] = []
        self.fail_on: set[str] = set()
        self._clock = 0

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise StoreError(f"{operation} failed")

    # -- seeding helpers -----------------------------------------------------

    def add_attribute(self, kind: AttributeKind, slug: str, name: str | None = None, **extra: Any) -> UUID:
        attribute_id = uuid4()
        self.rows[kind.value][attribute_id] = {
            "id": attribute_id,
            "name": name or slug.replace("-", " ").title(),
            "slug": slug,
            **extra,
        }
        return attribute_id

    def ref(self, kind: AttributeKind, attribute_id: UUID) -> dict[str, Any]:
        return self.rows[kind.value][attribute_id]

    def add_product(self, **fields: Any) -> ProductView:
        """Add a product; each one is newer than the previous."""
        self._clock += 1
        product_id = fields.pop("id", None) or uuid4()
        slug = fields.pop("slug", None) or f"product-{self._clock}"
        colors = [ColorRef(**self.ref(AttributeKind.COLORS, c)) for c in fields.pop("color_ids", [])]
        for column, kind in (("category_id", AttributeKind.CATEGORIES), ("designer_id", AttributeKind.DESIGNERS)):
            if fields.get(column) is not None and column[:-3] not in fields:
                fields[column[:-3]] = self.ref(kind, fields[column])
        product = ProductView(
            id=product_id,
            name=fields.pop("name", slug.replace("-", " ").title()),
            slug=slug,
            created_at=fields.pop("created_at", BASE_TIME + timedelta(minutes=self._clock)),
            colors=colors,
            **fields,
        )
        self.products[product.id] = product
        return product

    # -- CatalogStore --------------------------------------------------------

    async def resolve(self, kind: AttributeKind, slug: str) -> UUID | None:
        self._check("resolve")
        self.resolve_calls.append((kind, slug))
        for row in self.rows[kind.value].values():
            if row["slug"] == slug:
                return row["id"]
        return None

    async def query_products(self, query: ProductQuery) -> list[ProductView]:
        self._check("query_products")
        self.queries.append(query)

        def matches(p: ProductView) -> bool:
            if any(getattr(p, column) != value for column, value in query.equals.items()):
                return False
            if query.any_of and not any(getattr(p, column) == value for column, value in query.any_of.items()):
                return False
            if query.search:
                needle = query.search.lower()
                if needle not in p.name.lower() and needle not in (p.short_description or "").lower():
                    return False
            if query.year_from is not None and (p.year_created is None or p.year_created < query.year_from):
                return False
            if query.year_to is not None and (p.year_created is None or p.year_created > query.year_to):
                return False
            if query.statuses is not None and p.status not in query.statuses:
                return False
            if query.product_id is not None and p.id != query.product_id:
                return False
            if query.exclude_id is not None and p.id == query.exclude_id:
                return False
            if query.slug is not None and p.slug != query.slug:
                return False
            return True

        result = sorted(
            (p for p in self.products.values() if matches(p)),
            key=lambda p: (p.created_at, str(p.id)),
            reverse=True,
        )
        return result[: query.limit] if query.limit is not None else result

    async def get(self, table: str, row_id: UUID) -> dict[str, Any] | None:
        self._check("get")
        if table == "products":
            product = self.products.get(row_id)
            return product.model_dump() if product else None
        row = self.rows[table].get(row_id)
        return dict(row) if row else None

    async def insert(self, table: str, row: Mapping[str, Any]) -> dict[str, Any]:
        self._check("insert")
        stored = {"id": uuid4(), "created_at": datetime.now(timezone.utc), **row}
        self.rows[table][stored["id"]] = stored
        return dict(stored)

    async def update(self, table: str, row_id: UUID, patch: Mapping[str, Any]) -> bool:
        self._check("update")
        if table == "products":
            if row_id not in self.products:
                return False
            self.products[row_id] = self.products[row_id].model_copy(update=dict(patch))
            return True
        if row_id not in self.rows[table]:
            return False
        self.rows[table][row_id].update(patch)
        return True

    async def delete(self, table: str, row_id: UUID) -> bool:
        self._check("delete")
        if table == "products":
            return self.products.pop(row_id, None) is not None
        return self.rows[table].pop(row_id, None) is not None

    async def transition_status(
        self,
        product_id: UUID,
        from_status: ProductStatus,
        to_status: ProductStatus,
    ) -> bool:
        self._check("transition_status")
        product = self.products.get(product_id)
        if product is None or product.status != from_status:
            return False
        self.products[product_id] = product.model_copy(update={"status": to_status})
        return True

    async def expired_holds(self, now: datetime) -> list[dict[str, Any]]:
        self._check("expired_holds")
        return [dict(h) for h in self.rows["product_holds"].values() if h["expires_at"] <= now]


@pytest.fixture
def store() -> FakeCatalogStore:
    """Empty in-memory catalog store."""
    return FakeCatalogStore()


@pytest_asyncio.fixture
async def client(store: FakeCatalogStore):
    """API client with the database replaced by the in-memory store."""
    from storefront.api.deps import get_store
    from storefront.main import app

    app.dependency_overrides[get_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
