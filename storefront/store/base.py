"""Store query interface consumed by the catalog core.

The relational store itself is external; the core only relies on this
protocol. ``SqlCatalogStore`` implements it over SQLAlchemy, tests use an
in-memory fake.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from storefront.core.attributes import AttributeKind
from storefront.schemas.catalog import ProductStatus, ProductView


@dataclass(frozen=True)
class ProductQuery:
    """Constraints for one product fetch.

    All constraints are ANDed. ``any_of`` is a single disjunction of
    column equalities. Results are always ordered newest first.

    Attributes:
        equals: Product column -> required value
        any_of: Product column -> value; a row matches if any pair matches
        search: Case-insensitive substring over name OR short_description
        year_from: Inclusive lower bound on year_created
        year_to: Inclusive upper bound on year_created
        statuses: Allowed statuses (None = any)
        product_id: Exact product id
        exclude_id: Product id to leave out
        slug: Exact slug
        limit: Maximum number of rows
    """

    equals: Mapping[str, UUID] = field(default_factory=dict)
    any_of: Mapping[str, UUID] = field(default_factory=dict)
    search: str | None = None
    year_from: int | None = None
    year_to: int | None = None
    statuses: frozenset[ProductStatus] | None = None
    product_id: UUID | None = None
    exclude_id: UUID | None = None
    slug: str | None = None
    limit: int | None = None


@runtime_checkable
class CatalogStore(Protocol):
    """Protocol for the external catalog store.

    Every method raises ``StoreError`` on I/O failure.
    """

    async def resolve(self, kind: AttributeKind, slug: str) -> UUID | None:
        """Resolve an attribute slug to its id, None when no row matches."""
        ...

    async def query_products(self, query: ProductQuery) -> list[ProductView]:
        """Fetch relation-expanded products, newest first."""
        ...

    async def get(self, table: str, row_id: UUID) -> dict[str, Any] | None:
        """Fetch a single row by id."""
        ...

    async def insert(self, table: str, row: Mapping[str, Any]) -> dict[str, Any]:
        """Insert a row and return it with generated columns filled in."""
        ...

    async def update(self, table: str, row_id: UUID, patch: Mapping[str, Any]) -> bool:
        """Update a row. Returns False when no row has that id."""
        ...

    async def delete(self, table: str, row_id: UUID) -> bool:
        """Delete a row. Returns False when no row has that id."""
        ...

    async def transition_status(
        self,
        product_id: UUID,
        from_status: ProductStatus,
        to_status: ProductStatus,
    ) -> bool:
        """Set a product's status only if it currently has ``from_status``."""
        ...

    async def expired_holds(self, now: datetime) -> list[dict[str, Any]]:
        """Holds whose expires_at is at or before ``now``."""
        ...
