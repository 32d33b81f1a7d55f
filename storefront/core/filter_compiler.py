"""Attribute filter compiler.

Turns a sparse ``FilterState`` of slugs into a ``ProductQuery`` the store can
run, plus the color post-filter the store cannot express (color sits behind
the product_colors many-to-many join).

A slug that matches no attribute row is reported as an ``UnresolvedSlug``
value, never raised. What it does to the result is decided by
``UnresolvedSlugPolicy``:

- ``IGNORE`` drops that constraint (the catalog shows everything else)
- ``MATCH_NOTHING`` empties the whole result
"""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from storefront.core.attributes import COLOR_FILTER, FOREIGN_KEY_FILTERS, AttributeFilter, AttributeKind
from storefront.infra.logging import get_logger
from storefront.schemas.catalog import FilterState, ProductStatus, ProductView
from storefront.store.base import CatalogStore, ProductQuery

logger = get_logger(__name__)


class UnresolvedSlugPolicy(str, Enum):
    """What an unknown filter slug does to the result set."""

    IGNORE = "ignore"
    MATCH_NOTHING = "match_nothing"


@dataclass(frozen=True)
class ResolvedSlug:
    kind: AttributeKind
    slug: str
    id: UUID


@dataclass(frozen=True)
class UnresolvedSlug:
    kind: AttributeKind
    slug: str


SlugResolution = ResolvedSlug | UnresolvedSlug


@dataclass(frozen=True)
class CompiledFilter:
    """Result of compiling a FilterState.

    Attributes:
        query: Constraints pushed down to the store
        color_id: Color every returned product must carry, if any
        unresolved: Slugs that matched no attribute row
        match_nothing: True when the policy turned an unresolved slug into an empty result
    """

    query: ProductQuery
    color_id: UUID | None = None
    unresolved: tuple[UnresolvedSlug, ...] = field(default_factory=tuple)
    match_nothing: bool = False

    def post_filter(self, products: Iterable[ProductView]) -> list[ProductView]:
        """Apply the constraints the store could not, preserving order."""
        if self.color_id is None:
            return list(products)
        return [p for p in products if self.color_id in p.color_ids]


class FilterCompiler:
    """Compiles and runs catalog filters against a CatalogStore."""

    def __init__(
        self,
        store: CatalogStore,
        policy: UnresolvedSlugPolicy = UnresolvedSlugPolicy.IGNORE,
    ) -> None:
        self.store = store
        self.policy = policy

    async def resolve(self, kind: AttributeKind, slug: str) -> SlugResolution:
        """Resolve one slug to a tagged result."""
        entity_id = await self.store.resolve(kind, slug)
        if entity_id is None:
            return UnresolvedSlug(kind=kind, slug=slug)
        return ResolvedSlug(kind=kind, slug=slug, id=entity_id)

    async def compile(
        self,
        filters: FilterState,
        statuses: frozenset[ProductStatus] | None = None,
    ) -> CompiledFilter:
        """Resolve every slug in ``filters`` and build the store query.

        Slug lookups are independent and run concurrently. The first failing
        lookup cancels the others, so none outlives the call.

        Args:
            filters: Filter selections
            statuses: Restrict to these statuses (None = any)

        Raises:
            StoreError: If a lookup fails
        """
        requested: list[tuple[AttributeFilter, str]] = [
            (attr, slug)
            for attr in (*FOREIGN_KEY_FILTERS, COLOR_FILTER)
            if (slug := getattr(filters, attr.field)) is not None
        ]
        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [
                    tg.create_task(self.resolve(attr.kind, slug)) for attr, slug in requested
                ]
        except ExceptionGroup as eg:
            raise eg.exceptions[0]
        resolutions = [task.result() for task in tasks]

        equals: dict[str, UUID] = {}
        color_id: UUID | None = None
        unresolved: list[UnresolvedSlug] = []

        for (attr, _), resolution in zip(requested, resolutions):
            if isinstance(resolution, UnresolvedSlug):
                unresolved.append(resolution)
            elif attr is COLOR_FILTER:
                color_id = resolution.id
            else:
                equals[attr.product_column] = resolution.id

        if unresolved:
            logger.info(
                "Unresolved filter slugs",
                slugs={u.kind.value: u.slug for u in unresolved},
                policy=self.policy.value,
            )

        query = ProductQuery(
            equals=equals,
            search=filters.search,
            year_from=filters.year_from,
            year_to=filters.year_to,
            statuses=statuses,
        )
        return CompiledFilter(
            query=query,
            color_id=color_id,
            unresolved=tuple(unresolved),
            match_nothing=bool(unresolved) and self.policy is UnresolvedSlugPolicy.MATCH_NOTHING,
        )

    async def run(
        self,
        filters: FilterState,
        statuses: frozenset[ProductStatus] | None = None,
    ) -> list[ProductView]:
        """Compile ``filters``, fetch matching products and post-filter them.

        Returns:
            Relation-expanded products, newest first

        Raises:
            StoreError: If the store fails
        """
        compiled = await self.compile(filters, statuses)
        if compiled.match_nothing:
            return []

        rows = await self.store.query_products(compiled.query)
        products = compiled.post_filter(rows)

        logger.debug(
            "Catalog filter applied",
            constraints=sorted(compiled.query.equals),
            fetched=len(rows),
            returned=len(products),
        )
        return products
