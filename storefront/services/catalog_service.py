"""Catalog Service - storefront reads.

Listing with filters, product detail, featured products, the similar
products feed and designer pages. Only listable products (available, on
hold, sold) are shown to customers.
"""

from storefront.config import settings
from storefront.core.attributes import AttributeKind
from storefront.core.errors import EntityNotFoundError
from storefront.core.filter_compiler import FilterCompiler, UnresolvedSlugPolicy
from storefront.core.similarity import candidate_pool_query, rank_similar
from storefront.infra.logging import get_logger
from storefront.schemas.catalog import (
    LISTABLE_STATUSES,
    DesignerRef,
    FilterState,
    ProductStatus,
    ProductView,
    ScoredProduct,
)
from storefront.store.base import CatalogStore, ProductQuery

logger = get_logger(__name__)


class CatalogService:
    """Read-side operations of the public storefront."""

    def __init__(
        self,
        store: CatalogStore,
        policy: UnresolvedSlugPolicy | None = None,
        similar_limit: int | None = None,
        candidate_limit: int | None = None,
    ) -> None:
        """Initialize catalog service.

        Args:
            store: Catalog store
            policy: Unresolved filter slug policy (defaults to settings)
            similar_limit: Similar products returned (defaults to settings)
            candidate_limit: Candidate pool size for similarity (defaults to settings)
        """
        self.store = store
        self.compiler = FilterCompiler(
            store,
            policy or UnresolvedSlugPolicy(settings.unresolved_slug_policy),
        )
        self.similar_limit = similar_limit or settings.similar_products_limit
        self.candidate_limit = candidate_limit or settings.similar_candidate_limit

    async def list_products(self, filters: FilterState) -> list[ProductView]:
        """Listable products matching ``filters``, newest first.

        Raises:
            StoreError: If the store fails
        """
        products = await self.compiler.run(filters, statuses=LISTABLE_STATUSES)
        logger.info(
            "Catalog listed",
            filters=filters.model_dump(exclude_none=True),
            count=len(products),
        )
        return products

    async def get_product(self, slug: str) -> ProductView | None:
        """Product by slug, or None if there is none."""
        products = await self.store.query_products(ProductQuery(slug=slug, limit=1))
        return products[0] if products else None

    async def require_product(self, slug: str) -> ProductView:
        """Product by slug.

        Raises:
            EntityNotFoundError: If no product has that slug
        """
        product = await self.get_product(slug)
        if product is None:
            raise EntityNotFoundError("product", slug)
        return product

    async def featured_products(self, limit: int | None = None) -> list[ProductView]:
        """Newest available products."""
        return await self.store.query_products(
            ProductQuery(
                statuses=frozenset({ProductStatus.AVAILABLE}),
                limit=limit or settings.featured_products_limit,
            )
        )

    async def similar_products(
        self,
        reference: ProductView | None,
        limit: int | None = None,
    ) -> list[ScoredProduct]:
        """Products most similar to ``reference``, best first.

        Args:
            reference: Product being viewed; None yields an empty feed
            limit: Maximum results (defaults to the configured limit)
        """
        if reference is None:
            return []

        limit = limit or self.similar_limit
        pool = await self.store.query_products(
            candidate_pool_query(reference, max(self.candidate_limit, limit))
        )
        ranked = rank_similar(reference, pool, limit)

        logger.debug(
            "Similar products ranked",
            product_id=str(reference.id),
            pool_size=len(pool),
            returned=len(ranked),
            top_score=ranked[0].score if ranked else None,
        )
        return ranked

    async def get_designer(self, slug: str) -> tuple[DesignerRef, list[ProductView]]:
        """Designer page: the designer and their listable products.

        Raises:
            EntityNotFoundError: If no designer has that slug
        """
        designer_id = await self.store.resolve(AttributeKind.DESIGNERS, slug)
        row = await self.store.get(AttributeKind.DESIGNERS.value, designer_id) if designer_id else None
        if row is None:
            raise EntityNotFoundError("designer", slug)

        products = await self.list_products(FilterState(designer=slug))
        return DesignerRef.model_validate(row), products
