"""Public catalog endpoints: listing, product detail, similar products, designers."""

from fastapi import APIRouter, Query

from storefront.api.deps import Catalog
from storefront.core.errors import StoreError
from storefront.infra.logging import get_logger
from storefront.schemas.catalog import (
    DesignerDetailResponse,
    FilterState,
    ProductListResponse,
    ProductView,
    SimilarProductsResponse,
)

router = APIRouter()
logger = get_logger(__name__)

NO_PRODUCTS_MESSAGE = "No products found"


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    catalog: Catalog,
    search: str | None = None,
    designer: str | None = None,
    maker: str | None = None,
    category: str | None = None,
    subcategory: str | None = None,
    style: str | None = None,
    period: str | None = None,
    country: str | None = None,
    color: str | None = None,
    year_from: int | None = Query(default=None, alias="yearFrom"),
    year_to: int | None = Query(default=None, alias="yearTo"),
) -> ProductListResponse:
    """List products matching the filter selections, newest first.

    A store failure is shown to the customer as an empty result.
    """
    filters = FilterState(
        search=search,
        designer=designer,
        maker=maker,
        category=category,
        subcategory=subcategory,
        style=style,
        period=period,
        country=country,
        color=color,
        year_from=year_from,
        year_to=year_to,
    )

    try:
        products = await catalog.list_products(filters)
    except StoreError as e:
        logger.error("Catalog listing failed", error=str(e))
        return ProductListResponse(message=NO_PRODUCTS_MESSAGE)

    return ProductListResponse(
        products=products,
        total=len(products),
        message=None if products else NO_PRODUCTS_MESSAGE,
    )


@router.get("/products/featured", response_model=list[ProductView])
async def featured_products(
    catalog: Catalog,
    limit: int | None = Query(default=None, ge=1, le=100),
) -> list[ProductView]:
    return await catalog.featured_products(limit)


@router.get("/products/{slug}", response_model=ProductView)
async def get_product(slug: str, catalog: Catalog) -> ProductView:
    return await catalog.require_product(slug)


@router.get("/products/{slug}/similar", response_model=SimilarProductsResponse)
async def similar_products(
    slug: str,
    catalog: Catalog,
    limit: int | None = Query(default=None, ge=1, le=50),
) -> SimilarProductsResponse:
    """Products that share the most attributes with this one, best first.

    Each product carries its similarity score as ``_score``.
    """
    reference = await catalog.require_product(slug)
    return SimilarProductsResponse(products=await catalog.similar_products(reference, limit))


@router.get("/designers/{slug}", response_model=DesignerDetailResponse)
async def get_designer(slug: str, catalog: Catalog) -> DesignerDetailResponse:
    designer, products = await catalog.get_designer(slug)
    return DesignerDetailResponse(designer=designer, products=products)
