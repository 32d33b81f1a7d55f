"""Spec Sheet Service - product spec sheet documents.

Builds the content of a customer-facing spec sheet and records who asked for
it. Turning the document into a PDF is left to the caller.
"""

from storefront.config import settings
from storefront.core.errors import StoreError
from storefront.core.formatting import format_dimensions, format_price
from storefront.infra.logging import get_logger
from storefront.schemas.actions import SpecSheet, SpecSheetDimensions, SpecSheetRequest
from storefront.schemas.catalog import ProductView
from storefront.services.catalog_service import CatalogService
from storefront.store.base import CatalogStore

logger = get_logger(__name__)

DOWNLOADS_TABLE = "spec_sheet_downloads"


def _attribute_names(product: ProductView) -> dict[str, str]:
    """Label -> display name for the attributes a product has.

    A free-text attribution is used where no linked entity exists.
    """
    candidates = (
        ("Designer", product.designer.name if product.designer else product.designer_attribution),
        ("Maker", product.maker.name if product.maker else product.maker_attribution),
        ("Category", product.category.name if product.category else None),
        ("Subcategory", product.subcategory.name if product.subcategory else None),
        ("Style", product.style.name if product.style else None),
        ("Period", product.period.name if product.period else product.period_attribution),
        ("Country", product.country.name if product.country else None),
    )
    names = {label: value for label, value in candidates if value}
    if product.colors:
        names["Colors"] = ", ".join(color.name for color in product.colors)
    return names


def build_spec_sheet(product: ProductView, include_price: bool = True) -> SpecSheet:
    """Assemble the spec sheet document for ``product``."""
    return SpecSheet(
        business_name=settings.business_name,
        business_phone=settings.business_phone,
        product_name=product.name,
        product_url=f"{settings.public_base_url.rstrip('/')}/product/{product.slug}",
        price=format_price(product.price) if include_price else None,
        sku=product.sku,
        short_description=product.short_description,
        long_description=product.long_description,
        materials=product.materials,
        year_created=product.year_created,
        attributes=_attribute_names(product),
        dimensions=SpecSheetDimensions(
            product=format_dimensions(
                product.product_width,
                product.product_height,
                product.product_depth,
                product.product_weight,
            ),
            box=format_dimensions(
                product.box_width,
                product.box_height,
                product.box_depth,
                product.box_weight,
            ),
            notes=product.dimension_notes,
        ),
        featured_image_url=product.featured_image_url,
    )


class SpecSheetService:
    """Spec sheet requests from the product page."""

    def __init__(self, store: CatalogStore, catalog: CatalogService | None = None) -> None:
        self.store = store
        self.catalog = catalog or CatalogService(store)

    async def request_spec_sheet(self, slug: str, request: SpecSheetRequest) -> SpecSheet:
        """Record the download and return the spec sheet.

        Recording is best effort; a store failure is logged and the sheet is
        still returned.

        Raises:
            EntityNotFoundError: If no product has that slug
        """
        product = await self.catalog.require_product(slug)

        try:
            await self.store.insert(
                DOWNLOADS_TABLE,
                {
                    "product_id": product.id,
                    "customer_name": request.customer_name,
                    "customer_email": request.customer_email,
                    "include_price": request.include_price,
                },
            )
        except StoreError as e:
            logger.warning(
                "Failed to record spec sheet download",
                product_id=str(product.id),
                error=str(e),
            )

        logger.info(
            "Spec sheet generated",
            product_id=str(product.id),
            include_price=request.include_price,
        )
        return build_spec_sheet(product, include_price=request.include_price)
