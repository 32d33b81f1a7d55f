"""Store layer: the query interface the catalog core consumes."""

from storefront.store.base import CatalogStore, ProductQuery

__all__ = ["CatalogStore", "ProductQuery"]
