"""Exception hierarchy for the storefront.

Unresolved filter slugs are deliberately absent here: they are ordinary
values (see ``storefront.core.filter_compiler.UnresolvedSlug``).
"""


class StorefrontError(Exception):
    """Base class for all storefront errors."""


class StoreError(StorefrontError):
    """Raised when the external store fails to execute a read or write."""


class EntityNotFoundError(StorefrontError):
    """Raised when a required row does not exist."""

    def __init__(self, kind: str, key: object) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}")


class ProductUnavailableError(StorefrontError):
    """Raised when a hold is requested on a product that is not available."""

    def __init__(self, product_id: object) -> None:
        self.product_id = product_id
        super().__init__(f"Product {product_id} is not available for hold")


class ImageValidationError(StorefrontError):
    """Raised when an uploaded image is rejected."""


class BlobStoreError(StorefrontError):
    """Raised when the image blob store fails."""


class ConflictError(StoreError):
    """Raised when a write violates a uniqueness or foreign-key constraint."""
