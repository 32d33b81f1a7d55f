"""Image Service - product image management.

Uploads are validated with Pillow (actual decoded format, not the declared
content type), stored under ``{sku}/{timestamp}-{i}.{ext}`` and recorded
with their CDN URL.
"""

import time
from dataclasses import dataclass
from io import BytesIO
from uuid import UUID

from PIL import Image, UnidentifiedImageError
from sqlalchemy import func, select

from storefront.config import settings
from storefront.core.errors import EntityNotFoundError, ImageValidationError
from storefront.infra.logging import get_logger
from storefront.infra.storage import StorageClient
from storefront.models import ProductImage
from storefront.schemas.admin import ImageOrder
from storefront.schemas.catalog import ProductImageRef
from storefront.store.sql_store import SqlCatalogStore

logger = get_logger(__name__)

IMAGES_TABLE = "product_images"
PRODUCTS_TABLE = "products"

# Pillow format -> (file extension, content type)
FORMAT_FILE_TYPES: dict[str, tuple[str, str]] = {
    "JPEG": ("jpg", "image/jpeg"),
    "PNG": ("png", "image/png"),
    "WEBP": ("webp", "image/webp"),
    "GIF": ("gif", "image/gif"),
}


@dataclass(frozen=True)
class ImageUpload:
    """One uploaded file."""

    filename: str
    data: bytes


@dataclass(frozen=True)
class ValidatedImage:
    data: bytes
    extension: str
    content_type: str


def validate_image(
    upload: ImageUpload,
    max_bytes: int | None = None,
    allowed_formats: list[str] | None = None,
) -> ValidatedImage:
    """Check an upload's size and decoded image format.

    Raises:
        ImageValidationError: If the file is too large, not an image, or of a
            format that is not allowed
    """
    max_bytes = max_bytes or settings.image_max_bytes
    allowed_formats = allowed_formats or settings.image_allowed_formats

    if not upload.data:
        raise ImageValidationError(f"{upload.filename}: file is empty")
    if len(upload.data) > max_bytes:
        raise ImageValidationError(
            f"{upload.filename}: file too large, maximum size is {max_bytes // (1024 * 1024)}MB"
        )

    try:
        with Image.open(BytesIO(upload.data)) as img:
            image_format = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ImageValidationError(f"{upload.filename}: not a readable image") from e

    if image_format not in allowed_formats or image_format not in FORMAT_FILE_TYPES:
        raise ImageValidationError(
            f"{upload.filename}: invalid file type {image_format}. "
            f"Allowed: {', '.join(f.lower() for f in allowed_formats)}"
        )

    extension, content_type = FORMAT_FILE_TYPES[image_format]
    return ValidatedImage(data=upload.data, extension=extension, content_type=content_type)


def image_blob_path(sku: str, timestamp_ms: int, index: int, extension: str) -> str:
    return f"{sku}/{timestamp_ms}-{index}.{extension}"


def image_alt_text(sort_order: int) -> str:
    return f"Product image {sort_order + 1}"


class ImageService:
    """Product image uploads, deletion and ordering."""

    def __init__(self, store: SqlCatalogStore, storage: StorageClient) -> None:
        """Initialize image service.

        Args:
            store: Catalog store
            storage: Blob storage for the image files
        """
        self.store = store
        self.storage = storage

    async def _next_sort_order(self, product_id: UUID) -> int:
        result = await self.store.execute(
            "next_sort_order",
            select(func.coalesce(func.max(ProductImage.sort_order) + 1, 0)).where(
                ProductImage.product_id == product_id
            ),
            product_id=str(product_id),
        )
        return result.scalar_one()

    async def upload_images(
        self,
        product_id: UUID,
        uploads: list[ImageUpload],
    ) -> list[ProductImageRef]:
        """Store images for a product after the existing ones.

        Every file is validated before any is uploaded.

        Raises:
            EntityNotFoundError: If the product does not exist
            ImageValidationError: If the product has no SKU or a file is rejected
            BlobStoreError: If an upload fails
        """
        product = await self.store.get(PRODUCTS_TABLE, product_id)
        if product is None:
            raise EntityNotFoundError("product", product_id)
        if not product.get("sku"):
            raise ImageValidationError("Product needs a SKU before images can be uploaded")
        if not uploads:
            raise ImageValidationError("No files to upload")

        validated = [validate_image(upload) for upload in uploads]
        start = await self._next_sort_order(product_id)
        timestamp_ms = int(time.time() * 1000)

        images: list[ProductImageRef] = []
        for i, image in enumerate(validated):
            blob_path = image_blob_path(product["sku"], timestamp_ms, i, image.extension)
            url = await self.storage.upload_bytes(image.data, blob_path, image.content_type)

            sort_order = start + i
            row = await self.store.insert(
                IMAGES_TABLE,
                {
                    "product_id": product_id,
                    "image_url": url,
                    "sort_order": sort_order,
                    "alt_text": image_alt_text(sort_order),
                },
            )
            images.append(ProductImageRef.model_validate(row))

        logger.info("Images uploaded", product_id=str(product_id), count=len(images))
        return images

    async def delete_image(self, image_id: UUID) -> None:
        """Delete an image record and, when possible, its blob.

        Raises:
            EntityNotFoundError: If the image does not exist
        """
        image = await self.store.get(IMAGES_TABLE, image_id)
        if image is None:
            raise EntityNotFoundError("image", image_id)

        blob_deleted = await self.storage.delete_url(image["image_url"])
        await self.store.delete(IMAGES_TABLE, image_id)
        logger.info("Image deleted", image_id=str(image_id), blob_deleted=blob_deleted)

    async def reorder_images(self, product_id: UUID, order: list[ImageOrder]) -> None:
        """Set sort_order on the given images of a product.

        Raises:
            EntityNotFoundError: If an image does not belong to the product
        """
        for item in order:
            image = await self.store.get(IMAGES_TABLE, item.id)
            if image is None or image["product_id"] != product_id:
                raise EntityNotFoundError("image", item.id)
            await self.store.update(IMAGES_TABLE, item.id, {"sort_order": item.sort_order})
        logger.info("Images reordered", product_id=str(product_id), count=len(order))

    async def set_featured_image(self, product_id: UUID, image_url: str) -> None:
        if not await self.store.update(PRODUCTS_TABLE, product_id, {"featured_image_url": image_url}):
            raise EntityNotFoundError("product", product_id)
        logger.info("Featured image set", product_id=str(product_id))
