"""Tests for ImageService and upload validation."""

from io import BytesIO
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from PIL import Image

from storefront.core.errors import BlobStoreError, EntityNotFoundError, ImageValidationError
from storefront.infra.storage import StorageClient
from storefront.schemas.admin import ImageOrder
from storefront.services.image_service import (
    ImageService,
    ImageUpload,
    image_alt_text,
    image_blob_path,
    validate_image,
)
from storefront.store.sql_store import SqlCatalogStore


def image_bytes(fmt: str = "JPEG", size: tuple[int, int] = (40, 30)) -> bytes:
    """Encode a small solid image."""
    buffer = BytesIO()
    Image.new("RGB", size, color="red").save(buffer, fmt)
    return buffer.getvalue()


class TestValidateImage:
    """Tests for validate_image."""

    @pytest.mark.parametrize(
        ("fmt", "extension", "content_type"),
        [
            ("JPEG", "jpg", "image/jpeg"),
            ("PNG", "png", "image/png"),
            ("WEBP", "webp", "image/webp"),
            ("GIF", "gif", "image/gif"),
        ],
    )
    def test_allowed_formats(self, fmt, extension, content_type):
        validated = validate_image(ImageUpload("photo", image_bytes(fmt)))

        assert validated.extension == extension
        assert validated.content_type == content_type

    def test_format_comes_from_content(self):
        validated = validate_image(ImageUpload("photo.gif", image_bytes("PNG")))

        assert validated.extension == "png"

    def test_disallowed_format(self):
        with pytest.raises(ImageValidationError, match="invalid file type"):
            validate_image(ImageUpload("photo.bmp", image_bytes("BMP")))

    def test_not_an_image(self):
        with pytest.raises(ImageValidationError, match="not a readable image"):
            validate_image(ImageUpload("notes.txt", b"hello world"))

    def test_empty_file(self):
        with pytest.raises(ImageValidationError, match="empty"):
            validate_image(ImageUpload("photo.jpg", b""))

    def test_too_large(self):
        data = image_bytes()

        with pytest.raises(ImageValidationError, match="too large"):
            validate_image(ImageUpload("photo.jpg", data), max_bytes=len(data) - 1)


class TestNaming:
    def test_blob_path(self):
        assert image_blob_path("W414-001", 1700000000000, 2, "jpg") == "W414-001/1700000000000-2.jpg"

    def test_alt_text_is_one_based(self):
        assert image_alt_text(0) == "Product image 1"


class TestImageService:
    """Tests for ImageService."""

    @pytest.fixture
    def sql_store(self) -> MagicMock:
        store = MagicMock(spec=SqlCatalogStore)
        store.get = AsyncMock(return_value={"id": uuid4(), "sku": "W414-001"})
        store.insert = AsyncMock(
            side_effect=lambda table, row: {"id": uuid4(), **row}
        )
        store.update = AsyncMock(return_value=True)
        store.delete = AsyncMock(return_value=True)
        next_sort = MagicMock()
        next_sort.scalar_one.return_value = 2
        store.execute = AsyncMock(return_value=next_sort)
        return store

    @pytest.fixture
    def storage(self) -> MagicMock:
        storage = MagicMock(spec=StorageClient)
        storage.upload_bytes = AsyncMock(
            side_effect=lambda data, blob_path, content_type: f"https://cdn.test/{blob_path}"
        )
        storage.delete_url = AsyncMock(return_value=True)
        return storage

    @pytest.mark.asyncio
    async def test_upload_appends_after_existing(self, sql_store, storage):
        product_id = uuid4()
        uploads = [ImageUpload("a.jpg", image_bytes("JPEG")), ImageUpload("b.png", image_bytes("PNG"))]

        images = await ImageService(sql_store, storage).upload_images(product_id, uploads)

        assert [i.sort_order for i in images] == [2, 3]
        assert [i.alt_text for i in images] == ["Product image 3", "Product image 4"]
        paths = [call.args[1] for call in storage.upload_bytes.await_args_list]
        assert paths[0].startswith("W414-001/") and paths[0].endswith("-0.jpg")
        assert paths[1].endswith("-1.png")
        assert images[0].image_url == f"https://cdn.test/{paths[0]}"

    @pytest.mark.asyncio
    async def test_upload_requires_sku(self, sql_store, storage):
        sql_store.get.return_value = {"id": uuid4(), "sku": None}

        with pytest.raises(ImageValidationError, match="SKU"):
            await ImageService(sql_store, storage).upload_images(
                uuid4(), [ImageUpload("a.jpg", image_bytes())]
            )

        storage.upload_bytes.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_file_uploads_nothing(self, sql_store, storage):
        uploads = [ImageUpload("a.jpg", image_bytes()), ImageUpload("b.txt", b"text")]

        with pytest.raises(ImageValidationError):
            await ImageService(sql_store, storage).upload_images(uuid4(), uploads)

        storage.upload_bytes.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_upload_missing_product(self, sql_store, storage):
        sql_store.get.return_value = None

        with pytest.raises(EntityNotFoundError):
            await ImageService(sql_store, storage).upload_images(
                uuid4(), [ImageUpload("a.jpg", image_bytes())]
            )

    @pytest.mark.asyncio
    async def test_blob_failure_propagates(self, sql_store, storage):
        storage.upload_bytes.side_effect = BlobStoreError("bucket unavailable")

        with pytest.raises(BlobStoreError):
            await ImageService(sql_store, storage).upload_images(
                uuid4(), [ImageUpload("a.jpg", image_bytes())]
            )

        sql_store.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_image_even_if_blob_delete_fails(self, sql_store, storage):
        image_id = uuid4()
        sql_store.get.return_value = {"id": image_id, "image_url": "https://cdn.test/W414-001/1-0.jpg"}
        storage.delete_url.return_value = False

        await ImageService(sql_store, storage).delete_image(image_id)

        storage.delete_url.assert_awaited_once_with("https://cdn.test/W414-001/1-0.jpg")
        sql_store.delete.assert_awaited_once_with("product_images", image_id)

    @pytest.mark.asyncio
    async def test_delete_missing_image(self, sql_store, storage):
        sql_store.get.return_value = None

        with pytest.raises(EntityNotFoundError):
            await ImageService(sql_store, storage).delete_image(uuid4())

    @pytest.mark.asyncio
    async def test_reorder(self, sql_store, storage):
        product_id, first, second = uuid4(), uuid4(), uuid4()
        sql_store.get.return_value = {"product_id": product_id}

        await ImageService(sql_store, storage).reorder_images(
            product_id,
            [ImageOrder(id=first, sort_order=1), ImageOrder(id=second, sort_order=0)],
        )

        assert [call.args for call in sql_store.update.await_args_list] == [
            ("product_images", first, {"sort_order": 1}),
            ("product_images", second, {"sort_order": 0}),
        ]

    @pytest.mark.asyncio
    async def test_reorder_rejects_foreign_image(self, sql_store, storage):
        sql_store.get.return_value = {"product_id": uuid4()}

        with pytest.raises(EntityNotFoundError):
            await ImageService(sql_store, storage).reorder_images(
                uuid4(), [ImageOrder(id=uuid4(), sort_order=0)]
            )

    @pytest.mark.asyncio
    async def test_set_featured_image(self, sql_store, storage):
        product_id = uuid4()

        await ImageService(sql_store, storage).set_featured_image(product_id, "https://cdn.test/x.jpg")

        sql_store.update.assert_awaited_once_with(
            "products", product_id, {"featured_image_url": "https://cdn.test/x.jpg"}
        )
