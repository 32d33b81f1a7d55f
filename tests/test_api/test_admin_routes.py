"""Tests for the back-office endpoints.

Services are replaced with mocks; their behaviour is covered in
tests/test_services.
"""

from datetime import date, datetime, timezone
from io import BytesIO
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image

from storefront.api.deps import get_admin_service, get_image_service, get_inquiry_service
from storefront.core.attributes import AttributeKind
from storefront.core.errors import ConflictError, EntityNotFoundError, ImageValidationError
from storefront.main import app
from storefront.schemas.admin import (
    AttributeOut,
    DashboardStats,
    ImportResult,
    InventorySchedule,
    ProductIn,
)
from storefront.schemas.catalog import ProductImageRef, ProductStatus, ProductView
from storefront.services.admin_service import AdminService
from storefront.services.image_service import ImageService
from storefront.services.inquiry_service import INQUIRIES_TABLE, OFFERS_TABLE, InquiryService


@pytest.fixture
def admin() -> MagicMock:
    return MagicMock(spec=AdminService)


@pytest.fixture
def images() -> MagicMock:
    return MagicMock(spec=ImageService)


@pytest.fixture
def inquiries() -> MagicMock:
    return MagicMock(spec=InquiryService)


@pytest_asyncio.fixture
async def admin_client(admin, images, inquiries):
    app.dependency_overrides[get_admin_service] = lambda: admin
    app.dependency_overrides[get_image_service] = lambda: images
    app.dependency_overrides[get_inquiry_service] = lambda: inquiries
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def _png() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), "white").save(buffer, format="PNG")
    return buffer.getvalue()


class TestAttributes:
    """Tests for /admin/attributes/{kind}."""

    @pytest.mark.asyncio
    async def test_list(self, admin_client: AsyncClient, admin):
        style = AttributeOut(id=uuid4(), name="Mid-Century", slug="mid-century")
        admin.list_attributes = AsyncMock(return_value=[style])

        response = await admin_client.get("/admin/attributes/styles")

        assert response.status_code == 200
        assert response.json()[0]["slug"] == "mid-century"
        admin.list_attributes.assert_awaited_once_with(AttributeKind.STYLES)

    @pytest.mark.asyncio
    async def test_unknown_kind(self, admin_client: AsyncClient):
        response = await admin_client.get("/admin/attributes/widgets")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create(self, admin_client: AsyncClient, admin):
        created = AttributeOut(id=uuid4(), name="Red", slug="red", hex_code="#ff0000")
        admin.create_attribute = AsyncMock(return_value=created)

        response = await admin_client.post(
            "/admin/attributes/colors",
            json={"name": "Red", "slug": "red", "hex_code": "#ff0000"},
        )

        assert response.status_code == 201
        kind, data = admin.create_attribute.await_args.args
        assert kind == AttributeKind.COLORS
        assert data.hex_code == "#ff0000"

    @pytest.mark.asyncio
    async def test_create_duplicate_slug(self, admin_client: AsyncClient, admin):
        admin.create_attribute = AsyncMock(side_effect=ConflictError("slug already exists"))

        response = await admin_client.post(
            "/admin/attributes/styles",
            json={"name": "Modern", "slug": "modern"},
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_create_bad_slug(self, admin_client: AsyncClient, admin):
        admin.create_attribute = AsyncMock()

        response = await admin_client.post(
            "/admin/attributes/styles",
            json={"name": "Modern", "slug": "Not A Slug"},
        )

        assert response.status_code == 422
        admin.create_attribute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_missing(self, admin_client: AsyncClient, admin):
        attribute_id = uuid4()
        admin.delete_attribute = AsyncMock(side_effect=EntityNotFoundError("styles", attribute_id))

        response = await admin_client.delete(f"/admin/attributes/styles/{attribute_id}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_import_designers(self, admin_client: AsyncClient, admin):
        admin.import_designers = AsyncMock(
            return_value=ImportResult(
                imported=1,
                skipped=1,
                message="Successfully imported 1 designers, skipped 1 invalid entries",
            )
        )

        response = await admin_client.post(
            "/admin/designers/import",
            json={"designers": [{"name": "Finn Juhl", "slug": "finn-juhl"}, {"name": "No slug"}]},
        )

        assert response.status_code == 200
        assert response.json()["imported"] == 1
        (entries,) = admin.import_designers.await_args.args
        assert len(entries) == 2


class TestProducts:
    """Tests for /admin/products."""

    @pytest.mark.asyncio
    async def test_list_by_status(self, admin_client: AsyncClient, admin):
        admin.list_products = AsyncMock(return_value=[])

        response = await admin_client.get("/admin/products", params={"status": "inventory"})

        assert response.status_code == 200
        admin.list_products.assert_awaited_once_with(ProductStatus.INVENTORY)

    @pytest.mark.asyncio
    async def test_create(self, admin_client: AsyncClient, admin):
        product = ProductView(id=uuid4(), name="Lamp", slug="lamp")
        admin.create_product = AsyncMock(return_value=product)

        response = await admin_client.post(
            "/admin/products",
            json={"name": "Lamp", "slug": "lamp", "tags": ["brass", " brass "]},
        )

        assert response.status_code == 201
        assert response.json()["id"] == str(product.id)
        (data,) = admin.create_product.await_args.args
        assert isinstance(data, ProductIn)
        assert data.tags == ["brass"]

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_field(self, admin_client: AsyncClient):
        response = await admin_client.post(
            "/admin/products",
            json={"name": "Lamp", "slug": "lamp", "colour": "red"},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_patch_sends_only_set_fields(self, admin_client: AsyncClient, admin):
        product_id = uuid4()
        admin.update_product = AsyncMock(
            return_value=ProductView(id=product_id, name="Lamp", slug="lamp", status=ProductStatus.SOLD)
        )

        response = await admin_client.patch(f"/admin/products/{product_id}", json={"status": "sold"})

        assert response.status_code == 200
        _, patch = admin.update_product.await_args.args
        assert patch.model_dump(exclude_unset=True) == {"status": ProductStatus.SOLD}

    @pytest.mark.asyncio
    async def test_delete(self, admin_client: AsyncClient, admin):
        product_id = uuid4()
        admin.delete_product = AsyncMock()

        response = await admin_client.delete(f"/admin/products/{product_id}")

        assert response.status_code == 204
        admin.delete_product.assert_awaited_once_with(product_id)

    @pytest.mark.asyncio
    async def test_go_live_date(self, admin_client: AsyncClient, admin):
        product_id = uuid4()
        admin.set_go_live_date = AsyncMock()

        response = await admin_client.put(
            f"/admin/products/{product_id}/go-live-date",
            json={"go_live_date": "2024-06-01"},
        )

        assert response.status_code == 204
        admin.set_go_live_date.assert_awaited_once_with(product_id, date(2024, 6, 1))


class TestImages:
    """Tests for image management routes."""

    @pytest.mark.asyncio
    async def test_upload(self, admin_client: AsyncClient, images):
        product_id = uuid4()
        stored = [
            ProductImageRef(id=uuid4(), image_url="https://cdn.example.com/W1/1-0.png", sort_order=0),
            ProductImageRef(id=uuid4(), image_url="https://cdn.example.com/W1/1-1.png", sort_order=1),
        ]
        images.upload_images = AsyncMock(return_value=stored)
        png = _png()

        response = await admin_client.post(
            f"/admin/products/{product_id}/images",
            files=[
                ("files", ("front.png", png, "image/png")),
                ("files", ("back.png", png, "image/png")),
            ],
        )

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Successfully uploaded 2 images"
        assert len(data["images"]) == 2
        called_id, uploads = images.upload_images.await_args.args
        assert called_id == product_id
        assert [u.filename for u in uploads] == ["front.png", "back.png"]
        assert uploads[0].data == png

    @pytest.mark.asyncio
    async def test_upload_rejected(self, admin_client: AsyncClient, images):
        images.upload_images = AsyncMock(side_effect=ImageValidationError("notes.txt: not a readable image"))

        response = await admin_client.post(
            f"/admin/products/{uuid4()}/images",
            files=[("files", ("notes.txt", b"hello", "text/plain"))],
        )

        assert response.status_code == 422
        assert response.json()["error"] == "notes.txt: not a readable image"

    @pytest.mark.asyncio
    async def test_reorder(self, admin_client: AsyncClient, images):
        product_id, image_id = uuid4(), uuid4()
        images.reorder_images = AsyncMock()

        response = await admin_client.put(
            f"/admin/products/{product_id}/images/order",
            json=[{"id": str(image_id), "sort_order": 3}],
        )

        assert response.status_code == 204
        _, order = images.reorder_images.await_args.args
        assert order[0].id == image_id
        assert order[0].sort_order == 3

    @pytest.mark.asyncio
    async def test_delete_image(self, admin_client: AsyncClient, images):
        image_id = uuid4()
        images.delete_image = AsyncMock()

        response = await admin_client.delete(f"/admin/images/{image_id}")

        assert response.status_code == 204
        images.delete_image.assert_awaited_once_with(image_id)


class TestCustomerRequests:
    """Tests for holds, offers and inquiries in the back-office."""

    @pytest.mark.asyncio
    async def test_release_hold(self, admin_client: AsyncClient, inquiries):
        hold_id = uuid4()
        inquiries.release_hold = AsyncMock()

        response = await admin_client.delete(f"/admin/holds/{hold_id}")

        assert response.status_code == 204
        inquiries.release_hold.assert_awaited_once_with(hold_id)

    @pytest.mark.asyncio
    async def test_release_expired(self, admin_client: AsyncClient, inquiries):
        inquiries.release_expired_holds = AsyncMock(return_value=3)

        response = await admin_client.post("/admin/holds/release-expired")

        assert response.status_code == 200
        assert response.json() == {"released": 3}

    @pytest.mark.asyncio
    async def test_mark_offer_read(self, admin_client: AsyncClient, inquiries):
        offer_id = uuid4()
        inquiries.mark_read = AsyncMock()

        response = await admin_client.post(f"/admin/offers/{offer_id}/read")

        assert response.status_code == 204
        inquiries.mark_read.assert_awaited_once_with(OFFERS_TABLE, offer_id)

    @pytest.mark.asyncio
    async def test_delete_inquiry(self, admin_client: AsyncClient, inquiries):
        inquiry_id = uuid4()
        inquiries.delete_record = AsyncMock()

        response = await admin_client.delete(f"/admin/inquiries/{inquiry_id}")

        assert response.status_code == 204
        inquiries.delete_record.assert_awaited_once_with(INQUIRIES_TABLE, inquiry_id)

    @pytest.mark.asyncio
    async def test_list_holds(self, admin_client: AsyncClient, admin):
        admin.list_holds = AsyncMock(return_value=[])

        response = await admin_client.get("/admin/holds")

        assert response.status_code == 200
        assert response.json() == []


class TestDashboard:
    @pytest.mark.asyncio
    async def test_dashboard(self, admin_client: AsyncClient, admin):
        admin.dashboard_stats = AsyncMock(
            return_value=DashboardStats(total_products=10, available_products=7, active_holds=1)
        )

        response = await admin_client.get("/admin/dashboard")

        assert response.status_code == 200
        assert response.json()["available_products"] == 7

    @pytest.mark.asyncio
    async def test_inventory(self, admin_client: AsyncClient, admin):
        product = ProductView(
            id=uuid4(),
            name="Lamp",
            slug="lamp",
            status=ProductStatus.INVENTORY,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        admin.inventory_schedule = AsyncMock(return_value=InventorySchedule(unscheduled=[product]))

        response = await admin_client.get("/admin/inventory")

        assert response.status_code == 200
        data = response.json()
        assert data["scheduled"] == []
        assert data["unscheduled"][0]["id"] == str(product.id)
