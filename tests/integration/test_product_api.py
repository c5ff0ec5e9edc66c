"""HTTP tests for the product routes against an in-memory database."""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from src.shopapp.api.http.app import app
from src.shopapp.api.http.app_data import ApplicationDependencies
from src.shopapp.api.http.deps import get_db_session
from src.shopapp.core.errors import ProductCacheError
from src.shopapp.core.services import (
    DbSessionService,
    LoggingProductEventPublisher,
    RedisService,
)
from src.shopapp.runtime.context import get_config

pytestmark = pytest.mark.integration

BASE = f"{get_config().app.api_prefix}/products"


@pytest.fixture
def app_dependencies(product_cache, localizer, file_storage, image_validator):
    database_service = Mock(spec=DbSessionService)
    database_service.health_check.return_value = True
    redis_service = Mock(spec=RedisService)
    redis_service.is_enabled = False
    return ApplicationDependencies(
        database_service=database_service,
        redis_service=redis_service,
        product_cache=product_cache,
        event_publisher=LoggingProductEventPublisher(),
        localizer=localizer,
        file_storage=file_storage,
        image_validator=image_validator,
    )


@pytest.fixture
def client(session, app_dependencies):
    """Test client wired to the test session; the lifespan is not run."""

    def _session_override():
        yield session

    app.state.app_dependencies = app_dependencies
    app.dependency_overrides[get_db_session] = _session_override
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def created_product(client, category):
    response = client.post(
        f"{BASE}/",
        json={"name": "Gaming Laptop", "price": 1500, "category_id": category.id},
    )
    assert response.status_code == 200
    return response.json()


class TestProductCrud:
    def test_create_and_get(self, client, created_product):
        response = client.get(f"{BASE}/{created_product['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Gaming Laptop"
        assert body["product_images"] == []

    def test_create_invalid_payload(self, client, category):
        response = client.post(f"{BASE}/", json={"name": "ab", "category_id": category.id})

        assert response.status_code == 400
        assert response.json() == ["Title must be between 3 and 200 characters"]

    def test_create_invalid_payload_lists_messages_in_field_order(
        self, client, category
    ):
        response = client.post(
            f"{BASE}/", json={"name": "ab", "price": -1, "category_id": category.id}
        )

        assert response.status_code == 400
        assert response.json() == [
            "Title must be between 3 and 200 characters",
            "Price must be greater than or equal to 0",
        ]

    def test_create_with_unknown_category(self, client, category):
        response = client.post(f"{BASE}/", json={"name": "Phone", "category_id": 999})

        assert response.status_code == 400
        assert response.json() == "Cannot find category with id: 999"

    def test_get_unknown_product(self, client):
        response = client.get(f"{BASE}/999")

        assert response.status_code == 400
        assert response.json() == "Cannot find product with id: 999"

    def test_get_by_ids(self, client, product_factory):
        first = product_factory("First")
        second = product_factory("Second")

        response = client.get(f"{BASE}/by-ids", params={"ids": f"{second.id},{first.id}"})

        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["First", "Second"]

    def test_update(self, client, created_product, category):
        response = client.put(
            f"{BASE}/{created_product['id']}",
            json={"name": "Office Laptop", "category_id": category.id},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Office Laptop"
        assert response.json()["price"] == 1500

    def test_delete_is_idempotent(self, client, created_product):
        for _ in range(2):
            response = client.delete(f"{BASE}/{created_product['id']}")
            assert response.status_code == 200
            assert response.json() == (
                f"Product with id = {created_product['id']} deleted successfully"
            )


class TestListing:
    def test_pages_and_cache(self, client, product_factory, product_cache):
        for i in range(3):
            product_factory(f"Item {i}")

        first = client.get(f"{BASE}/", params={"page": 0, "limit": 2})
        product_factory("Item 3")
        second = client.get(f"{BASE}/", params={"page": 0, "limit": 2})

        assert first.status_code == 200
        assert first.json()["total_pages"] == 2
        # The second call is served from the cache and does not see Item 3
        assert second.json() == first.json()

    def test_keyword_filter(self, client, product_factory):
        product_factory("Red Chair")
        product_factory("Blue Table")

        response = client.get(f"{BASE}/", params={"keyword": "Chair"})

        assert [p["name"] for p in response.json()["products"]] == ["Red Chair"]

    def test_cache_failure_is_server_error(self, client, app_dependencies):
        app_dependencies.product_cache = Mock()
        app_dependencies.product_cache.get_all_products.side_effect = ProductCacheError(
            "Redis get failed"
        )

        response = client.get(f"{BASE}/")

        assert response.status_code == 500


class TestImages:
    def test_upload_and_view(self, client, created_product):
        response = client.post(
            f"{BASE}/uploads/{created_product['id']}",
            files=[("files", ("front.jpg", b"\xff\xd8jpeg", "image/jpeg"))],
        )

        assert response.status_code == 200
        image_url = response.json()[0]["image_url"]

        product = client.get(f"{BASE}/{created_product['id']}").json()
        assert product["thumbnail"] == image_url
        assert len(product["product_images"]) == 1

        image = client.get(f"{BASE}/images/{image_url}")
        assert image.status_code == 200
        assert image.headers["content-type"] == "image/jpeg"
        assert image.content == b"\xff\xd8jpeg"

    def test_upload_rejects_non_image_in_vietnamese(self, client, created_product):
        response = client.post(
            f"{BASE}/uploads/{created_product['id']}",
            files=[("files", ("notes.txt", b"text", "text/plain"))],
            headers={"Accept-Language": "vi"},
        )

        assert response.status_code == 415
        assert response.json() == "File phải là định dạng ảnh"

    def test_missing_image_uses_fallback(self, client, upload_dir):
        (upload_dir / "notfound.jpeg").write_bytes(b"placeholder")

        response = client.get(f"{BASE}/images/nothing.jpg")

        assert response.status_code == 200
        assert response.content == b"placeholder"

    def test_missing_image_serves_installed_placeholder(self, client, file_storage):
        file_storage.install_fallback_image()

        response = client.get(f"{BASE}/images/nothing.jpg")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"
        assert response.content[:2] == b"\xff\xd8"

    def test_upload_with_overlong_filename_leaves_no_file(
        self, client, created_product, upload_dir
    ):
        response = client.post(
            f"{BASE}/uploads/{created_product['id']}",
            files=[("files", ("x" * 296 + ".jpg", b"\xff\xd8jpeg", "image/jpeg"))],
        )

        assert response.status_code == 400
        assert list(upload_dir.iterdir()) == []
        product = client.get(f"{BASE}/{created_product['id']}").json()
        assert product["product_images"] == []

    def test_missing_image_without_fallback(self, client):
        response = client.get(f"{BASE}/images/nothing.jpg")

        assert response.status_code == 404


class TestHealth:
    def test_liveness(self, client):
        assert client.get("/health").json()["status"] == "healthy"

    def test_readiness(self, client):
        response = client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["checks"]["database"]["status"] == "healthy"
        assert body["checks"]["redis"]["status"] == "disabled"

    def test_readiness_without_database(self, client, app_dependencies):
        app_dependencies.database_service.health_check.return_value = False

        response = client.get("/health/ready")

        assert response.status_code == 503
