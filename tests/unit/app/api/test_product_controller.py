"""Unit tests for ProductController with mocked collaborators."""

import json
from unittest.mock import Mock

import pytest

from src.shopapp.api.http.controllers.product import ProductController, parse_ids
from src.shopapp.core.errors import (
    DataNotFoundError,
    InvalidParamError,
    ProductCacheError,
)
from src.shopapp.core.models.product import Page, PageRequest, ProductResponse
from src.shopapp.core.services import ProductService
from src.shopapp.core.storage import ProductListCache
from src.shopapp.entities.catalog import Product, ProductImage


def _body(response):
    return json.loads(response.body)


@pytest.fixture
def service() -> Mock:
    return Mock(spec=ProductService)


@pytest.fixture
def cache() -> Mock:
    return Mock(spec=ProductListCache)


@pytest.fixture
def controller(service, cache, localizer, file_storage, image_validator):
    return ProductController(
        product_service=service,
        product_cache=cache,
        localizer=localizer,
        file_storage=file_storage,
        image_validator=image_validator,
    )


class TestCreateAndUpdate:
    """Payload validation and error mapping."""

    def test_create_product(self, controller, service):
        service.create_product.return_value = Product(
            id=1, name="Phone", price=10.0, category_id=2
        )

        response = controller.create_product(
            {"name": "Phone", "price": 10, "category_id": 2}
        )

        assert response.status_code == 200
        assert _body(response)["id"] == 1

    def test_invalid_payload_lists_messages(self, controller, service):
        response = controller.create_product({"name": "ab", "price": -1})

        assert response.status_code == 400
        assert _body(response) == [
            "Title must be between 3 and 200 characters",
            "Price must be greater than or equal to 0",
        ]
        service.create_product.assert_not_called()

    def test_service_error_is_bad_request(self, controller, service):
        service.create_product.side_effect = DataNotFoundError(
            "Cannot find category with id: 9"
        )

        response = controller.create_product({"name": "Phone", "category_id": 9})

        assert response.status_code == 400
        assert _body(response) == "Cannot find category with id: 9"

    def test_update_product(self, controller, service):
        service.update_product.return_value = Product(id=4, name="Phone X")

        response = controller.update_product(4, {"name": "Phone X", "category_id": 1})

        assert response.status_code == 200
        assert _body(response)["name"] == "Phone X"

    def test_update_invalid_payload(self, controller, service):
        response = controller.update_product(4, {"price": 1})

        assert response.status_code == 400
        assert _body(response) == ["Title is required"]
        service.update_product.assert_not_called()


class TestReadAndDelete:
    def test_get_product_by_id(self, controller, service):
        service.get_product_by_id.return_value = Product(
            id=5,
            name="Camera",
            product_images=[ProductImage(id=1, product_id=5, image_url="c.jpg")],
        )

        response = controller.get_product_by_id(5)

        assert response.status_code == 200
        body = _body(response)
        assert body["id"] == 5
        assert body["product_images"][0]["image_url"] == "c.jpg"

    def test_get_missing_product(self, controller, service):
        service.get_product_by_id.side_effect = DataNotFoundError(
            "Cannot find product with id: 5"
        )

        response = controller.get_product_by_id(5)

        assert response.status_code == 400
        assert _body(response) == "Cannot find product with id: 5"

    def test_get_products_by_ids(self, controller, service):
        service.find_products_by_ids.return_value = [Product(id=1, name="One")]

        response = controller.get_products_by_ids("1, 3,")

        assert response.status_code == 200
        service.find_products_by_ids.assert_called_once_with([1, 3])

    def test_get_products_by_malformed_ids(self, controller, service):
        response = controller.get_products_by_ids("1,abc")

        assert response.status_code == 400
        service.find_products_by_ids.assert_not_called()

    def test_delete_product(self, controller, service):
        response = controller.delete_product(8)

        assert response.status_code == 200
        assert _body(response) == "Product with id = 8 deleted successfully"
        service.delete_product.assert_called_once_with(8)


def test_parse_ids():
    assert parse_ids("1,2,3") == [1, 2, 3]
    assert parse_ids(" 4 ,, 5 ") == [4, 5]
    assert parse_ids("") == []


class TestUploadImages:
    """Upload rejections and image creation."""

    def test_upload_images(self, controller, service, upload_factory, upload_dir):
        service.get_product_by_id.return_value = Product(id=77, name="Camera")
        service.create_product_images.side_effect = lambda product_id, dtos: [
            ProductImage(id=1, product_id=product_id, image_url=dto.image_url)
            for dto in dtos
        ]

        response = controller.upload_images(77, [upload_factory("front.jpg")])

        assert response.status_code == 200
        body = _body(response)
        assert body[0]["product_id"] == 77
        assert body[0]["image_url"].endswith("_front.jpg")
        assert (upload_dir / body[0]["image_url"]).exists()

    def test_upload_to_missing_product(self, controller, service, upload_factory):
        service.get_product_by_id.side_effect = DataNotFoundError(
            "Cannot find product with id: 1"
        )

        response = controller.upload_images(1, [upload_factory()])

        assert response.status_code == 400
        assert _body(response) == "Cannot find product with id: 1"

    def test_too_many_files(self, controller, service, upload_factory, upload_dir):
        service.get_product_by_id.return_value = Product(id=1, name="Camera")

        response = controller.upload_images(
            1, [upload_factory(f"{i}.jpg") for i in range(6)], "vi"
        )

        assert response.status_code == 400
        assert _body(response) == "Chỉ được upload tối đa 5 ảnh"
        assert list(upload_dir.iterdir()) == []

    def test_file_too_large(self, controller, service, upload_factory):
        service.get_product_by_id.return_value = Product(id=1, name="Camera")
        controller._validator.max_file_size_bytes = 4

        response = controller.upload_images(1, [upload_factory(content=b"12345")], "en")

        assert response.status_code == 413
        assert _body(response) == "File is too large! Maximum size is 10MB"

    def test_not_an_image(self, controller, service, upload_factory, upload_dir):
        service.get_product_by_id.return_value = Product(id=1, name="Camera")
        files = [
            upload_factory("ok.jpg"),
            upload_factory("doc.pdf", content_type="application/pdf"),
        ]

        response = controller.upload_images(1, files, "en-US,en;q=0.9")

        assert response.status_code == 415
        assert _body(response) == "File must be an image"
        assert list(upload_dir.iterdir()) == []
        service.create_product_images.assert_not_called()

    def test_batch_exceeding_remaining_slots(self, controller, service, upload_factory):
        service.get_product_by_id.return_value = Product(
            id=1,
            name="Camera",
            product_images=[
                ProductImage(id=i, product_id=1, image_url=f"{i}.jpg") for i in range(4)
            ],
        )

        response = controller.upload_images(1, [upload_factory("a.jpg"), upload_factory("b.jpg")])

        assert response.status_code == 400
        assert _body(response) == "Number of images must be <= 5"
        service.create_product_images.assert_not_called()

    def test_failed_save_removes_stored_files(
        self, controller, service, upload_factory, upload_dir
    ):
        service.get_product_by_id.return_value = Product(id=1, name="Camera")
        service.create_product_images.side_effect = InvalidParamError(
            "Number of images must be <= 5"
        )

        response = controller.upload_images(
            1, [upload_factory("a.jpg"), upload_factory("b.jpg")]
        )

        assert response.status_code == 400
        assert _body(response) == "Number of images must be <= 5"
        assert list(upload_dir.iterdir()) == []

    def test_overlong_filename_is_rejected_before_writing(
        self, controller, service, upload_factory, upload_dir
    ):
        service.get_product_by_id.return_value = Product(id=1, name="Camera")
        files = [upload_factory("ok.jpg"), upload_factory("x" * 296 + ".jpg")]

        response = controller.upload_images(1, files)

        assert response.status_code == 400
        assert _body(response) == ["String should have at most 300 characters"]
        assert list(upload_dir.iterdir()) == []
        service.create_product_images.assert_not_called()


class TestViewImage:
    def test_view_image(self, controller, upload_dir):
        (upload_dir / "a.jpg").write_bytes(b"jpeg")

        response = controller.view_image("a.jpg")

        assert response.status_code == 200
        assert response.media_type == "image/jpeg"

    def test_view_missing_image_without_fallback(self, controller):
        response = controller.view_image("missing.jpg")

        assert response.status_code == 404


class TestGetProducts:
    """Cache-aside listing."""

    def test_cache_miss_queries_and_fills_cache(self, controller, service, cache):
        cache.get_all_products.return_value = None
        page_request = PageRequest(page=0, size=2)
        service.get_all_products.return_value = Page(
            content=[ProductResponse(id=1, name="One"), ProductResponse(id=2, name="Two")],
            total_elements=5,
            page_request=page_request,
        )

        response = controller.get_products("", 0, 0, 2)

        body = _body(response)
        assert body["total_pages"] == 3
        assert [p["total_pages"] for p in body["products"]] == [3, 3]
        saved = cache.save_all_products.call_args.args
        assert [p.id for p in saved[0]] == [1, 2]
        assert saved[1:] == ("", 0, page_request)

    def test_cache_hit_skips_store(self, controller, service, cache):
        cache.get_all_products.return_value = [
            ProductResponse(id=1, name="One", total_pages=4)
        ]

        response = controller.get_products("one", 2, 1, 10)

        assert _body(response)["total_pages"] == 4
        service.get_all_products.assert_not_called()
        cache.save_all_products.assert_not_called()

    def test_empty_cached_page(self, controller, service, cache):
        cache.get_all_products.return_value = []

        body = _body(controller.get_products("", 0, 9, 10))

        assert body == {"products": [], "total_pages": 0}

    def test_cache_error_propagates(self, controller, cache):
        cache.get_all_products.side_effect = ProductCacheError("Redis get failed")

        with pytest.raises(ProductCacheError):
            controller.get_products("", 0, 0, 10)
