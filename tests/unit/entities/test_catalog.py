"""Unit tests for the catalog entity packages.

Each entity package colocates the domain model, the table model and the
repository; these tests run the repositories against in-memory SQLite.
"""

import pytest

from src.shopapp.entities.catalog import (
    Category,
    CategoryRepository,
    Product,
    ProductImage,
    ProductImageRepository,
    ProductRepository,
)


class TestCategoryRepository:
    """Test category persistence."""

    def test_create_assigns_id(self, session):
        """Created categories get an integer id."""
        created = CategoryRepository(session).create(Category(name="Books"))

        assert isinstance(created.id, int)
        assert created.name == "Books"

    def test_get_missing_category(self, session):
        """Unknown and absent ids resolve to None."""
        repository = CategoryRepository(session)

        assert repository.get(999) is None
        assert repository.get(None) is None


class TestProduct:
    """Test the Product domain entity."""

    def test_equality_ignores_timestamps(self):
        first = Product(id=1, name="Phone", price=10.0, category_id=2)
        second = first.model_copy(update={"updated_at": None})

        assert first == second
        assert hash(first) == hash(second)

    def test_defaults(self):
        product = Product(name="Phone")

        assert product.id is None
        assert product.price == 0.0
        assert product.description == ""
        assert product.product_images == []


class TestProductRepository:
    """Test product persistence and search."""

    def test_save_inserts_new_product(self, session, category):
        repository = ProductRepository(session)

        saved = repository.save(
            Product(name="Laptop", price=999.0, category_id=category.id)
        )

        assert saved.id is not None
        assert repository.get(saved.id) == saved

    def test_save_updates_existing_product(self, session, product_factory):
        product = product_factory("Laptop")
        repository = ProductRepository(session)

        updated = repository.save(product.model_copy(update={"price": 10.0}))

        assert updated.id == product.id
        assert repository.get(product.id).price == 10.0

    def test_save_unknown_id_raises(self, session, category):
        repository = ProductRepository(session)

        with pytest.raises(ValueError, match="not found"):
            repository.save(Product(id=42, name="Ghost", category_id=category.id))

    def test_get_detail_loads_images(self, session, product_factory):
        product = product_factory("Camera")
        images = ProductImageRepository(session)
        images.save(ProductImage(product_id=product.id, image_url="a.jpg"))
        images.save(ProductImage(product_id=product.id, image_url="b.jpg"))

        detail = ProductRepository(session).get_detail(product.id)

        assert [image.image_url for image in detail.product_images] == ["a.jpg", "b.jpg"]
        assert ProductRepository(session).get_detail(999) is None

    def test_exists_by_name(self, session, product_factory):
        product_factory("Keyboard")
        repository = ProductRepository(session)

        assert repository.exists_by_name("Keyboard")
        assert not repository.exists_by_name("Mouse")

    def test_find_by_ids_orders_by_id_and_skips_unknown(self, session, product_factory):
        first = product_factory("Alpha")
        second = product_factory("Beta")

        found = ProductRepository(session).find_by_ids([second.id, 999, first.id])

        assert [product.id for product in found] == [first.id, second.id]
        assert ProductRepository(session).find_by_ids([]) == []

    def test_delete_removes_product_and_images(self, session, product_factory):
        product = product_factory("Tablet")
        images = ProductImageRepository(session)
        images.save(ProductImage(product_id=product.id, image_url="t.jpg"))
        repository = ProductRepository(session)

        assert repository.delete(product.id) is True
        assert repository.get(product.id) is None
        assert images.find_by_product_id(product.id) == []
        assert repository.delete(product.id) is False


class TestProductSearch:
    """Test keyword, category and page filtering."""

    @pytest.fixture
    def catalog(self, session, category, product_factory):
        other = CategoryRepository(session).create(Category(name="Garden"))
        session.commit()
        product_factory("Gaming Laptop", description="Fast")
        product_factory("Office Laptop", description="Quiet")
        product_factory("Desk Lamp", description="Warm laptop light")
        product_factory("Hose", description="Green", category_id=other.id)
        return other

    def test_empty_filters_match_everything(self, session, catalog):
        products, total = ProductRepository(session).search(None, 0, 0, 10)

        assert total == 4
        assert [p.name for p in products] == [
            "Gaming Laptop",
            "Office Laptop",
            "Desk Lamp",
            "Hose",
        ]

    def test_keyword_matches_name_or_description(self, session, catalog):
        products, total = ProductRepository(session).search("aptop", 0, 0, 10)

        assert total == 3
        assert {p.name for p in products} == {
            "Gaming Laptop",
            "Office Laptop",
            "Desk Lamp",
        }

    def test_category_filter(self, session, catalog):
        products, total = ProductRepository(session).search("", catalog.id, 0, 10)

        assert total == 1
        assert products[0].name == "Hose"

    def test_pagination(self, session, catalog):
        products, total = ProductRepository(session).search(None, None, 1, 3)

        assert total == 4
        assert [p.name for p in products] == ["Hose"]
