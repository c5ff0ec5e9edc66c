"""Product and product image business operations."""

from __future__ import annotations

import threading
import weakref
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from loguru import logger
from sqlmodel import Session

from src.shopapp.core.errors import DataNotFoundError, InvalidParamError
from src.shopapp.core.models.product import (
    Page,
    PageRequest,
    ProductDTO,
    ProductImageDTO,
    ProductResponse,
)
from src.shopapp.core.services.events.product_events import (
    ProductEventPublisher,
    ProductEventType,
)
from src.shopapp.entities.catalog import (
    MAXIMUM_IMAGES_PER_PRODUCT,
    Category,
    CategoryRepository,
    Product,
    ProductImage,
    ProductImageRepository,
    ProductRepository,
)

# Entries go away once no thread holds or waits on the lock
_image_locks: weakref.WeakValueDictionary[int, threading.Lock] = (
    weakref.WeakValueDictionary()
)
_image_locks_guard = threading.Lock()


def _product_image_lock(product_id: int) -> threading.Lock:
    """Lock serializing image inserts for one product."""
    with _image_locks_guard:
        lock = _image_locks.get(product_id)
        if lock is None:
            lock = _image_locks[product_id] = threading.Lock()
        return lock


class ProductService:
    """Product store, product image store and listing queries.

    Each write runs in its own unit of work on the injected session and
    emits a product event once committed.
    """

    def __init__(
        self,
        session: Session,
        product_repository: ProductRepository,
        category_repository: CategoryRepository,
        product_image_repository: ProductImageRepository,
        event_publisher: ProductEventPublisher,
    ) -> None:
        self._session = session
        self._products = product_repository
        self._categories = category_repository
        self._images = product_image_repository
        self._events = event_publisher

    @classmethod
    def from_session(
        cls, session: Session, event_publisher: ProductEventPublisher
    ) -> ProductService:
        return cls(
            session,
            ProductRepository(session),
            CategoryRepository(session),
            ProductImageRepository(session),
            event_publisher,
        )

    @contextmanager
    def _unit_of_work(self) -> Iterator[None]:
        try:
            yield
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

    def _require_category(self, category_id: int | None) -> Category:
        category = self._categories.get(category_id)
        if category is None:
            raise DataNotFoundError(f"Cannot find category with id: {category_id}")
        return category

    def create_product(self, dto: ProductDTO) -> Product:
        category = self._require_category(dto.category_id)
        product = Product(
            name=dto.name,
            price=dto.price if dto.price is not None else 0.0,
            thumbnail=dto.thumbnail,
            description=dto.description or "",
            category_id=category.id,
        )
        with self._unit_of_work():
            saved = self._products.save(product)

        logger.info("Created product {} ({})", saved.id, saved.name)
        self._events.publish(ProductEventType.CREATED, saved.id)
        return saved

    def get_product_by_id(self, product_id: int) -> Product:
        product = self._products.get_detail(product_id)
        if product is None:
            raise DataNotFoundError(f"Cannot find product with id: {product_id}")
        return product

    def find_products_by_ids(self, product_ids: Sequence[int]) -> list[Product]:
        return self._products.find_by_ids(product_ids)

    def get_all_products(
        self, keyword: str | None, category_id: int | None, page_request: PageRequest
    ) -> Page:
        products, total = self._products.search(
            keyword, category_id, page_request.page, page_request.size
        )
        return Page(
            content=[ProductResponse.from_product(product) for product in products],
            total_elements=total,
            page_request=page_request,
        )

    def update_product(self, product_id: int, dto: ProductDTO) -> Product:
        existing = self.get_product_by_id(product_id)
        category = self._require_category(dto.category_id)

        changes: dict[str, object] = {"category_id": category.id}
        if dto.name:
            changes["name"] = dto.name
        if dto.price is not None:
            changes["price"] = dto.price
        if dto.description:
            changes["description"] = dto.description
        if dto.thumbnail:
            changes["thumbnail"] = dto.thumbnail

        with self._unit_of_work():
            saved = self._products.save(existing.model_copy(update=changes))

        logger.info("Updated product {}", product_id)
        self._events.publish(ProductEventType.UPDATED, product_id)
        return saved

    def delete_product(self, product_id: int) -> None:
        existing = self._products.get(product_id)
        if existing is None:
            logger.debug("Product {} does not exist, nothing to delete", product_id)
            return

        with self._unit_of_work():
            self._products.delete(product_id)

        logger.info("Deleted product {}", product_id)
        self._events.publish(ProductEventType.DELETED, product_id)

    def exists_by_name(self, name: str) -> bool:
        return self._products.exists_by_name(name)

    def create_product_image(
        self, product_id: int, dto: ProductImageDTO
    ) -> ProductImage:
        """Attach an image to a product.

        The first image of a product without a thumbnail also becomes its
        thumbnail. Counting and inserting happen under a per-product lock.
        """
        return self.create_product_images(product_id, [dto])[0]

    def create_product_images(
        self, product_id: int, dtos: Sequence[ProductImageDTO]
    ) -> list[ProductImage]:
        """Attach a batch of images in one unit of work: all or none are saved."""
        with _product_image_lock(product_id):
            product = self._products.get(product_id)
            if product is None:
                raise DataNotFoundError(f"Cannot find product with id: {product_id}")

            existing_images = self._images.find_by_product_id(product_id)
            if len(existing_images) + len(dtos) > MAXIMUM_IMAGES_PER_PRODUCT:
                raise InvalidParamError(
                    f"Number of images must be <= {MAXIMUM_IMAGES_PER_PRODUCT}"
                )

            if not dtos:
                return []

            with self._unit_of_work():
                if not product.thumbnail:
                    self._products.save(
                        product.model_copy(update={"thumbnail": dtos[0].image_url})
                    )
                images = [
                    self._images.save(
                        ProductImage(product_id=product_id, image_url=dto.image_url)
                    )
                    for dto in dtos
                ]

        for image in images:
            logger.info("Added image {} to product {}", image.image_url, product_id)
        return images
