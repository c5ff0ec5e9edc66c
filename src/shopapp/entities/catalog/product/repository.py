from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import func, or_
from sqlmodel import Session, col, select

from src.shopapp.entities.catalog.product.entity import Product
from src.shopapp.entities.catalog.product.table import ProductTable
from src.shopapp.entities.catalog.product_image.entity import ProductImage
from src.shopapp.entities.catalog.product_image.table import ProductImageTable

_WRITABLE_FIELDS = ("name", "price", "thumbnail", "description", "category_id")


class ProductRepository:
    """Data-access layer for products."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @staticmethod
    def _to_entity(row: ProductTable) -> Product:
        return Product.model_validate(row, from_attributes=True)

    def get(self, product_id: int) -> Product | None:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None
        return self._to_entity(row)

    def get_detail(self, product_id: int) -> Product | None:
        """Return the product together with its images."""
        product = self.get(product_id)
        if product is None:
            return None
        statement = (
            select(ProductImageTable)
            .where(ProductImageTable.product_id == product_id)
            .order_by(col(ProductImageTable.id))
        )
        product.product_images = [
            ProductImage.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement).all()
        ]
        return product

    def exists_by_name(self, name: str) -> bool:
        statement = select(ProductTable.id).where(ProductTable.name == name).limit(1)
        return self._session.exec(statement).first() is not None

    def find_by_ids(self, product_ids: Sequence[int]) -> list[Product]:
        if not product_ids:
            return []
        statement = (
            select(ProductTable)
            .where(col(ProductTable.id).in_(list(product_ids)))
            .order_by(col(ProductTable.id))
        )
        return [self._to_entity(row) for row in self._session.exec(statement).all()]

    def save(self, product: Product) -> Product:
        """Insert a new product or update the stored row with the same id."""
        values = {field: getattr(product, field) for field in _WRITABLE_FIELDS}
        if product.id is None:
            row = ProductTable(**values)
            self._session.add(row)
        else:
            row = self._session.get(ProductTable, product.id)
            if row is None:
                raise ValueError(f"Product with id {product.id} not found")
            for field, value in values.items():
                setattr(row, field, value)
            row.updated_at = datetime.now(UTC)
            self._session.add(row)

        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)

    def delete(self, product_id: int) -> bool:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return False
        images = self._session.exec(
            select(ProductImageTable).where(ProductImageTable.product_id == product_id)
        ).all()
        for image in images:
            self._session.delete(image)
        self._session.delete(row)
        self._session.flush()
        return True

    def search(
        self,
        keyword: str | None,
        category_id: int | None,
        page: int,
        size: int,
    ) -> tuple[list[Product], int]:
        """Return one page of products ordered by id and the total match count.

        An empty keyword and a category id of 0 or None match everything.
        """
        conditions = []
        if category_id:
            conditions.append(ProductTable.category_id == category_id)
        if keyword:
            conditions.append(
                or_(
                    col(ProductTable.name).contains(keyword),
                    col(ProductTable.description).contains(keyword),
                )
            )

        count_statement = select(func.count()).select_from(ProductTable).where(*conditions)
        total = self._session.exec(count_statement).one()

        statement = (
            select(ProductTable)
            .where(*conditions)
            .order_by(col(ProductTable.id))
            .offset(page * size)
            .limit(size)
        )
        rows = self._session.exec(statement).all()
        return [self._to_entity(row) for row in rows], int(total)
