from sqlmodel import Session, col, select

from src.shopapp.entities.catalog.product_image.entity import ProductImage
from src.shopapp.entities.catalog.product_image.table import ProductImageTable


class ProductImageRepository:
    """Data-access layer for product images."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_product_id(self, product_id: int) -> list[ProductImage]:
        statement = (
            select(ProductImageTable)
            .where(ProductImageTable.product_id == product_id)
            .order_by(col(ProductImageTable.id))
        )
        return [
            ProductImage.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement).all()
        ]

    def save(self, image: ProductImage) -> ProductImage:
        row = ProductImageTable(product_id=image.product_id, image_url=image.image_url)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return ProductImage.model_validate(row, from_attributes=True)
