"""ProductImage database table model."""

from sqlmodel import Field

from src.shopapp.entities._base import EntityTable


class ProductImageTable(EntityTable, table=True):
    """Database persistence model for product images."""

    __tablename__ = "product_images"

    product_id: int = Field(foreign_key="products.id", index=True)
    image_url: str = Field(max_length=300)
