"""Entity: Product."""

from typing import Any

from pydantic import Field

from src.shopapp.entities._base import Entity
from src.shopapp.entities.catalog.product_image.entity import ProductImage


class Product(Entity):
    """Product entity representing an item in the catalog.

    ``product_images`` is only populated by the detail projection
    (``ProductRepository.get_detail``); plain lookups leave it empty.
    """

    name: str = Field(description="Product name")
    price: float = Field(default=0.0, description="Unit price")
    thumbnail: str | None = Field(default=None, description="Thumbnail image name")
    description: str = Field(default="", description="Free-text description")
    category_id: int | None = Field(default=None, description="Owning category")
    product_images: list[ProductImage] = Field(default_factory=list)

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.price == other.price
            and self.thumbnail == other.thumbnail
            and self.description == other.description
            and self.category_id == other.category_id
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.name,
            self.price,
            self.thumbnail,
            self.description,
            self.category_id,
        ))
