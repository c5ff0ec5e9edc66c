"""Entity: ProductImage."""

from pydantic import Field

from src.shopapp.entities._base import Entity

MAXIMUM_IMAGES_PER_PRODUCT = 5


class ProductImage(Entity):
    """Image attached to a product. A product holds at most five of them."""

    product_id: int | None = Field(default=None, description="Owning product")
    image_url: str = Field(max_length=300, description="Stored image name")
