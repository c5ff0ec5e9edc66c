"""Request and response models of the product API."""

from __future__ import annotations

from datetime import datetime
from math import ceil

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from src.shopapp.entities.catalog.product.entity import Product
from src.shopapp.entities.catalog.product_image.entity import ProductImage

MAX_PRICE = 10_000_000


class ProductDTO(BaseModel):
    """Payload for creating or updating a product."""

    model_config = ConfigDict(frozen=True)

    name: str | None = Field(default=None, validate_default=True)
    price: float | None = None
    thumbnail: str | None = None
    description: str | None = None
    category_id: int | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PydanticCustomError("name_required", "Title is required")
        if isinstance(value, str) and not 3 <= len(value) <= 200:
            raise PydanticCustomError(
                "name_length", "Title must be between 3 and 200 characters"
            )
        return value

    @field_validator("price")
    @classmethod
    def _validate_price(cls, value):
        if value is None:
            return value
        if value < 0:
            raise PydanticCustomError(
                "price_min", "Price must be greater than or equal to 0"
            )
        if value > MAX_PRICE:
            raise PydanticCustomError(
                "price_max", "Price must be less than or equal to 10,000,000"
            )
        return value


class ProductImageDTO(BaseModel):
    """Payload for attaching a stored image to a product."""

    model_config = ConfigDict(frozen=True)

    product_id: int | None = None
    image_url: str = Field(min_length=5, max_length=300)


class PageRequest(BaseModel):
    """One page of a result set, sorted by id ascending."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=0, ge=0)
    size: int = Field(default=10, ge=1)
    sort: str = "id_asc"


class ProductResponse(BaseModel):
    """Product summary returned by the API and stored in the listing cache."""

    id: int | None = None
    name: str
    price: float = 0.0
    thumbnail: str | None = None
    description: str = ""
    category_id: int | None = None
    total_pages: int = 0
    product_images: list[ProductImage] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_product(cls, product: Product) -> ProductResponse:
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            thumbnail=product.thumbnail,
            description=product.description,
            category_id=product.category_id,
            product_images=product.product_images,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class Page(BaseModel):
    """A page of items and the page count of the whole result set."""

    content: list[ProductResponse]
    total_elements: int
    page_request: PageRequest

    @property
    def total_pages(self) -> int:
        return ceil(self.total_elements / self.page_request.size)


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    total_pages: int
