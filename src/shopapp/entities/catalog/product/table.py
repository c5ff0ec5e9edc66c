"""Product database table model."""

from sqlmodel import Field

from src.shopapp.entities._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products.

    This represents how the Product entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    __tablename__ = "products"

    name: str = Field(max_length=350, index=True)
    price: float = Field(default=0.0)
    thumbnail: str | None = Field(default=None, max_length=300)
    description: str = Field(default="")
    category_id: int = Field(foreign_key="categories.id", index=True)
