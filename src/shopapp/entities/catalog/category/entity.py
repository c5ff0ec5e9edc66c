"""Entity: Category."""

from pydantic import Field

from src.shopapp.entities._base import Entity


class Category(Entity):
    """Product category. Products must reference an existing category."""

    name: str = Field(description="Category name")
