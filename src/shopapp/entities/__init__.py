"""Entities module with an entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .catalog import (
    MAXIMUM_IMAGES_PER_PRODUCT,
    Category,
    CategoryRepository,
    CategoryTable,
    Product,
    ProductImage,
    ProductImageRepository,
    ProductImageTable,
    ProductRepository,
    ProductTable,
)

__all__ = [
    "Category",
    "CategoryTable",
    "CategoryRepository",
    "Product",
    "ProductTable",
    "ProductRepository",
    "ProductImage",
    "ProductImageTable",
    "ProductImageRepository",
    "MAXIMUM_IMAGES_PER_PRODUCT",
]
