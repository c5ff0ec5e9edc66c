"""Catalog entities: categories, products and product images."""

from .category import Category, CategoryRepository, CategoryTable
from .product import Product, ProductRepository, ProductTable
from .product_image import (
    MAXIMUM_IMAGES_PER_PRODUCT,
    ProductImage,
    ProductImageRepository,
    ProductImageTable,
)

__all__ = [
    "Category",
    "CategoryRepository",
    "CategoryTable",
    "Product",
    "ProductRepository",
    "ProductTable",
    "ProductImage",
    "ProductImageRepository",
    "ProductImageTable",
    "MAXIMUM_IMAGES_PER_PRODUCT",
]
