"""Entity package: ProductImage."""

from .entity import MAXIMUM_IMAGES_PER_PRODUCT, ProductImage
from .repository import ProductImageRepository
from .table import ProductImageTable

__all__ = [
    "MAXIMUM_IMAGES_PER_PRODUCT",
    "ProductImage",
    "ProductImageRepository",
    "ProductImageTable",
]
