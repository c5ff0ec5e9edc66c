from .file_storage import LocalFileStorage
from .image_validator import ImageUploadValidator
from .product_service import ProductService

__all__ = ["ImageUploadValidator", "LocalFileStorage", "ProductService"]
