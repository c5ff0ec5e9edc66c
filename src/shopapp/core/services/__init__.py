"""Core services exports."""

# Database Service
from .database.db_session import DbSessionService

# Product event notifications
from .events.product_events import (
    LoggingProductEventPublisher,
    ProductEventPublisher,
    RedisProductEventPublisher,
)

# Localization
from .i18n.localization import Localizer, MessageKeys

# Catalog Services
from .product.file_storage import LocalFileStorage
from .product.image_validator import ImageUploadValidator
from .product.product_service import ProductService

# Redis
from .redis_service import RedisService

__all__ = [
    "DbSessionService",
    "RedisService",
    "ProductEventPublisher",
    "LoggingProductEventPublisher",
    "RedisProductEventPublisher",
    "Localizer",
    "MessageKeys",
    "LocalFileStorage",
    "ImageUploadValidator",
    "ProductService",
]
