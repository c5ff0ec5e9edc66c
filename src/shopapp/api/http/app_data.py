from dataclasses import dataclass

from src.shopapp.core.services import (
    DbSessionService,
    ImageUploadValidator,
    LocalFileStorage,
    Localizer,
    ProductEventPublisher,
    RedisService,
)
from src.shopapp.core.storage import ProductListCache


@dataclass
class ApplicationDependencies:
    """Process-wide collaborators assembled once at startup."""

    database_service: DbSessionService
    redis_service: RedisService
    product_cache: ProductListCache
    event_publisher: ProductEventPublisher
    localizer: Localizer
    file_storage: LocalFileStorage
    image_validator: ImageUploadValidator
