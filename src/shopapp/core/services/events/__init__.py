from .product_events import (
    LoggingProductEventPublisher,
    ProductEvent,
    ProductEventPublisher,
    ProductEventType,
    RedisProductEventPublisher,
)

__all__ = [
    "LoggingProductEventPublisher",
    "ProductEvent",
    "ProductEventPublisher",
    "ProductEventType",
    "RedisProductEventPublisher",
]
