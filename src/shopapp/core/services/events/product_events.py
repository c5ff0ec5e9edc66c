"""Fire-and-forget notifications about product mutations.

Publishing never raises and never waits on the broker: the Redis publisher
hands each event to a single background worker and only logs failures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from enum import Enum

from loguru import logger
from pydantic import BaseModel, Field


class ProductEventType(str, Enum):
    CREATED = "product.created"
    UPDATED = "product.updated"
    DELETED = "product.deleted"


class ProductEvent(BaseModel):
    event: ProductEventType
    product_id: int
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ProductEventPublisher(ABC):
    """Abstract sink for product events."""

    @abstractmethod
    def publish(self, event_type: ProductEventType, product_id: int) -> None:
        """Emit an event. Must not raise."""

    def close(self) -> None:
        """Release background resources."""


class LoggingProductEventPublisher(ProductEventPublisher):
    """Publisher used when no broker is configured; events only reach the log."""

    def publish(self, event_type: ProductEventType, product_id: int) -> None:
        logger.info("Product event {} for product {}", event_type.value, product_id)


class RedisProductEventPublisher(ProductEventPublisher):
    """Publish events as JSON on a Redis pub/sub channel."""

    def __init__(self, redis_client, channel: str) -> None:
        self._redis = redis_client
        self._channel = channel
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="product-events"
        )

    def publish(self, event_type: ProductEventType, product_id: int) -> None:
        event = ProductEvent(event=event_type, product_id=product_id)
        try:
            self._executor.submit(self._send, event)
        except RuntimeError as e:
            # executor already shut down
            logger.warning("Dropped product event {}: {}", event.event.value, e)

    def _send(self, event: ProductEvent) -> None:
        try:
            self._redis.publish(self._channel, event.model_dump_json())
            logger.debug(
                "Published {} for product {} on {}",
                event.event.value,
                event.product_id,
                self._channel,
            )
        except Exception as e:
            logger.warning(
                "Failed to publish product event",
                extra={
                    "event": event.event.value,
                    "product_id": event.product_id,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )

    def close(self) -> None:
        self._executor.shutdown(wait=True)
