"""Product listing cache interface and implementations.

Pages of product summaries are cached under a key built from the search
keyword, the category filter and the page request. Redis is used when it is
configured and reachable, otherwise an in-memory store with the same TTL
semantics.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any

from loguru import logger
from pydantic import TypeAdapter

from src.shopapp.core.errors import ProductCacheError
from src.shopapp.core.models.product import PageRequest, ProductResponse

_products_adapter = TypeAdapter(list[ProductResponse])


class ProductListCache(ABC):
    """Abstract interface for product listing cache backends."""

    def __init__(self, key_prefix: str = "all_products", ttl_seconds: int = 600):
        self._key_prefix = key_prefix
        self._ttl_seconds = ttl_seconds

    def build_key(
        self, keyword: str | None, category_id: int | None, page_request: PageRequest
    ) -> str:
        return (
            f"{self._key_prefix}:{keyword or ''}:{category_id or 0}:"
            f"{page_request.page}:{page_request.size}:{page_request.sort}"
        )

    @abstractmethod
    def get_all_products(
        self, keyword: str | None, category_id: int | None, page_request: PageRequest
    ) -> list[ProductResponse] | None:
        """Return the cached page, or None on a miss.

        Raises:
            ProductCacheError: If the backend or deserialization fails.
        """

    @abstractmethod
    def save_all_products(
        self,
        products: list[ProductResponse],
        keyword: str | None,
        category_id: int | None,
        page_request: PageRequest,
    ) -> None:
        """Store a page, replacing any previous value for the same key.

        Raises:
            ProductCacheError: If the backend or serialization fails.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the cache backend is available."""


class InMemoryProductListCache(ProductListCache):
    """In-memory listing cache with TTL support."""

    def __init__(self, key_prefix: str = "all_products", ttl_seconds: int = 600):
        super().__init__(key_prefix, ttl_seconds)
        self._data: dict[str, dict[str, Any]] = {}

    def get_all_products(
        self, keyword: str | None, category_id: int | None, page_request: PageRequest
    ) -> list[ProductResponse] | None:
        key = self.build_key(keyword, category_id, page_request)
        entry = self._data.get(key)
        if entry is None:
            return None

        if time.time() > entry["expires_at"]:
            del self._data[key]
            return None

        try:
            return _products_adapter.validate_json(entry["data"])
        except ValueError as e:
            del self._data[key]
            raise ProductCacheError(f"Cached products are corrupted: {e}") from e

    def save_all_products(
        self,
        products: list[ProductResponse],
        keyword: str | None,
        category_id: int | None,
        page_request: PageRequest,
    ) -> None:
        key = self.build_key(keyword, category_id, page_request)
        try:
            data = _products_adapter.dump_json(products)
        except ValueError as e:
            raise ProductCacheError(f"Cannot serialize products: {e}") from e

        now = time.time()
        self._prune_expired(now)
        self._data[key] = {"data": data, "expires_at": now + self._ttl_seconds}

    def _prune_expired(self, now: float) -> None:
        expired = [key for key, entry in self._data.items() if now > entry["expires_at"]]
        for key in expired:
            del self._data[key]

    def is_available(self) -> bool:
        """In-memory storage is always available."""
        return True


class RedisProductListCache(ProductListCache):
    """Redis-based listing cache storing JSON arrays with a TTL."""

    def __init__(
        self, redis_client, key_prefix: str = "all_products", ttl_seconds: int = 600
    ):
        super().__init__(key_prefix, ttl_seconds)
        self._redis = redis_client
        self._available = True

    def get_all_products(
        self, keyword: str | None, category_id: int | None, page_request: PageRequest
    ) -> list[ProductResponse] | None:
        key = self.build_key(keyword, category_id, page_request)
        try:
            data = self._redis.get(key)
            self._available = True
            if data is None:
                return None
            return _products_adapter.validate_json(data)
        except Exception as e:
            self._available = False
            raise ProductCacheError(f"Redis get failed: {e}") from e

    def save_all_products(
        self,
        products: list[ProductResponse],
        keyword: str | None,
        category_id: int | None,
        page_request: PageRequest,
    ) -> None:
        key = self.build_key(keyword, category_id, page_request)
        try:
            data = _products_adapter.dump_json(products).decode("utf-8")
            self._redis.setex(key, self._ttl_seconds, data)
            self._available = True
        except Exception as e:
            self._available = False
            raise ProductCacheError(f"Redis set failed: {e}") from e

    def is_available(self) -> bool:
        """Check if the last Redis operation succeeded."""
        return self._available


def create_product_list_cache(redis_client=None) -> ProductListCache:
    """Build the listing cache, preferring Redis when a client is available."""
    from src.shopapp.runtime.context import get_config

    config = get_config().product_cache
    if config.enabled and redis_client is not None:
        logger.info("Product listing cache: Redis")
        return RedisProductListCache(
            redis_client, key_prefix=config.key_prefix, ttl_seconds=config.ttl_seconds
        )

    logger.warning("Product listing cache: using in-memory storage")
    return InMemoryProductListCache(
        key_prefix=config.key_prefix, ttl_seconds=config.ttl_seconds
    )
