from .product_cache import (
    InMemoryProductListCache,
    ProductListCache,
    RedisProductListCache,
    create_product_list_cache,
)

__all__ = [
    "InMemoryProductListCache",
    "ProductListCache",
    "RedisProductListCache",
    "create_product_list_cache",
]
