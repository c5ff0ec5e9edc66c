"""Redis connection service for managing Redis client lifecycle and health checks."""

from loguru import logger
from redis import Redis
from redis.backoff import ExponentialBackoff
from redis.retry import Retry

from src.shopapp.runtime.context import get_config


class RedisService:
    """Service for managing the shared Redis connection.

    Provides the client used by the product listing cache and the event
    publisher. When Redis is disabled, unconfigured or unreachable at startup
    the service reports itself as disabled and callers fall back to their
    in-process implementations.
    """

    def __init__(self):
        """Initialize the Redis service with connection pooling."""
        logger.info("Setting up Redis service")
        config = get_config()
        redis_config = config.redis

        self._enabled = redis_config.enabled
        self._client: Redis | None = None
        self._url = redis_config.url

        if not self._enabled:
            logger.info("Redis is disabled, service will not connect")
            return

        if not self._url:
            logger.warning("Redis URL not configured, service will not connect")
            self._enabled = False
            return

        try:
            logger.info(
                "Initializing Redis client with connection string: {}",
                redis_config.sanitized_connection_string,
            )

            retry = Retry(ExponentialBackoff(base=1, cap=10), retries=3)

            self._client = Redis.from_url(
                redis_config.connection_string,
                encoding="utf-8",
                decode_responses=redis_config.decode_responses,
                max_connections=redis_config.max_connections,
                socket_timeout=redis_config.socket_timeout,
                socket_connect_timeout=redis_config.socket_connect_timeout,
                socket_keepalive=True,
                health_check_interval=30,
                retry=retry,
                client_name="shopapp_redis_client",
            )
            self._client.ping()
            logger.info("Redis client initialized")
        except Exception as e:
            logger.error(
                "Failed to initialize Redis client",
                extra={
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            self._enabled = False
            self._client = None
            if config.app.environment == "production":
                raise

    def get_client(self) -> Redis | None:
        """Get the Redis client instance, or None if Redis is not in use."""
        if not self._enabled or not self._client:
            return None
        return self._client

    def health_check(self) -> bool:
        """Perform a health check on the Redis connection."""
        if not self._enabled or not self._client:
            return False

        try:
            return bool(self._client.ping())
        except Exception as e:
            logger.error(
                "Redis health check failed",
                extra={
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            return False

    def close(self) -> None:
        """Close the Redis connection and clean up resources."""
        if self._client:
            try:
                logger.info("Closing Redis connection")
                self._client.close()
            except Exception as e:
                logger.error(
                    "Error closing Redis connection",
                    extra={
                        "error_type": type(e).__name__,
                        "error_message": str(e),
                    },
                )
            finally:
                self._client = None

    @property
    def is_enabled(self) -> bool:
        """Check if Redis service is enabled."""
        return self._enabled
