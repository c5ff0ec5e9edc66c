"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

import os
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:4200"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class RedisConfig(BaseModel):
    """Redis configuration model."""

    enabled: bool = Field(default=True, description="Enable Redis service")
    url: str = Field(default="", description="Redis connection URL")
    password: str | None = Field(
        default=None, description="Password for Redis authentication"
    )
    decode_responses: bool = Field(
        default=True, description="Decode Redis responses to strings"
    )
    socket_timeout: float = Field(default=2.0, description="Socket timeout in seconds")
    socket_connect_timeout: float = Field(
        default=2.0, description="Connect timeout in seconds"
    )
    max_connections: int = Field(default=20, description="Connection pool size")

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the Redis connection string with password if provided."""
        if self.password:
            if "@" in self.url:
                # URL already has auth info
                return self.url
            parts = self.url.split("://", 1)
            if len(parts) == 2:
                scheme, rest = parts
                return f"{scheme}://:{self.password}@{rest}"
        return self.url

    @property
    def sanitized_connection_string(self) -> str:
        """Connection string with any password masked, for logging."""
        if not self.password:
            return self.url
        return self.connection_string.replace(self.password, "***")


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str = Field(default="logs/app.log", description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./shopapp.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )

    @computed_field
    @property
    def password(self) -> str | None:
        """Resolve the database password.

        A password embedded in the URL wins; otherwise the mounted secrets file
        and then the named environment variable are consulted.
        """
        from sqlalchemy.engine import make_url

        url_obj = make_url(self.url)
        if url_obj.password:
            return url_obj.password

        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError("Failed to read database password from file.") from e

        if self.password_env_var:
            password = os.getenv(self.password_env_var)
            if password:
                return password
            raise ValueError(f"Environment variable {self.password_env_var} not set")

        return None

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string with password if provided."""
        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        if base_url.password or base_url.get_backend_name() == "sqlite":
            return self.url

        resolved_password = self.password
        if not resolved_password:
            return self.url

        logger.debug("Injecting resolved password into database URL")
        return base_url.set(password=resolved_password).render_as_string(
            hide_password=False
        )


class ProductCacheConfig(BaseModel):
    """Cache-aside settings for paginated product listings."""

    enabled: bool = Field(default=True, description="Use Redis when available")
    ttl_seconds: int = Field(default=600, description="Lifetime of a cached page")
    key_prefix: str = Field(default="all_products", description="Cache key prefix")


class UploadConfig(BaseModel):
    """Product image upload constraints and storage location."""

    directory: str = Field(default="uploads", description="Image storage directory")
    max_files_per_upload: int = Field(
        default=5, description="Maximum number of files in one upload request"
    )
    max_file_size_mb: int = Field(default=10, description="Maximum size of one file")
    fallback_image: str = Field(
        default="notfound.jpeg",
        description="Image served when the requested one does not exist",
    )

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


class EventsConfig(BaseModel):
    """Product event notification settings."""

    enabled: bool = Field(default=True, description="Publish product events")
    channel: str = Field(default="product-events", description="Redis pub/sub channel")


class I18nConfig(BaseModel):
    """Localization settings."""

    default_language: str = Field(default="en", description="Fallback language")
    supported_languages: list[str] = Field(default_factory=lambda: ["en", "vi"])


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8088, description="Application port")
    api_prefix: str = Field(default="/api/v1", description="Prefix of business routes")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    redis: RedisConfig = Field(
        default_factory=RedisConfig, description="Redis configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    product_cache: ProductCacheConfig = Field(
        default_factory=ProductCacheConfig, description="Product listing cache"
    )
    uploads: UploadConfig = Field(
        default_factory=UploadConfig, description="Image upload configuration"
    )
    events: EventsConfig = Field(
        default_factory=EventsConfig, description="Product event configuration"
    )
    i18n: I18nConfig = Field(
        default_factory=I18nConfig, description="Localization configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
