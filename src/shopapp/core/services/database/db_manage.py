"""Schema management for the catalog tables."""

from loguru import logger
from sqlalchemy import Engine
from sqlmodel import SQLModel, create_engine

from src.shopapp.runtime.context import get_config


class DbManageService:
    def __init__(self, engine: Engine | None = None):
        self._engine = engine or create_engine(
            get_config().database.connection_string, echo=False
        )

    def create_all(self) -> None:
        """Create all database tables."""
        from src.shopapp.entities.catalog import (  # noqa: F401
            CategoryTable,
            ProductImageTable,
            ProductTable,
        )

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")
