"""Database initialization script."""

from loguru import logger

from src.shopapp.core.services.database.db_manage import DbManageService


def init_db() -> None:
    """Create the catalog tables in the configured database."""
    DbManageService().create_all()
    logger.info("Catalog schema is ready")


if __name__ == "__main__":
    init_db()
