from sqlmodel import Session

from src.shopapp.entities.catalog.category.entity import Category
from src.shopapp.entities.catalog.category.table import CategoryTable


class CategoryRepository:
    """Data-access layer for categories."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, category_id: int | None) -> Category | None:
        if category_id is None:
            return None
        row = self._session.get(CategoryTable, category_id)
        if row is None:
            return None
        return Category.model_validate(row, from_attributes=True)

    def create(self, category: Category) -> Category:
        row = CategoryTable(name=category.name)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Category.model_validate(row, from_attributes=True)
